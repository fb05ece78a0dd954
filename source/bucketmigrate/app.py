"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import logging
import sys
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from bucketmigrate.application.config.settings import MigrationSettings, SweepSettings
from bucketmigrate.application.migration.planner import MigrationPlanner
from bucketmigrate.application.storage.client_factory import StorageClientFactory
from bucketmigrate.application.sweep.sweeper import BucketSweeper
from bucketmigrate.application.util.exceptions import (
    BucketConflictError,
    ConfigurationError,
    ListingError,
    TransferError,
)

logger = logging.getLogger()
logger.setLevel(logging.INFO)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2


def run_migration(settings: MigrationSettings, mock: bool = False) -> int:
    planner = MigrationPlanner(
        StorageClientFactory.create_instance(settings.source, mock),
        StorageClientFactory.create_instance(settings.destination, mock),
        settings,
    )
    try:
        report = planner.run()
    except ConfigurationError as e:
        logger.error(f"Migration stopped, configuration error: {e.message}")
        return EXIT_FATAL
    except (BucketConflictError, ListingError, TransferError) as e:
        logger.error(f"Migration stopped: {e.message}")
        logger.info(f"Progress before stopping: {planner.report.summary()}")
        return EXIT_FATAL
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Migration stopped, storage error: {e}")
        return EXIT_FATAL

    if not report.succeeded:
        logger.warning("Some objects were not migrated, run the migration again to retry them")
        return EXIT_PARTIAL
    logger.info("Done!")
    return EXIT_OK


def run_sweep(settings: SweepSettings, mock: bool = False) -> int:
    sweeper = BucketSweeper(
        StorageClientFactory.create_instance(settings.target, mock),
        settings.abort_incomplete_uploads,
    )
    try:
        report = sweeper.sweep()
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Sweep stopped, storage error: {e}")
        return EXIT_FATAL
    return EXIT_OK if report.succeeded else EXIT_PARTIAL


def main(settings: Optional[MigrationSettings] = None) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(message)s")
    try:
        settings = settings or MigrationSettings.from_env()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e.message}")
        sys.exit(EXIT_FATAL)
    sys.exit(run_migration(settings))


def sweep(settings: Optional[SweepSettings] = None) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(message)s")
    try:
        settings = settings or SweepSettings.from_env()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e.message}")
        sys.exit(EXIT_FATAL)
    sys.exit(run_sweep(settings))
