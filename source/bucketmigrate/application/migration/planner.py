"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import logging
from typing import AbstractSet, Iterable, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from bucketmigrate.application.config.settings import ErrorPolicy, MigrationSettings
from bucketmigrate.application.model.reports import (
    BucketMigrationReport,
    MigrationReport,
)
from bucketmigrate.application.storage.client import BucketCreation, StorageClient
from bucketmigrate.application.storage.listing import list_all_keys
from bucketmigrate.application.transfer.facilitator import ObjectTransferFacilitator
from bucketmigrate.application.util.exceptions import (
    BucketConflictError,
    BucketNameExhausted,
    ListingError,
    NoSuffixConfigured,
    TransferError,
)

logger = logging.getLogger()


def pending_keys(source_keys: Iterable[str], migrated: AbstractSet[str]) -> List[str]:
    # Key presence only, content is not compared
    return [key for key in source_keys if key not in migrated]


class MigrationPlanner:
    """
    Copies every bucket of the source endpoint to the destination endpoint.

    Each run compares the source listing against what the destination already
    holds, so running it again after an interruption only copies what is
    missing. Objects are copied one at a time in source listing order.
    """

    def __init__(
        self,
        source: StorageClient,
        destination: StorageClient,
        settings: MigrationSettings,
        facilitator: Optional[ObjectTransferFacilitator] = None,
    ) -> None:
        self.source = source
        self.destination = destination
        self.settings = settings
        self.facilitator = facilitator or ObjectTransferFacilitator(
            source, destination, settings.chunk_size, settings.max_part_workers
        )
        self.report = MigrationReport()

    def run(self) -> MigrationReport:
        """
        :raises ConfigurationError: If a bucket name is taken and no suffix is configured.

        :raises BucketConflictError: If both names are taken and the bucket policy is HALT.

        :raises ListingError: If a listing failed and the bucket policy is HALT.

        :raises TransferError: If an object failed and the object policy is HALT.
        """
        self.report = MigrationReport()
        for bucket_name in self.source.list_buckets():
            bucket_report = BucketMigrationReport(bucket_name)
            self.report.buckets.append(bucket_report)
            try:
                self.migrate_bucket(bucket_name, bucket_report)
            except (
                BucketConflictError, ListingError, ClientError, BotoCoreError
            ) as e:
                bucket_report.error = getattr(e, "message", str(e))
                logger.error(f"Migrating bucket {bucket_name} failed: {bucket_report.error}")
                if self.settings.bucket_error_policy is ErrorPolicy.HALT:
                    self.report.halted = True
                    raise
            except (NoSuffixConfigured, TransferError) as e:
                bucket_report.error = e.message
                self.report.halted = True
                raise
        logger.info(f"Migration finished: {self.report.summary()}")
        return self.report

    def migrate_bucket(
        self, bucket_name: str, report: Optional[BucketMigrationReport] = None
    ) -> BucketMigrationReport:
        report = report or BucketMigrationReport(bucket_name)
        logger.info(f"Bucket: {bucket_name}")

        destination_name = self.resolve_bucket_name(bucket_name)
        report.destination_name = destination_name
        logger.info(f"New Bucket: {destination_name}")

        source_keys = list_all_keys(self.source, bucket_name, self.settings.max_keys)
        migrated = frozenset(list_all_keys(self.destination, destination_name))
        pending = pending_keys(source_keys, migrated)
        report.listed = len(source_keys)
        report.skipped = len(source_keys) - len(pending)
        logger.info(
            f"{len(pending)} of {len(source_keys)} object(s) in {bucket_name} still need to be migrated"
        )

        for key in pending:
            try:
                strategy = self.facilitator.transfer(bucket_name, destination_name, key)
            except TransferError as e:
                logger.error(e.message)
                report.record_failure(key, e.message)
                if self.settings.object_error_policy is ErrorPolicy.HALT:
                    raise
                continue
            report.record_transfer(key, strategy)
        return report

    def resolve_bucket_name(self, bucket_name: str) -> str:
        if self.destination.create_bucket(bucket_name) is not BucketCreation.ALREADY_EXISTS:
            return bucket_name

        if not self.settings.bucket_suffix:
            raise NoSuffixConfigured(bucket_name)

        suffixed_name = bucket_name + self.settings.bucket_suffix
        logger.info(f"Bucket name {bucket_name} is taken, trying {suffixed_name}")
        if self.destination.create_bucket(suffixed_name) is BucketCreation.ALREADY_EXISTS:
            raise BucketNameExhausted(bucket_name, suffixed_name)
        return suffixed_name
