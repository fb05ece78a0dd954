"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import pytest

from bucketmigrate.application.config.settings import (
    EndpointSettings,
    MigrationSettings,
)
from bucketmigrate.application.mocking.mock_storage import MockStorageClient


@pytest.fixture
def source_storage() -> MockStorageClient:
    return MockStorageClient(region="us-east-1")


@pytest.fixture
def destination_storage() -> MockStorageClient:
    return MockStorageClient(region="ap-northeast-1")


@pytest.fixture
def migration_settings() -> MigrationSettings:
    return MigrationSettings(
        source=EndpointSettings(role="source"),
        destination=EndpointSettings(role="destination", region="ap-northeast-1"),
        bucket_suffix="-migrated",
    )
