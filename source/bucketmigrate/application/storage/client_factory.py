"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import logging
import os
from typing import TYPE_CHECKING

import boto3
import botocore.session
from botocore.config import Config

from bucketmigrate.application.config.settings import EndpointSettings
from bucketmigrate.application.mocking.mock_storage import MockStorageClient
from bucketmigrate.application.storage.client import StorageClient

if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client
else:
    S3Client = object

logger = logging.getLogger()


class StorageClientFactory:
    """
    This class is used to create a StorageClient for either a real S3
    compatible endpoint or the in-memory mock, depending on the passed
    parameter 'mock'

    Usage example:
    - For a real endpoint
        source = StorageClientFactory.create_instance(settings.source)
        source.list_buckets()
    - For the in-memory mock
        mock_source = StorageClientFactory.create_instance(settings.source, mock=True)
        mock_source.list_buckets()
    """

    @staticmethod
    def create_instance(settings: EndpointSettings, mock: bool = False) -> StorageClient:
        if mock:
            return MockStorageClient(region=settings.region)
        session = StorageClientFactory.create_session(settings)
        s3: S3Client = session.client(
            "s3",
            endpoint_url=settings.endpoint_url,
            config=StorageClientFactory.client_config(settings),
        )
        return StorageClient(s3, settings.region)

    @staticmethod
    def client_config(settings: EndpointSettings) -> Config:
        # Path style addressing is required by most non-AWS providers
        return Config(
            region_name=settings.region,
            retries={"mode": "standard", "max_attempts": settings.max_attempts},
            s3={"addressing_style": "path"},
            max_pool_connections=settings.max_pool_connections,
        )

    @staticmethod
    def create_session(settings: EndpointSettings) -> boto3.session.Session:
        credentials_file = settings.credentials_file
        if not credentials_file or not os.path.isfile(credentials_file):
            logger.warning(
                f"Credentials file {credentials_file} for the {settings.role} endpoint was not found, falling back to the default credential chain"
            )
            return boto3.session.Session()
        core_session = botocore.session.Session()
        core_session.set_config_variable(
            "credentials_file", os.path.abspath(credentials_file)
        )
        core_session.set_config_variable("profile", settings.profile)
        return boto3.session.Session(botocore_session=core_session)
