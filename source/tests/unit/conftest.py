"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import os
import typing

import boto3
import pytest

from moto import mock_aws  # type: ignore

from bucketmigrate.application.storage.client import StorageClient


if typing.TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
else:
    S3Client = object


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto"""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ["AWS_REGION"] = "us-east-1"


@pytest.fixture
def s3_client(aws_credentials: None) -> typing.Iterator[S3Client]:
    with mock_aws():
        connection: S3Client = boto3.client("s3", region_name="us-east-1")
        yield connection


@pytest.fixture
def storage_client(s3_client: S3Client) -> StorageClient:
    return StorageClient(s3_client, "us-east-1")
