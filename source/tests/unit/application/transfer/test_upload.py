"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import typing

import pytest

from bucketmigrate.application.mocking.mock_storage import MockStorageClient
from bucketmigrate.application.storage.client import StorageClient
from bucketmigrate.application.transfer.upload import ChunkedUpload, UploadState
from bucketmigrate.application.util.exceptions import (
    SessionOpenFailed,
    UploadAlreadyFinalized,
)

if typing.TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client
else:
    S3Client = object

MiB = 1024 * 1024


@pytest.fixture
def storage() -> MockStorageClient:
    storage = MockStorageClient()
    storage.seed("test-bucket", {})
    return storage


@pytest.fixture
def chunked_upload(storage: MockStorageClient) -> ChunkedUpload:
    return ChunkedUpload(storage, "test-bucket", "test-key")


def test_build_part() -> None:
    assert ChunkedUpload._build_part(part_number=1, etag="test-etag") == {
        "PartNumber": 1,
        "ETag": "test-etag",
    }


def test_init_opens_session(
    storage: MockStorageClient, chunked_upload: ChunkedUpload
) -> None:
    assert chunked_upload.state is UploadState.OPEN
    assert chunked_upload.upload_id in storage.uploads


def test_init_with_existing_upload_id(storage: MockStorageClient) -> None:
    upload = ChunkedUpload(storage, "test-bucket", "test-key", upload_id="upload1")
    assert upload.upload_id == "upload1"
    assert storage.count_calls("CreateMultipartUpload") == 0


def test_init_open_failure(storage: MockStorageClient) -> None:
    storage.inject_failure("CreateMultipartUpload")
    with pytest.raises(SessionOpenFailed):
        ChunkedUpload(storage, "test-bucket", "test-key")


def test_include_part(chunked_upload: ChunkedUpload) -> None:
    chunked_upload.include_part(part_number=1, etag="test-etag")
    assert chunked_upload.parts == [{"PartNumber": 1, "ETag": "test-etag"}]


def test_sorted_parts(chunked_upload: ChunkedUpload) -> None:
    for part_number in (3, 1, 2):
        chunked_upload.include_part(part_number, f"etag-{part_number}")
    assert [part["PartNumber"] for part in chunked_upload.sorted_parts()] == [1, 2, 3]


def test_complete_upload_out_of_order(
    storage: MockStorageClient, chunked_upload: ChunkedUpload
) -> None:
    chunked_upload.upload_part(b"second", 2)
    chunked_upload.upload_part(b"first-", 1)
    chunked_upload.complete_upload()

    assert chunked_upload.state is UploadState.COMPLETED
    assert storage.buckets["test-bucket"]["test-key"] == b"first-second"
    assert storage.completed_uploads == [chunked_upload.upload_id]


def test_abort_upload(storage: MockStorageClient, chunked_upload: ChunkedUpload) -> None:
    chunked_upload.upload_part(b"chunk", 1)
    chunked_upload.abort_upload()

    assert chunked_upload.state is UploadState.ABORTED
    assert storage.uploads == {}
    assert "test-key" not in storage.buckets["test-bucket"]


def test_finalized_upload_rejects_changes(chunked_upload: ChunkedUpload) -> None:
    chunked_upload.upload_part(b"chunk", 1)
    chunked_upload.complete_upload()
    with pytest.raises(UploadAlreadyFinalized):
        chunked_upload.upload_part(b"chunk", 2)
    with pytest.raises(UploadAlreadyFinalized):
        chunked_upload.abort_upload()
    with pytest.raises(UploadAlreadyFinalized):
        chunked_upload.complete_upload()


def test_complete_upload_dual_parts_against_moto(
    storage_client: StorageClient, s3_client: S3Client
) -> None:
    s3_client.create_bucket(Bucket="test-bucket")
    upload = ChunkedUpload(storage_client, "test-bucket", "test-key")
    upload.upload_part(b"test-chunk2", 2)
    # Upload larger chunk to avoid EntityTooSmall exception
    upload.upload_part(b"test-chunk" * 2**20, 1)
    upload.complete_upload()

    head = s3_client.head_object(Bucket="test-bucket", Key="test-key")
    assert head["ETag"][-2] == "2"  # Assert that there were 2 parts included
    assert head["ContentLength"] == 10 * 2**20 + 11
