"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import hashlib
import logging
import threading
import uuid
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from botocore.exceptions import ClientError

from bucketmigrate.application.storage.client import (
    BucketCreation,
    ObjectListing,
    StorageClient,
)

logger = logging.getLogger()

DEFAULT_PAGE_SIZE = 1000


class MockStorageClient(StorageClient):
    """
    In-memory stand-in for one S3 compatible endpoint.

    Listing is lexicographic and paged like S3. Failures can be injected per
    operation, optionally narrowed to a key and a part number, and every call
    is recorded in `calls`.
    """

    def __init__(
        self,
        region: Optional[str] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        foreign_buckets: Optional[Set[str]] = None,
    ) -> None:
        super().__init__(s3_client=None, region=region)  # type: ignore
        self.page_size = page_size
        self.foreign_buckets: Set[str] = set(foreign_buckets or ())
        self.buckets: Dict[str, Dict[str, bytes]] = {}
        self.uploads: Dict[str, Dict[str, Any]] = {}
        self.completed_uploads: List[str] = []
        self.aborted_uploads: List[str] = []
        self.calls: List[Tuple[Any, ...]] = []
        self.failures: Dict[
            Tuple[str, Optional[str], Optional[int]], Optional[Exception]
        ] = {}
        self._lock = threading.Lock()

    def seed(self, bucket: str, objects: Dict[str, bytes]) -> None:
        with self._lock:
            self.buckets.setdefault(bucket, {}).update(objects)

    def inject_failure(
        self,
        operation: str,
        key: Optional[str] = None,
        part_number: Optional[int] = None,
        error: Optional[Exception] = None,
    ) -> None:
        # Without `error` the call fails with an InternalError ClientError
        self.failures[(operation, key, part_number)] = error

    def count_calls(self, operation: str) -> int:
        with self._lock:
            return sum(1 for call in self.calls if call[0] == operation)

    def list_buckets(self) -> List[str]:
        self._record("ListBuckets")
        with self._lock:
            return sorted(self.buckets)

    def create_bucket(self, name: str) -> BucketCreation:
        self._record("CreateBucket", name)
        with self._lock:
            if name in self.foreign_buckets:
                return BucketCreation.ALREADY_EXISTS
            if name in self.buckets:
                return BucketCreation.ALREADY_OWNED
            self.buckets[name] = {}
        return BucketCreation.CREATED

    def delete_bucket(self, name: str) -> None:
        self._record("DeleteBucket", name)
        with self._lock:
            objects = self._bucket(name, "DeleteBucket")
            if objects:
                raise _client_error("BucketNotEmpty", "DeleteBucket", name)
            del self.buckets[name]

    def list_objects(
        self,
        bucket: str,
        continuation_token: Optional[str] = None,
        max_keys: Optional[int] = None,
    ) -> ObjectListing:
        self._record("ListObjects", bucket)
        page_size = min(max_keys or self.page_size, self.page_size)
        with self._lock:
            keys = sorted(self._bucket(bucket, "ListObjectsV2"))
        if continuation_token is not None:
            keys = [key for key in keys if key > continuation_token]
        page = keys[:page_size]
        next_token = page[-1] if len(keys) > page_size else None
        return ObjectListing(page, next_token)

    def get_object(self, bucket: str, key: str) -> bytes:
        self._record("GetObject", bucket, key)
        with self._lock:
            objects = self._bucket(bucket, "GetObject")
            if key not in objects:
                raise _client_error("NoSuchKey", "GetObject", key)
            return objects[key]

    def put_object(self, bucket: str, key: str, body: bytes) -> None:
        self._record("PutObject", bucket, key)
        with self._lock:
            self._bucket(bucket, "PutObject")[key] = bytes(body)

    def delete_object(self, bucket: str, key: str) -> None:
        self._record("DeleteObject", bucket, key)
        with self._lock:
            self._bucket(bucket, "DeleteObject").pop(key, None)

    def create_multipart_upload(self, bucket: str, key: str) -> str:
        self._record("CreateMultipartUpload", bucket, key)
        upload_id = uuid.uuid4().hex
        with self._lock:
            self._bucket(bucket, "CreateMultipartUpload")
            self.uploads[upload_id] = {"Bucket": bucket, "Key": key, "Parts": {}}
        return upload_id

    def upload_part(
        self, bucket: str, key: str, upload_id: str, part_number: int, body: bytes
    ) -> str:
        self._record("UploadPart", bucket, key, part_number)
        etag = f'"{hashlib.md5(body).hexdigest()}"'
        with self._lock:
            upload = self._upload(upload_id, "UploadPart")
            upload["Parts"][part_number] = (etag, bytes(body))
        return etag

    def complete_multipart_upload(
        self, bucket: str, key: str, upload_id: str, parts: Sequence[Any]
    ) -> None:
        self._record("CompleteMultipartUpload", bucket, key)
        with self._lock:
            upload = self._upload(upload_id, "CompleteMultipartUpload")
            part_numbers = [part["PartNumber"] for part in parts]
            if part_numbers != sorted(part_numbers):
                raise _client_error("InvalidPartOrder", "CompleteMultipartUpload", key)
            chunks = []
            for part in parts:
                stored = upload["Parts"].get(part["PartNumber"])
                if stored is None or stored[0] != part["ETag"]:
                    raise _client_error("InvalidPart", "CompleteMultipartUpload", key)
                chunks.append(stored[1])
            self._bucket(bucket, "CompleteMultipartUpload")[key] = b"".join(chunks)
            del self.uploads[upload_id]
            self.completed_uploads.append(upload_id)

    def abort_multipart_upload(self, bucket: str, key: str, upload_id: str) -> None:
        self._record("AbortMultipartUpload", bucket, key)
        with self._lock:
            self._upload(upload_id, "AbortMultipartUpload")
            del self.uploads[upload_id]
            self.aborted_uploads.append(upload_id)

    def list_multipart_uploads(self, bucket: str) -> List[Tuple[str, str]]:
        self._record("ListMultipartUploads", bucket)
        with self._lock:
            return [
                (upload["Key"], upload_id)
                for upload_id, upload in self.uploads.items()
                if upload["Bucket"] == bucket
            ]

    def _record(
        self,
        operation: str,
        bucket: Optional[str] = None,
        key: Optional[str] = None,
        part_number: Optional[int] = None,
    ) -> None:
        with self._lock:
            self.calls.append((operation, bucket, key, part_number))
        # A failure registered with a key matches either the bucket or the object key
        for (failing_operation, failing_key, failing_part), error in list(
            self.failures.items()
        ):
            if (
                failing_operation == operation
                and failing_key in (None, bucket, key)
                and failing_part in (None, part_number)
            ):
                logger.info(f"Injected failure for {operation} on {bucket}/{key}")
                raise error or _client_error("InternalError", operation, f"{bucket}/{key}")

    def _bucket(self, name: str, operation: str) -> Dict[str, bytes]:
        if name not in self.buckets:
            raise _client_error("NoSuchBucket", operation, name)
        return self.buckets[name]

    def _upload(self, upload_id: str, operation: str) -> Dict[str, Any]:
        if upload_id not in self.uploads:
            raise _client_error("NoSuchUpload", operation, upload_id)
        return self.uploads[upload_id]


def _client_error(code: str, operation: str, resource: str) -> ClientError:
    return ClientError(
        {"Error": {"Code": code, "Message": f"{code}: {resource}"}}, operation
    )
