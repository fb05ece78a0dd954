"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import threading
import typing
from enum import Enum

from botocore.exceptions import BotoCoreError, ClientError

from bucketmigrate.application.storage.client import StorageClient
from bucketmigrate.application.util.exceptions import (
    SessionOpenFailed,
    UploadAlreadyFinalized,
)

if typing.TYPE_CHECKING:
    from mypy_boto3_s3.type_defs import CompletedPartTypeDef
else:
    CompletedPartTypeDef = object


class UploadState(Enum):
    OPEN = "Open"
    COMPLETED = "Completed"
    ABORTED = "Aborted"


class ChunkedUpload:
    def __init__(
        self,
        client: StorageClient,
        bucket_name: str,
        key: str,
        upload_id: typing.Optional[str] = None,
    ) -> None:
        self.client = client
        self.bucket_name = bucket_name
        self.key = key
        self.parts: list[CompletedPartTypeDef] = []
        self._parts_lock = threading.Lock()

        self.state = UploadState.OPEN
        self.upload_id = upload_id or self._initiate_multipart_upload()

    def _initiate_multipart_upload(self) -> str:
        try:
            return self.client.create_multipart_upload(self.bucket_name, self.key)
        except (ClientError, BotoCoreError) as e:
            raise SessionOpenFailed(self.bucket_name, self.key, str(e)) from e

    def upload_part(self, chunk: bytes, part_number: int) -> CompletedPartTypeDef:
        self._ensure_open()
        etag = self.client.upload_part(
            self.bucket_name, self.key, self.upload_id, part_number, chunk
        )
        return self.include_part(part_number, etag)

    def include_part(self, part_number: int, etag: str) -> CompletedPartTypeDef:
        self._ensure_open()
        part = ChunkedUpload._build_part(part_number, etag)
        with self._parts_lock:
            self.parts.append(part)
        return part

    def sorted_parts(self) -> list[CompletedPartTypeDef]:
        # Parts finish in any order under parallel upload
        with self._parts_lock:
            return sorted(self.parts, key=lambda part: part["PartNumber"])

    def complete_upload(self) -> None:
        self._ensure_open()
        self.client.complete_multipart_upload(
            self.bucket_name, self.key, self.upload_id, self.sorted_parts()
        )
        self.state = UploadState.COMPLETED

    def abort_upload(self) -> None:
        self._ensure_open()
        self.client.abort_multipart_upload(self.bucket_name, self.key, self.upload_id)
        self.state = UploadState.ABORTED

    def _ensure_open(self) -> None:
        if self.state is not UploadState.OPEN:
            raise UploadAlreadyFinalized(self.upload_id, self.state.value.lower())

    @staticmethod
    def _build_part(part_number: int, etag: str) -> CompletedPartTypeDef:
        return {
            "PartNumber": part_number,
            "ETag": etag,
        }
