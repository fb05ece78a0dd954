"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from typing import Iterable


class ConfigurationError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class NoSuffixConfigured(ConfigurationError):
    def __init__(self, bucket_name: str) -> None:
        super().__init__(
            f"Bucket name: {bucket_name} is taken at the destination and NEW_BUCKET_SUFFIX is not set"
        )
        self.bucket_name = bucket_name


class BucketConflictError(Exception):
    def __init__(self, bucket_name: str, message: str) -> None:
        self.bucket_name = bucket_name
        self.message = message
        super().__init__(self.message)


class BucketNameExhausted(BucketConflictError):
    def __init__(self, bucket_name: str, suffixed_name: str) -> None:
        super().__init__(
            bucket_name,
            f"Bucket names: {bucket_name} and {suffixed_name} are both taken at the destination",
        )
        self.suffixed_name = suffixed_name


class ListingError(Exception):
    def __init__(self, bucket_name: str, reason: str) -> None:
        self.bucket_name = bucket_name
        self.message = f"Listing objects of bucket: {bucket_name} failed: {reason}"
        super().__init__(self.message)


class TransferError(Exception):
    def __init__(self, bucket_name: str, key: str, message: str) -> None:
        self.bucket_name = bucket_name
        self.key = key
        self.message = message
        super().__init__(self.message)


class ObjectDownloadFailed(TransferError):
    def __init__(self, bucket_name: str, key: str, reason: str) -> None:
        super().__init__(
            bucket_name, key, f"Downloading {bucket_name}/{key} failed: {reason}"
        )


class ObjectUploadFailed(TransferError):
    def __init__(self, bucket_name: str, key: str, reason: str) -> None:
        super().__init__(
            bucket_name, key, f"Uploading {bucket_name}/{key} failed: {reason}"
        )


class SessionOpenFailed(TransferError):
    def __init__(self, bucket_name: str, key: str, reason: str) -> None:
        super().__init__(
            bucket_name,
            key,
            f"Multipart upload for {bucket_name}/{key} could not be started: {reason}",
        )


class PartUploadFailed(TransferError):
    def __init__(
        self, bucket_name: str, key: str, upload_id: str, part_numbers: Iterable[int]
    ) -> None:
        self.upload_id = upload_id
        self.part_numbers = sorted(part_numbers)
        super().__init__(
            bucket_name,
            key,
            f"Multipart upload: {upload_id} for {bucket_name}/{key} was aborted, parts {self.part_numbers} failed",
        )


class SessionCompleteFailed(TransferError):
    def __init__(self, bucket_name: str, key: str, upload_id: str, reason: str) -> None:
        self.upload_id = upload_id
        super().__init__(
            bucket_name,
            key,
            f"Multipart upload: {upload_id} for {bucket_name}/{key} could not be completed: {reason}",
        )


class UploadAlreadyFinalized(Exception):
    def __init__(self, upload_id: str, state: str) -> None:
        self.message = f"Multipart upload: {upload_id} is already {state}"
        super().__init__(self.message)


class BucketNotEmptied(Exception):
    def __init__(self, bucket_name: str, failed_keys: Iterable[str]) -> None:
        self.bucket_name = bucket_name
        self.failed_keys = list(failed_keys)
        self.message = f"Bucket: {bucket_name} was not deleted, {len(self.failed_keys)} object(s) could not be deleted"
        super().__init__(self.message)
