"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

from botocore.exceptions import ClientError

if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client
    from mypy_boto3_s3.type_defs import (
        CompletedPartTypeDef,
        CreateMultipartUploadOutputTypeDef,
        ListObjectsV2OutputTypeDef,
        UploadPartOutputTypeDef,
    )
else:
    S3Client = object
    CompletedPartTypeDef = object
    CreateMultipartUploadOutputTypeDef = object
    ListObjectsV2OutputTypeDef = object
    UploadPartOutputTypeDef = object

logger = logging.getLogger()

# Buckets in this region must be created without a LocationConstraint
DEFAULT_LOCATION = "us-east-1"


class BucketCreation(Enum):
    CREATED = "Created"
    ALREADY_OWNED = "BucketAlreadyOwnedByYou"
    ALREADY_EXISTS = "BucketAlreadyExists"


class ObjectListing(NamedTuple):
    keys: List[str]
    next_token: Optional[str]


class StorageClient:
    """
    Thin wrapper around one S3 compatible endpoint.

    Transient failures are retried by the botocore retry handler the wrapped
    client was built with (see StorageClientFactory). Service errors surface as
    botocore.exceptions.ClientError, except for bucket name conflicts on
    create_bucket, which are reported through BucketCreation. Connection
    failures that outlast the retries surface as BotoCoreError.
    """

    def __init__(self, s3_client: S3Client, region: Optional[str] = None) -> None:
        self.s3 = s3_client
        self.region = region

    def list_buckets(self) -> List[str]:
        response = self.s3.list_buckets()
        return [bucket["Name"] for bucket in response.get("Buckets", [])]

    def create_bucket(self, name: str) -> BucketCreation:
        params: Dict[str, Any] = {"Bucket": name}
        if self.region and self.region != DEFAULT_LOCATION:
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        try:
            self.s3.create_bucket(**params)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code == BucketCreation.ALREADY_OWNED.value:
                return BucketCreation.ALREADY_OWNED
            if code == BucketCreation.ALREADY_EXISTS.value:
                return BucketCreation.ALREADY_EXISTS
            raise
        logger.info(f"Successfully created bucket {name}")
        return BucketCreation.CREATED

    def delete_bucket(self, name: str) -> None:
        self.s3.delete_bucket(Bucket=name)
        logger.info(f"Successfully deleted bucket {name}")

    def list_objects(
        self,
        bucket: str,
        continuation_token: Optional[str] = None,
        max_keys: Optional[int] = None,
    ) -> ObjectListing:
        params: Dict[str, Any] = {"Bucket": bucket}
        if continuation_token:
            params["ContinuationToken"] = continuation_token
        if max_keys:
            params["MaxKeys"] = max_keys
        response: ListObjectsV2OutputTypeDef = self.s3.list_objects_v2(**params)
        keys = [item["Key"] for item in response.get("Contents", [])]
        next_token = (
            response.get("NextContinuationToken") if response.get("IsTruncated") else None
        )
        return ObjectListing(keys, next_token)

    def get_object(self, bucket: str, key: str) -> bytes:
        response = self.s3.get_object(Bucket=bucket, Key=key)
        return response["Body"].read()

    def put_object(self, bucket: str, key: str, body: bytes) -> None:
        self.s3.put_object(Bucket=bucket, Key=key, Body=body)

    def delete_object(self, bucket: str, key: str) -> None:
        self.s3.delete_object(Bucket=bucket, Key=key)

    def create_multipart_upload(self, bucket: str, key: str) -> str:
        response: CreateMultipartUploadOutputTypeDef = self.s3.create_multipart_upload(
            Bucket=bucket, Key=key
        )
        return response["UploadId"]

    def upload_part(
        self, bucket: str, key: str, upload_id: str, part_number: int, body: bytes
    ) -> str:
        response: UploadPartOutputTypeDef = self.s3.upload_part(
            Body=body,
            Bucket=bucket,
            Key=key,
            PartNumber=part_number,
            UploadId=upload_id,
        )
        return response["ETag"]

    def complete_multipart_upload(
        self,
        bucket: str,
        key: str,
        upload_id: str,
        parts: Sequence[CompletedPartTypeDef],
    ) -> None:
        self.s3.complete_multipart_upload(
            Bucket=bucket,
            Key=key,
            UploadId=upload_id,
            MultipartUpload={"Parts": list(parts)},
        )

    def abort_multipart_upload(self, bucket: str, key: str, upload_id: str) -> None:
        self.s3.abort_multipart_upload(Bucket=bucket, Key=key, UploadId=upload_id)

    def list_multipart_uploads(self, bucket: str) -> List[Tuple[str, str]]:
        uploads = []
        paginator = self.s3.get_paginator("list_multipart_uploads")
        for page in paginator.paginate(Bucket=bucket):
            for upload in page.get("Uploads", []):
                uploads.append((upload["Key"], upload["UploadId"]))
        return uploads
