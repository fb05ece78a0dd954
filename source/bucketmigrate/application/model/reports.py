"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from collections import Counter
from typing import Dict, List, Optional

from bucketmigrate.application.transfer.strategy import TransferStrategy


class BucketMigrationReport:
    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.destination_name: Optional[str] = None
        self.listed = 0
        self.skipped = 0
        self.transferred: Dict[str, TransferStrategy] = {}
        self.failed: Dict[str, str] = {}
        self.error: Optional[str] = None

    def record_transfer(self, key: str, strategy: TransferStrategy) -> None:
        self.transferred[key] = strategy

    def record_failure(self, key: str, reason: str) -> None:
        self.failed[key] = reason

    def strategy_counts(self) -> Dict[TransferStrategy, int]:
        return dict(Counter(self.transferred.values()))

    @property
    def succeeded(self) -> bool:
        return self.error is None and not self.failed


class MigrationReport:
    def __init__(self) -> None:
        self.buckets: List[BucketMigrationReport] = []
        self.halted = False

    @property
    def transferred_count(self) -> int:
        return sum(len(bucket.transferred) for bucket in self.buckets)

    @property
    def skipped_count(self) -> int:
        return sum(bucket.skipped for bucket in self.buckets)

    @property
    def failed_count(self) -> int:
        return sum(len(bucket.failed) for bucket in self.buckets)

    @property
    def succeeded(self) -> bool:
        return not self.halted and all(bucket.succeeded for bucket in self.buckets)

    def summary(self) -> str:
        return (
            f"{len(self.buckets)} bucket(s), {self.transferred_count} object(s) transferred, "
            f"{self.skipped_count} already migrated, {self.failed_count} failed"
        )


class BucketSweepReport:
    def __init__(self, bucket_name: str) -> None:
        self.bucket_name = bucket_name
        self.listed = 0
        self.deleted = 0
        self.failed_keys: Dict[str, str] = {}
        self.aborted_uploads = 0
        self.bucket_deleted = False
        self.error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.bucket_deleted and self.error is None


class SweepReport:
    def __init__(self) -> None:
        self.buckets: List[BucketSweepReport] = []

    @property
    def deleted_objects(self) -> int:
        return sum(bucket.deleted for bucket in self.buckets)

    @property
    def deleted_buckets(self) -> int:
        return sum(1 for bucket in self.buckets if bucket.bucket_deleted)

    @property
    def succeeded(self) -> bool:
        return all(bucket.succeeded for bucket in self.buckets)

    def summary(self) -> str:
        return (
            f"{self.deleted_buckets} of {len(self.buckets)} bucket(s) deleted, "
            f"{self.deleted_objects} object(s) deleted"
        )
