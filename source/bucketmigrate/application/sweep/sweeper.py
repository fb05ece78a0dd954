"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from bucketmigrate.application.model.reports import BucketSweepReport, SweepReport
from bucketmigrate.application.storage.client import StorageClient
from bucketmigrate.application.storage.listing import list_all_keys
from bucketmigrate.application.util.exceptions import BucketNotEmptied, ListingError

logger = logging.getLogger()


class BucketSweeper:
    """
    Deletes every object and then every bucket at one endpoint.

    A bucket is only deleted once all of its objects were deleted. Failures
    are recorded per bucket and the sweep moves on to the next bucket.
    """

    def __init__(self, client: StorageClient, abort_incomplete_uploads: bool = True) -> None:
        self.client = client
        self.abort_incomplete_uploads = abort_incomplete_uploads

    def sweep(self) -> SweepReport:
        report = SweepReport()
        for bucket_name in self.client.list_buckets():
            report.buckets.append(self.sweep_bucket(bucket_name))
        logger.info(f"Sweep finished: {report.summary()}")
        return report

    def sweep_bucket(self, bucket_name: str) -> BucketSweepReport:
        report = BucketSweepReport(bucket_name)
        logger.info(f"Sweeping bucket: {bucket_name}")
        try:
            keys = list_all_keys(self.client, bucket_name)
        except ListingError as e:
            logger.error(e.message)
            report.error = e.message
            return report
        report.listed = len(keys)

        for key in keys:
            logger.info(f"Deleting object: {key}")
            try:
                self.client.delete_object(bucket_name, key)
            except (ClientError, BotoCoreError) as e:
                logger.error(f"Deleting object {bucket_name}/{key} failed: {e}")
                report.failed_keys[key] = str(e)
                continue
            report.deleted += 1

        if report.failed_keys:
            error = BucketNotEmptied(bucket_name, report.failed_keys)
            logger.error(error.message)
            report.error = error.message
            return report

        if self.abort_incomplete_uploads:
            try:
                report.aborted_uploads = self._abort_incomplete_uploads(bucket_name)
            except (ClientError, BotoCoreError) as e:
                logger.error(
                    f"Aborting incomplete uploads in bucket {bucket_name} failed: {e}"
                )
                report.error = str(e)
                return report

        try:
            self.client.delete_bucket(bucket_name)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Deleting bucket {bucket_name} failed: {e}")
            report.error = str(e)
            return report
        report.bucket_deleted = True
        return report

    def _abort_incomplete_uploads(self, bucket_name: str) -> int:
        uploads = self.client.list_multipart_uploads(bucket_name)
        for key, upload_id in uploads:
            logger.info(f"Aborting incomplete multipart upload {upload_id} for {key}")
            self.client.abort_multipart_upload(bucket_name, key, upload_id)
        return len(uploads)
