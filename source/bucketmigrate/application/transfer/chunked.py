"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import logging
from concurrent import futures
from typing import Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from bucketmigrate.application.chunking.payload import generate_chunk_array
from bucketmigrate.application.config.settings import CHUNK_SIZE, DEFAULT_PART_WORKERS
from bucketmigrate.application.storage.client import StorageClient
from bucketmigrate.application.transfer.upload import ChunkedUpload
from bucketmigrate.application.util.exceptions import (
    PartUploadFailed,
    SessionCompleteFailed,
)

logger = logging.getLogger()


class ChunkedTransferEngine:
    def __init__(
        self,
        client: StorageClient,
        chunk_size: int = CHUNK_SIZE,
        max_workers: int = DEFAULT_PART_WORKERS,
    ) -> None:
        self.client = client
        self.chunk_size = chunk_size
        self.max_workers = max_workers

    def transfer(self, bucket_name: str, key: str, payload: bytes) -> ChunkedUpload:
        """
        Uploads `payload` to bucket_name/key as a multipart upload.

        Every part is uploaded through a bounded worker pool and the engine
        waits for all of them to settle before deciding. The upload is
        completed when every part succeeded and aborted otherwise, so it is
        never left open once this method returns or raises.

        :return: The finished upload, in the COMPLETED state.
        :rtype: ChunkedUpload

        :raises SessionOpenFailed: If the multipart upload could not be created.

        :raises PartUploadFailed: If any part failed; the upload was aborted.

        :raises SessionCompleteFailed: If completing failed; the upload was aborted.
        """
        upload = ChunkedUpload(self.client, bucket_name, key)
        logger.info(
            f"Started multipart upload {upload.upload_id} for {bucket_name}/{key}"
        )

        failed_parts = self._upload_parts(upload, payload)
        if failed_parts:
            self._abort(upload)
            raise PartUploadFailed(bucket_name, key, upload.upload_id, failed_parts)

        try:
            upload.complete_upload()
        except (ClientError, BotoCoreError) as e:
            logger.error(
                f"Completing multipart upload {upload.upload_id} for {bucket_name}/{key} failed: {e}"
            )
            self._abort(upload)
            raise SessionCompleteFailed(
                bucket_name, key, upload.upload_id, str(e)
            ) from e
        logger.info(
            f"Completed multipart upload {upload.upload_id} for {bucket_name}/{key} with {len(upload.parts)} part(s)"
        )
        return upload

    def _upload_parts(self, upload: ChunkedUpload, payload: bytes) -> List[int]:
        with futures.ThreadPoolExecutor(max_workers=self.max_workers) as upload_executor:
            upload_futures: Dict[futures.Future[None], int] = {}
            for index, (start, end) in enumerate(
                generate_chunk_array(len(payload), self.chunk_size)
            ):
                part_number = index + 1
                upload_futures[
                    upload_executor.submit(
                        self._upload_chunk, upload, payload, part_number, start, end
                    )
                ] = part_number
            futures.wait(upload_futures, return_when=futures.ALL_COMPLETED)

        failed_parts = []
        for future, part_number in upload_futures.items():
            error = future.exception()
            if error is not None:
                logger.error(
                    f"Part {part_number} of multipart upload {upload.upload_id} failed: {error}"
                )
                failed_parts.append(part_number)
        return sorted(failed_parts)

    @staticmethod
    def _upload_chunk(
        upload: ChunkedUpload, payload: bytes, part_number: int, start: int, end: int
    ) -> None:
        # Slice inside the worker so only in-flight chunks are copied
        upload.upload_part(payload[start:end], part_number)

    @staticmethod
    def _abort(upload: ChunkedUpload) -> None:
        logger.warning(
            f"Aborting multipart upload {upload.upload_id} for {upload.bucket_name}/{upload.key}"
        )
        try:
            upload.abort_upload()
        except (ClientError, BotoCoreError) as e:
            logger.error(
                f"Aborting multipart upload {upload.upload_id} failed, the upload may be left behind: {e}"
            )
