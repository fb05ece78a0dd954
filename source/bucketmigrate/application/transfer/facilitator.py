"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from bucketmigrate.application.config.settings import CHUNK_SIZE, DEFAULT_PART_WORKERS
from bucketmigrate.application.storage.client import StorageClient
from bucketmigrate.application.transfer.chunked import ChunkedTransferEngine
from bucketmigrate.application.transfer.strategy import (
    TransferStrategy,
    select_strategy,
)
from bucketmigrate.application.util.exceptions import (
    ObjectDownloadFailed,
    ObjectUploadFailed,
)

logger = logging.getLogger()


class ObjectTransferFacilitator:
    def __init__(
        self,
        source: StorageClient,
        destination: StorageClient,
        chunk_size: int = CHUNK_SIZE,
        max_part_workers: int = DEFAULT_PART_WORKERS,
    ) -> None:
        self.source = source
        self.destination = destination
        self.chunk_size = chunk_size
        self.chunked_engine = ChunkedTransferEngine(
            destination, chunk_size, max_part_workers
        )

    def transfer(
        self, source_bucket: str, destination_bucket: str, key: str
    ) -> TransferStrategy:
        """
        Copies one object from the source endpoint to the destination endpoint.

        :return: The strategy the object was uploaded with.
        :rtype: TransferStrategy

        :raises TransferError: If the object could not be read or written.
        """
        try:
            payload = self.source.get_object(source_bucket, key)
        except (ClientError, BotoCoreError) as e:
            raise ObjectDownloadFailed(source_bucket, key, str(e)) from e

        strategy = select_strategy(len(payload), self.chunk_size)
        if strategy is TransferStrategy.CHUNKED:
            self.chunked_engine.transfer(destination_bucket, key, payload)
        else:
            self._put(destination_bucket, key, payload)
        logger.info(
            f"Transferred {source_bucket}/{key} to {destination_bucket}/{key} ({len(payload)} bytes, {strategy.value})"
        )
        return strategy

    def _put(self, bucket_name: str, key: str, payload: bytes) -> None:
        try:
            self.destination.put_object(bucket_name, key, payload)
        except (ClientError, BotoCoreError) as e:
            raise ObjectUploadFailed(bucket_name, key, str(e)) from e
