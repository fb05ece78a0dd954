"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from enum import Enum

from bucketmigrate.application.config.settings import CHUNK_SIZE


class TransferStrategy(Enum):
    SINGLE_PART = "SinglePart"
    CHUNKED = "Chunked"


def select_strategy(size: int, chunk_size: int = CHUNK_SIZE) -> TransferStrategy:
    if size < 0:
        raise ValueError(f"Object size can not be negative, got: {size}")
    if size < chunk_size:
        return TransferStrategy.SINGLE_PART
    return TransferStrategy.CHUNKED
