"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from typing import List, Tuple


def generate_chunk_array(payload_size: int, chunk_size: int) -> List[Tuple[int, int]]:
    """
    Split `payload_size` bytes into (start, end) offsets, end exclusive.
    Every range is `chunk_size` long except the last one, which holds the
    remainder. An empty payload has no ranges.
    """

    if chunk_size <= 0:
        raise ValueError("Chunk size should be a positive number of bytes.")
    if payload_size < 0:
        raise ValueError("Payload size can not be negative.")

    return [
        (start, min(start + chunk_size, payload_size))
        for start in range(0, payload_size, chunk_size)
    ]
