"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import os
import pytest
from typing import List, Tuple

from bucketmigrate.application.chunking.payload import generate_chunk_array

MiB = 1024 * 1024


def test_generate_chunk_array_chunk_size_not_positive() -> None:
    with pytest.raises(ValueError):
        generate_chunk_array(100, 0)


def test_generate_chunk_array_negative_payload_size() -> None:
    with pytest.raises(ValueError):
        generate_chunk_array(-1, 128)


@pytest.mark.parametrize(
    "payload_size, chunk_size, expected_chunks",
    [
        (0, 128, []),
        (100, 128, [(0, 100)]),
        (128, 128, [(0, 128)]),
        (384, 128, [(0, 128), (128, 256), (256, 384)]),
        (547, 128, [(0, 128), (128, 256), (256, 384), (384, 512), (512, 547)]),
        (8 * MiB, 5 * MiB, [(0, 5 * MiB), (5 * MiB, 8 * MiB)]),
    ],
)
def test_generate_chunk_array(
    payload_size: int,
    chunk_size: int,
    expected_chunks: List[Tuple[int, int]],
) -> None:
    assert expected_chunks == generate_chunk_array(payload_size, chunk_size)


@pytest.mark.parametrize("payload_size", [1, 127, 128, 129, 1000, 1024])
def test_chunks_reassemble_payload(payload_size: int) -> None:
    chunk_size = 128
    payload = os.urandom(payload_size)
    chunks = [
        payload[start:end] for start, end in generate_chunk_array(payload_size, chunk_size)
    ]

    assert b"".join(chunks) == payload
    assert all(len(chunk) == chunk_size for chunk in chunks[:-1])
    assert len(chunks[-1]) == (payload_size % chunk_size or chunk_size)
