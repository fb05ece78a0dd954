"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import pathlib

import pytest

SOURCE_ROOT = pathlib.Path(__file__).resolve().parents[1]

header_lines = [
    '"""',
    "Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.",
    "SPDX-License-Identifier: Apache-2.0",
    '"""',
]


@pytest.mark.parametrize(
    "path",
    [
        path
        for package in ("bucketmigrate", "tests")
        for path in sorted((SOURCE_ROOT / package).glob("**/*.py"))
        if path.stat().st_size > 0
    ],
    ids=lambda path: str(path.relative_to(SOURCE_ROOT)),
)
def test_license_header(path: pathlib.Path) -> None:
    with open(path) as f:
        for line in header_lines:
            assert line == f.readline().strip()
