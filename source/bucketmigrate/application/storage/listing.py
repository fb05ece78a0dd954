"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import logging
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from bucketmigrate.application.storage.client import StorageClient
from bucketmigrate.application.util.exceptions import ListingError

logger = logging.getLogger()

MAX_PAGE_SIZE = 1000


def list_all_keys(
    client: StorageClient, bucket: str, limit: Optional[int] = None
) -> List[str]:
    """
    Follow continuation tokens until the listing is exhausted or `limit` keys
    have been collected. Keys beyond `limit` are never requested.
    """
    keys: List[str] = []
    token: Optional[str] = None
    pages = 0
    while limit is None or len(keys) < limit:
        max_keys = None if limit is None else min(limit - len(keys), MAX_PAGE_SIZE)
        try:
            listing = client.list_objects(bucket, token, max_keys)
        except (ClientError, BotoCoreError) as e:
            raise ListingError(bucket, str(e)) from e
        pages += 1
        keys.extend(listing.keys)
        token = listing.next_token
        if token is None:
            break
    if limit is not None and len(keys) > limit:
        del keys[limit:]
    logger.info(f"Listed {len(keys)} object(s) in bucket {bucket} over {pages} page(s)")
    return keys
