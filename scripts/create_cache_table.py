#!/usr/bin/env python
"""
Create the DynamoDB table used by the ``dynamodb`` cache backend.

Reads the same settings as the segment (DYNAMODB_CACHE_TABLE, AWS_REGION,
DYNAMODB_ENDPOINT), creates the table if it is missing and enables TTL on
its ``expires_at`` attribute.

Example usage:
    CACHE_BACKEND=dynamodb python scripts/create_cache_table.py
"""

import logging
import sys

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from dexcom_segment.data.cache import DynamoDBCache
from dexcom_segment.utils.config import get_settings

logger = logging.getLogger("dexcom_segment.scripts.create_cache_table")


def main() -> int:
    """Create the cache table. Returns the process exit code."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    settings = get_settings()

    if settings.dynamodb_endpoint:
        logger.info(f"Using endpoint: {settings.dynamodb_endpoint}")

    cache = DynamoDBCache(
        settings.dynamodb_cache_table,
        region_name=settings.aws_region,
        endpoint_url=settings.dynamodb_endpoint,
    )
    try:
        response = cache.create_table()
    except NoCredentialsError:
        logger.warning("No AWS credentials found. For DynamoDB Local, set DYNAMODB_ENDPOINT "
                       "and run: docker run -p 8000:8000 amazon/dynamodb-local")
        return 1
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error creating table {settings.dynamodb_cache_table}: {e}")
        return 1

    table_info = response.get("TableDescription") or response.get("Table") or {}
    logger.info(f"Table '{settings.dynamodb_cache_table}' status: {table_info.get('TableStatus', 'CREATED')}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
