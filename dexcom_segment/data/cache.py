"""Key-value cache backends for the current reading and the OAuth tokens.

All backends share the narrow ``get``/``set`` capability the segment needs.
Expiry is enforced by the backend; callers never re-validate freshness.
"""

import contextlib
import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from dexcom_segment.utils.error_handling import CacheReadError, CacheWriteError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path.home() / ".cache" / "dexcom-segment" / "cache.json"


class Cache(Protocol):
    """Narrow get/set capability over a shared key-value store."""

    def get(self, key: str) -> Tuple[Optional[str], bool]:
        """Return ``(value, True)`` on a hit and ``(None, False)`` on a miss."""
        ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...


class MemoryCache:
    """Thread-safe in-process cache with monotonic expiry."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[str, float]] = {}

    def get(self, key: str) -> Tuple[Optional[str], bool]:
        now = time.monotonic()
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None, False
            value, expires_at = item
            if now >= expires_at:
                del self._entries[key]
                return None, False
            return value, True

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, time.monotonic() + ttl_seconds)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class FileCache:
    """JSON file cache shared between processes, e.g. successive prompt renders.

    The file maps each key to ``{"value": ..., "expires_at": <epoch seconds>}``.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path).expanduser() if path else DEFAULT_CACHE_PATH

    def _load(self) -> Dict[str, Dict[str, Any]]:
        try:
            if not self.path.exists():
                return {}
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CacheReadError(f"Failed to read cache file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise CacheReadError(f"Cache file {self.path} is not a JSON object")
        return data

    @staticmethod
    def _is_live(entry: Any, now: float) -> bool:
        if not isinstance(entry, dict) or not isinstance(entry.get("value"), str):
            return False
        try:
            return float(entry.get("expires_at", 0)) > now
        except (TypeError, ValueError):
            return False

    def get(self, key: str) -> Tuple[Optional[str], bool]:
        entry = self._load().get(key)
        if not self._is_live(entry, time.time()):
            return None, False
        return entry["value"], True

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        now = time.time()
        try:
            entries = self._load()
        except CacheReadError as e:
            logger.warning(f"Discarding unreadable cache file: {e}")
            entries = {}
        entries = {k: v for k, v in entries.items() if self._is_live(v, now)}
        entries[key] = {"value": value, "expires_at": now + ttl_seconds}

        # Write to a sibling file and swap it in so readers never see a partial file
        tmp_path = self.path.with_suffix(f".{os.getpid()}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(entries), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise CacheWriteError(f"Failed to write cache file {self.path}: {e}") from e


class DynamoDBCache:
    """Cache backed by a DynamoDB table using the table's TTL attribute.

    DynamoDB deletes expired items lazily, so reads also check ``expires_at``.
    """

    KEY_ATTRIBUTE = "cache_key"
    TTL_ATTRIBUTE = "expires_at"

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client=None,
    ) -> None:
        """
        Initialize the DynamoDB cache.

        Args:
            table_name: Name of the cache table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL, primarily for local development
            client: Pre-built boto3 DynamoDB client
        """
        self.table_name = table_name
        self.client = client or boto3.client(
            "dynamodb",
            region_name=region_name,
            endpoint_url=endpoint_url,
        )

    def create_table(self, wait: bool = True) -> Dict[str, Any]:
        """
        Create the cache table and enable TTL if it doesn't exist.

        Args:
            wait: Wait for the table to be created if True

        Returns:
            Dict: Table description
        """
        try:
            table = self.client.create_table(
                TableName=self.table_name,
                KeySchema=[
                    {"AttributeName": self.KEY_ATTRIBUTE, "KeyType": "HASH"}
                ],
                AttributeDefinitions=[
                    {"AttributeName": self.KEY_ATTRIBUTE, "AttributeType": "S"}
                ],
                BillingMode="PAY_PER_REQUEST",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceInUseException":
                logger.info(f"Table {self.table_name} already exists.")
                return self.client.describe_table(TableName=self.table_name)
            logger.error(f"Error creating table {self.table_name}: {e}")
            raise

        if wait:
            waiter = self.client.get_waiter("table_exists")
            waiter.wait(TableName=self.table_name)
        self.client.update_time_to_live(
            TableName=self.table_name,
            TimeToLiveSpecification={"Enabled": True, "AttributeName": self.TTL_ATTRIBUTE},
        )
        return table

    def get(self, key: str) -> Tuple[Optional[str], bool]:
        try:
            response = self.client.get_item(
                TableName=self.table_name,
                Key={self.KEY_ATTRIBUTE: {"S": key}},
                ConsistentRead=True,
            )
        except (ClientError, BotoCoreError) as e:
            raise CacheReadError(f"Failed to read {key} from {self.table_name}: {e}") from e

        item = response.get("Item")
        if not item:
            return None, False
        try:
            expires_at = int(item[self.TTL_ATTRIBUTE]["N"])
            value = item["value"]["S"]
        except (KeyError, TypeError, ValueError) as e:
            raise CacheReadError(f"Malformed cache item {key} in {self.table_name}: {e}") from e
        if expires_at <= int(time.time()):
            return None, False
        return value, True

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = int(time.time()) + ttl_seconds
        try:
            self.client.put_item(
                TableName=self.table_name,
                Item={
                    self.KEY_ATTRIBUTE: {"S": key},
                    "value": {"S": value},
                    self.TTL_ATTRIBUTE: {"N": str(expires_at)},
                },
            )
        except (ClientError, BotoCoreError) as e:
            raise CacheWriteError(f"Failed to write {key} to {self.table_name}: {e}") from e
