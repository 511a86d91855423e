"""Cache backends."""

from dexcom_segment.data.cache import Cache, DynamoDBCache, FileCache, MemoryCache

__all__ = [
    "Cache",
    "DynamoDBCache",
    "FileCache",
    "MemoryCache",
]
