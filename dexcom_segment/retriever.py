"""Read-through cache in front of the Dexcom API."""

import logging

from dexcom_segment.auth.client import DexcomAPI
from dexcom_segment.data.cache import Cache
from dexcom_segment.metrics import segment_cache_lookups_total, segment_cache_writes_total
from dexcom_segment.models.glucose import Reading, parse_reading, serialize_reading
from dexcom_segment.utils.config import DEFAULT_CACHE_TIMEOUT
from dexcom_segment.utils.error_handling import (
    CacheReadError,
    CacheWriteError,
    DecodeError,
    NoDataError,
)

logger = logging.getLogger(__name__)

CACHE_KEY = "dexcom"


class GlucoseRetriever:
    """
    Produces the current reading, preferring the cache over the API.

    A cache hit is returned as is; freshness is entirely up to the cache's
    TTL. A ``cache_timeout`` of zero or less bypasses the cache completely.
    """

    def __init__(self, api: DexcomAPI, cache: Cache, cache_timeout: int = DEFAULT_CACHE_TIMEOUT, cache_key: str = CACHE_KEY):
        self.api = api
        self.cache = cache
        self.cache_timeout = cache_timeout
        self.cache_key = cache_key

    @property
    def cache_enabled(self) -> bool:
        return self.cache_timeout > 0

    def get_reading(self) -> Reading:
        """
        Return the most recent reading.

        Raises:
            TransportError: The API call failed
            DecodeError: The API response was malformed
            NoDataError: The API returned no readings for the window
            URLConstructionError: The API URL could not be built
        """
        if self.cache_enabled:
            cached = self._get_cached()
            if cached is not None:
                return cached
        else:
            segment_cache_lookups_total.labels(result="disabled").inc()

        response = self.api.get_estimated_glucose_values()
        # first record is the most recent
        reading = response.latest
        if reading is None:
            raise NoDataError("No glucose records found")

        if self.cache_enabled:
            self._store(reading)
        return reading

    def _get_cached(self):
        try:
            value, found = self.cache.get(self.cache_key)
        except CacheReadError as e:
            segment_cache_lookups_total.labels(result="error").inc()
            logger.warning(f"Cache read failed, falling back to API: {e}")
            return None
        if not found:
            segment_cache_lookups_total.labels(result="miss").inc()
            return None
        try:
            reading = parse_reading(value)
        except DecodeError as e:
            segment_cache_lookups_total.labels(result="error").inc()
            logger.warning(f"Ignoring unreadable cached reading: {e}")
            return None
        segment_cache_lookups_total.labels(result="hit").inc()
        return reading

    def _store(self, reading: Reading) -> None:
        """Best-effort write; failures are logged and never propagate."""
        try:
            self.cache.set(self.cache_key, serialize_reading(reading), self.cache_timeout)
        except CacheWriteError as e:
            segment_cache_writes_total.labels(status="error").inc()
            logger.warning(f"Failed to cache reading: {e}")
            return
        segment_cache_writes_total.labels(status="success").inc()
