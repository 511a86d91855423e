"""Prompt segment showing the current Dexcom glucose value and trend."""

import logging
from typing import Any, Dict, Optional

from dexcom_segment.auth.client import DexcomAPI, DexcomClient
from dexcom_segment.data.cache import Cache, DynamoDBCache, FileCache, MemoryCache
from dexcom_segment.models.glucose import Reading
from dexcom_segment.retriever import GlucoseRetriever
from dexcom_segment.trend import glyph
from dexcom_segment.utils.config import SegmentConfig, Settings, get_settings
from dexcom_segment.utils.error_handling import SegmentError
from dexcom_segment.utils.logging_utils import setup_json_logging
from dexcom_segment.utils.templating import render_template

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = " {{ value }} "


class DexcomSegment:
    """
    Display segment for the most recent estimated glucose value.

    Call ``enabled()`` first; ``render()`` is only meaningful after it
    returned True. Failures of any kind make the segment unavailable for
    that cycle instead of raising.
    """

    def __init__(
        self,
        config: SegmentConfig,
        cache: Cache,
        api: Optional[DexcomAPI] = None,
        template: Optional[str] = None,
    ) -> None:
        self.config = config
        self.cache = cache
        self.api = api or DexcomClient.from_config(config, cache=cache)
        self.retriever = GlucoseRetriever(self.api, cache, cache_timeout=config.cache_timeout)
        self._template = template
        self.reading: Optional[Reading] = None
        self.trend_glyph = ""

    def template(self) -> str:
        """Segment template, where value is the sensor glucose value."""
        return self._template if self._template is not None else DEFAULT_TEMPLATE

    def enabled(self) -> bool:
        """Fetch the current reading. Returns False if none is available this cycle."""
        try:
            reading = self.retriever.get_reading()
        except SegmentError as e:
            self.reading = None
            self.trend_glyph = ""
            logger.info(
                "Dexcom segment unavailable",
                extra={"log_type": "segment_unavailable", "error_type": type(e).__name__, "error": str(e)}
            )
            return False

        self.reading = reading
        self.trend_glyph = glyph(reading.trend)
        return True

    def fields(self) -> Dict[str, Any]:
        return {
            "value": self.reading.value,
            "status": self.reading.status,
            "trend": self.reading.trend,
            "trendGlyph": self.trend_glyph,
            "trend_glyph": self.trend_glyph,
        }

    def render(self) -> str:
        return render_template(self.template(), self.fields())


def build_cache(settings: Settings) -> Cache:
    """Create the cache backend selected in settings."""
    if settings.cache_backend == "memory":
        return MemoryCache()
    if settings.cache_backend == "dynamodb":
        return DynamoDBCache(
            settings.dynamodb_cache_table,
            region_name=settings.aws_region,
            endpoint_url=settings.dynamodb_endpoint,
        )
    return FileCache(settings.cache_path)


def create_segment(
    settings: Optional[Settings] = None,
    cache: Optional[Cache] = None,
    template: Optional[str] = None,
) -> DexcomSegment:
    """
    Create a segment from environment settings.

    Args:
        settings: Settings to use, defaults to ``get_settings()``
        cache: Cache backend, defaults to the one selected in settings
        template: Output template, defaults to ``DEFAULT_TEMPLATE``

    Returns:
        DexcomSegment: Ready-to-use segment
    """
    settings = settings or get_settings()
    if settings.log_format == "json":
        setup_json_logging(level=settings.log_level)
    else:
        logging.getLogger("dexcom_segment").setLevel(settings.log_level)
    return DexcomSegment(
        settings.segment_config(),
        cache if cache is not None else build_cache(settings),
        template=template,
    )
