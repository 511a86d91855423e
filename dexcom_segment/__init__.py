"""Cached, OAuth-authenticated Dexcom glucose segment for shell prompts."""

from dexcom_segment.auth.client import DexcomAPI, DexcomClient
from dexcom_segment.auth.oauth import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, OAuthTransport
from dexcom_segment.data.cache import Cache, DynamoDBCache, FileCache, MemoryCache
from dexcom_segment.models.glucose import EGVSResponse, Reading
from dexcom_segment.models.tokens import TokenPair
from dexcom_segment.retriever import CACHE_KEY, GlucoseRetriever
from dexcom_segment.segment import DexcomSegment, create_segment
from dexcom_segment.trend import TrendCode, glyph
from dexcom_segment.utils.config import SegmentConfig, Settings, get_settings
from dexcom_segment.utils.error_handling import (
    CacheReadError,
    CacheWriteError,
    DecodeError,
    NoDataError,
    SegmentError,
    TokenError,
    TransportError,
    URLConstructionError,
)

__version__ = "0.1.0"

__all__ = [
    "ACCESS_TOKEN_KEY",
    "CACHE_KEY",
    "REFRESH_TOKEN_KEY",
    "Cache",
    "CacheReadError",
    "CacheWriteError",
    "DecodeError",
    "DexcomAPI",
    "DexcomClient",
    "DexcomSegment",
    "DynamoDBCache",
    "EGVSResponse",
    "FileCache",
    "GlucoseRetriever",
    "MemoryCache",
    "NoDataError",
    "OAuthTransport",
    "Reading",
    "SegmentConfig",
    "SegmentError",
    "Settings",
    "TokenError",
    "TokenPair",
    "TransportError",
    "TrendCode",
    "URLConstructionError",
    "create_segment",
    "get_settings",
    "glyph",
]
