"""Error types raised along the fetch path of the Dexcom segment.

Every error derives from ``SegmentError`` so the segment controller can
collapse them into a single "unavailable" signal, while tests and logs can
still tell them apart.
"""
from typing import Optional


class SegmentError(Exception):
    """Base class for segment errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TransportError(SegmentError):
    """Network, timeout or HTTP-layer failure talking to the Dexcom API."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class TokenError(TransportError):
    """Authentication failure the OAuth transport could not resolve."""

    def __init__(self, error: str, error_description: Optional[str] = None, status_code: Optional[int] = None):
        self.error = error
        self.error_description = error_description
        message = f"Token error: {error}"
        if error_description:
            message += f" - {error_description}"
        super().__init__(message, status_code=status_code)


class DecodeError(SegmentError):
    """Malformed API response or cache payload."""


class NoDataError(SegmentError):
    """Well-formed API response that carries no readings."""


class URLConstructionError(SegmentError):
    """The request URL could not be built from the configured base URL."""


class CacheError(SegmentError):
    """Base class for cache backend failures. Never surfaced to callers."""


class CacheReadError(CacheError):
    pass


class CacheWriteError(CacheError):
    pass
