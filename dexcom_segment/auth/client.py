"""Dexcom v3 API client for the estimated glucose values endpoint.

https://developer.dexcom.com/docs/dexcomv3/endpoint-overview/
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

import httpx

from dexcom_segment.auth.oauth import OAuthTransport
from dexcom_segment.data.cache import Cache
from dexcom_segment.metrics import dexcom_api_call_latency_seconds, dexcom_api_call_total
from dexcom_segment.models.glucose import EGVSResponse, parse_envelope
from dexcom_segment.models.tokens import TokenPair
from dexcom_segment.utils.config import SegmentConfig
from dexcom_segment.utils.error_handling import SegmentError, URLConstructionError

logger = logging.getLogger(__name__)

__all__ = [
    "DexcomAPI",
    "DexcomClient",
    "EGVS_WINDOW",
    "TIMESTAMP_FORMAT",
]

# The v3 API takes UTC timestamps without offset or fractional seconds
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"
EGVS_WINDOW = timedelta(minutes=5)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DexcomAPI(Protocol):
    """The part of the Dexcom API the segment needs."""

    def get_estimated_glucose_values(self) -> EGVSResponse:
        ...


class DexcomClient:
    """Fetches the trailing window of estimated glucose values."""

    def __init__(
        self,
        transport: OAuthTransport,
        *,
        base_url: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.transport = transport
        self.base_url = (base_url or transport.base_url).rstrip("/")
        self.clock = clock

    @classmethod
    def from_config(
        cls,
        config: SegmentConfig,
        cache: Optional[Cache] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> "DexcomClient":
        """Build a client and its OAuth transport from segment configuration."""
        tokens = TokenPair(access_token=config.access_token, refresh_token=config.refresh_token)
        transport = OAuthTransport(
            tokens,
            base_url=config.base_url,
            client_id=config.client_id,
            client_secret=config.client_secret,
            timeout=config.http_timeout,
            cache=cache,
            http_client=http_client,
        )
        return cls(transport, base_url=config.base_url)

    @property
    def tokens(self) -> TokenPair:
        return self.transport.tokens

    def close(self) -> None:
        self.transport.close()

    def get_estimated_glucose_values(self) -> EGVSResponse:
        """
        Fetch the readings of the last five minutes, most recent first.

        Raises:
            TransportError: Network, HTTP or unresolved authentication failure
            DecodeError: Malformed response body
            URLConstructionError: The configured base URL is unusable
        """
        return self._get_dexcom_api_data("egvs")

    def _build_url(self, endpoint: str) -> str:
        try:
            url = httpx.URL(f"{self.base_url}/v3/users/self/{endpoint}")
        except (httpx.InvalidURL, TypeError) as e:
            raise URLConstructionError(f"Invalid Dexcom API URL for {endpoint}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise URLConstructionError(f"Invalid Dexcom API URL for {endpoint}: {url}")
        return str(url)

    def _window(self) -> dict:
        now = self.clock().astimezone(timezone.utc)
        return {
            "startDate": (now - EGVS_WINDOW).strftime(TIMESTAMP_FORMAT),
            "endDate": now.strftime(TIMESTAMP_FORMAT),
        }

    def _get_dexcom_api_data(self, endpoint: str) -> EGVSResponse:
        url = self._build_url(endpoint)
        params = self._window()
        start_time = time.monotonic()
        status = "error"
        try:
            data = self.transport.result(url, parse_envelope, params=params)
            status = "success"
            return data
        except SegmentError as e:
            logger.warning(
                "Dexcom API call failed",
                extra={"log_type": "api_error", "endpoint": endpoint, "error_type": type(e).__name__, "error": str(e)}
            )
            raise
        finally:
            dexcom_api_call_latency_seconds.labels(endpoint=endpoint).observe(time.monotonic() - start_time)
            dexcom_api_call_total.labels(endpoint=endpoint, status=status).inc()
