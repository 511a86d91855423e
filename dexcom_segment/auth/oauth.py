"""
OAuth2 transport for the Dexcom API.

Issues authenticated GET requests with a bearer token and keeps the token
pair usable by refreshing it with the held refresh token when the access
token is missing, known to be expired, or rejected with a 401. Only the
refresh-token grant is implemented; the authorization-code exchange happens
elsewhere.
"""
import logging
import time
from typing import Callable, Dict, Optional, TypeVar, Union

import httpx
from pydantic import SecretStr, ValidationError

from dexcom_segment.data.cache import Cache
from dexcom_segment.metrics import dexcom_token_refresh_total
from dexcom_segment.models.tokens import TokenPair, TokenResponse
from dexcom_segment.utils.config import DEFAULT_HTTP_TIMEOUT
from dexcom_segment.utils.error_handling import (
    CacheError,
    TokenError,
    TransportError,
)
from dexcom_segment.utils.logging_utils import redact_sensitive_data

logger = logging.getLogger(__name__)

T = TypeVar("T")

ACCESS_TOKEN_KEY = "dexcom_access_token"
REFRESH_TOKEN_KEY = "dexcom_refresh_token"

# Dexcom refresh tokens are valid for a year
REFRESH_TOKEN_TTL = 365 * 24 * 60 * 60


class OAuthTransport:
    """Bearer-token HTTP transport that refreshes the shared token pair."""

    def __init__(
        self,
        tokens: TokenPair,
        *,
        base_url: str,
        client_id: Optional[str] = None,
        client_secret: Optional[SecretStr] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        cache: Optional[Cache] = None,
        access_token_key: str = ACCESS_TOKEN_KEY,
        refresh_token_key: str = REFRESH_TOKEN_KEY,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize the transport.

        :param tokens: Token pair, updated in place on refresh
        :param base_url: Dexcom API base URL, used for the token endpoint
        :param client_id: OAuth2 client ID
        :param client_secret: OAuth2 client secret
        :param timeout: HTTP timeout in seconds
        :param cache: Optional cache the refreshed tokens are persisted to
        :param access_token_key: Cache key for the access token
        :param refresh_token_key: Cache key for the refresh token
        :param http_client: Pre-built httpx client
        """
        self.tokens = tokens
        self.base_url = base_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.cache = cache
        self.access_token_key = access_token_key
        self.refresh_token_key = refresh_token_key
        self.http_client = http_client or httpx.Client(timeout=httpx.Timeout(timeout))
        self._load_cached_tokens()

    def close(self) -> None:
        """Close underlying HTTPX client."""
        self.http_client.close()

    def __enter__(self) -> "OAuthTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    # ---------------------- token persistence -----------------------------
    def _load_cached_tokens(self) -> None:
        """Prefer previously refreshed tokens over the configured ones."""
        if self.cache is None:
            return
        for key, attr in ((self.access_token_key, "access_token"), (self.refresh_token_key, "refresh_token")):
            try:
                value, found = self.cache.get(key)
            except CacheError as e:
                logger.warning(f"Could not read {key} from cache: {e}")
                continue
            if found and value:
                setattr(self.tokens, attr, SecretStr(value))

    def _store_tokens(self, token_response: TokenResponse) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(self.access_token_key, token_response.access_token, token_response.expires_in)
            if token_response.refresh_token:
                self.cache.set(self.refresh_token_key, token_response.refresh_token, REFRESH_TOKEN_TTL)
        except CacheError as e:
            logger.warning(f"Could not persist refreshed tokens: {e}")

    # ---------------------- OAuth2 refresh --------------------------------
    def refresh(self) -> TokenResponse:
        """
        Use the refresh token to obtain a new token pair.

        Returns:
            TokenResponse: The new token data, already applied to ``self.tokens``

        Raises:
            TokenError: If there is no refresh token or the refresh failed
        """
        if self.tokens.refresh_token is None:
            dexcom_token_refresh_total.labels(status="error").inc()
            raise TokenError("missing_refresh_token", "No refresh token available")

        token_url = f"{self.base_url}/v2/oauth2/token"
        data = {
            "grant_type": "refresh_token",
            "refresh_token": self.tokens.refresh_token.get_secret_value(),
        }
        if self.client_id:
            data["client_id"] = self.client_id
        if self.client_secret:
            data["client_secret"] = self.client_secret.get_secret_value()
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

        logger.info(
            "Refreshing access token",
            extra={"log_type": "token_refresh", "url": token_url}
        )

        try:
            response = self.http_client.post(token_url, data=data, headers=headers)
        except httpx.RequestError as e:
            dexcom_token_refresh_total.labels(status="error").inc()
            raise TokenError("network_error", f"Request failed: {e}") from e

        if response.status_code != 200:
            dexcom_token_refresh_total.labels(status="error").inc()
            try:
                error_data = response.json()
                error = error_data.get("error", "unknown_error")
                error_description = error_data.get("error_description")
            except (ValueError, AttributeError):
                error = "invalid_response"
                error_description = f"Received status {response.status_code}"
            logger.error(
                "Token refresh failed",
                extra={
                    "log_type": "token_refresh_error",
                    "status_code": response.status_code,
                    "error": error,
                }
            )
            raise TokenError(error, error_description, response.status_code)

        try:
            token_response = TokenResponse.model_validate_json(response.content)
        except ValidationError as e:
            dexcom_token_refresh_total.labels(status="error").inc()
            raise TokenError("invalid_response", f"Failed to parse token response: {e}") from e

        self.tokens.update(token_response)
        self._store_tokens(token_response)
        dexcom_token_refresh_total.labels(status="success").inc()
        logger.info(
            "Token refresh successful",
            extra={"log_type": "token_refresh_success", "expires_in": token_response.expires_in}
        )
        return token_response

    def _ensure_token_valid(self) -> bool:
        """Refresh up front when there is no usable access token. Returns True if it refreshed."""
        if self.tokens.access_token is None or self.tokens.is_expired():
            self.refresh()
            return True
        return False

    # ---------------------- requests --------------------------------------
    def _get(self, url: str, params: Optional[Dict[str, str]]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.tokens.access_token.get_secret_value()}"}
        logger.debug(
            "Dexcom API request",
            extra={
                "log_type": "request",
                "method": "GET",
                "url": url,
                "headers": redact_sensitive_data(headers),
                "params": params,
            }
        )
        try:
            return self.http_client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {url} timed out") from e
        except httpx.RequestError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

    def result(
        self,
        url: str,
        decode: Callable[[Union[bytes, str]], T],
        params: Optional[Dict[str, str]] = None,
    ) -> T:
        """
        Perform an authenticated GET and decode the body with *decode*.

        A 401 triggers one token refresh and one replay of the request,
        unless the token was refreshed just before the first attempt.

        Raises:
            TokenError: Authentication could not be resolved
            TransportError: Network, timeout or HTTP error
            DecodeError: Raised by *decode* for a malformed body
        """
        refreshed = self._ensure_token_valid()
        start_time = time.monotonic()
        response = self._get(url, params)
        if response.status_code == 401 and not refreshed:
            logger.info("Access token rejected, refreshing", extra={"log_type": "token_rejected", "url": url})
            self.refresh()
            response = self._get(url, params)

        logger.debug(
            "Dexcom API response",
            extra={
                "log_type": "response",
                "url": url,
                "status_code": response.status_code,
                "latency": time.monotonic() - start_time,
            }
        )

        if response.status_code == 401:
            raise TokenError("unauthorized", response.text, response.status_code)
        if not response.is_success:
            raise TransportError("API request failed", status_code=response.status_code, response_body=response.text)

        return decode(response.content)
