"""Tests for the token pair models."""
from datetime import datetime, timedelta, timezone

from pydantic import SecretStr

from dexcom_segment.models.tokens import TokenPair, TokenResponse


def test_token_pair_without_expiry_is_not_expired():
    tokens = TokenPair(access_token=SecretStr("a"), refresh_token=SecretStr("r"))
    assert tokens.is_expired() is False


def test_token_pair_expiry_uses_buffer():
    now = datetime.now(timezone.utc)
    assert TokenPair(expires_at=now + timedelta(seconds=10)).is_expired() is True
    assert TokenPair(expires_at=now + timedelta(minutes=5)).is_expired() is False
    assert TokenPair(expires_at=now - timedelta(minutes=5)).is_expired() is True


def test_token_response_expires_at():
    issued_at = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    response = TokenResponse(access_token="a", expires_in=7200, refresh_token="r", issued_at=issued_at)
    assert response.expires_at == issued_at + timedelta(seconds=7200)
    assert response.token_type == "Bearer"


def test_update_replaces_tokens_in_place():
    tokens = TokenPair(access_token=SecretStr("old"), refresh_token=SecretStr("old_refresh"))
    holder = tokens
    response = TokenResponse(access_token="new", expires_in=7200, refresh_token="new_refresh")

    tokens.update(response)

    assert holder.access_token.get_secret_value() == "new"
    assert holder.refresh_token.get_secret_value() == "new_refresh"
    assert holder.expires_at == response.expires_at


def test_update_keeps_refresh_token_when_not_rotated():
    tokens = TokenPair(access_token=SecretStr("old"), refresh_token=SecretStr("keep"))
    tokens.update(TokenResponse(access_token="new", expires_in=60))
    assert tokens.refresh_token.get_secret_value() == "keep"
