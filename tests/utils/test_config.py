"""Tests for the configuration module."""

import os
from unittest import mock

import pytest
from pydantic import ValidationError

from dexcom_segment.utils.config import (
    DEFAULT_HTTP_TIMEOUT,
    DEXCOM_API_BASE_URL,
    SegmentConfig,
    Settings,
    get_settings,
)


@pytest.fixture
def mock_env():
    """Create a mock environment with test values."""
    env_vars = {
        "DEXCOM_ACCESS_TOKEN": "env_access_token",
        "DEXCOM_REFRESH_TOKEN": "env_refresh_token",
        "DEXCOM_CLIENT_ID": "env_client_id",
        "DEXCOM_CLIENT_SECRET": "env_client_secret",
        "DEXCOM_API_BASE_URL": "https://sandbox-api.dexcom.com/",
        "CACHE_TIMEOUT": "0",
        "HTTP_TIMEOUT": "2.5",
        "CACHE_BACKEND": "memory",
    }

    with mock.patch.dict(os.environ, env_vars, clear=True):
        yield env_vars


def test_settings_loading(mock_env):
    """Test that settings are loaded correctly from environment variables."""
    settings = Settings(_env_file=None)

    assert settings.dexcom_access_token.get_secret_value() == "env_access_token"
    assert settings.dexcom_refresh_token.get_secret_value() == "env_refresh_token"
    assert settings.dexcom_client_id == "env_client_id"
    assert settings.dexcom_api_base_url == "https://sandbox-api.dexcom.com"
    assert settings.cache_timeout == 0
    assert settings.http_timeout == 2.5
    assert settings.cache_backend == "memory"

    # Check default values
    assert settings.log_level == "WARNING"
    assert settings.log_format == "plain"
    assert settings.dynamodb_cache_table == "segment_cache"


def test_settings_defaults():
    with mock.patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.dexcom_access_token is None
    assert settings.cache_timeout == 5
    assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT
    assert settings.dexcom_api_base_url == DEXCOM_API_BASE_URL
    assert settings.cache_backend == "file"


def test_invalid_cache_backend():
    with mock.patch.dict(os.environ, {"CACHE_BACKEND": "redis"}, clear=True):
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


def test_segment_config_from_settings(mock_env):
    config = Settings(_env_file=None).segment_config()

    assert isinstance(config, SegmentConfig)
    assert config.access_token.get_secret_value() == "env_access_token"
    assert config.client_secret.get_secret_value() == "env_client_secret"
    assert config.base_url == "https://sandbox-api.dexcom.com"
    assert config.http_timeout == 2.5
    assert config.cache_timeout == 0


def test_segment_config_defaults_and_immutability():
    config = SegmentConfig()

    assert config.cache_timeout == 5
    assert config.http_timeout == DEFAULT_HTTP_TIMEOUT
    assert config.base_url == DEXCOM_API_BASE_URL
    with pytest.raises(ValidationError):
        config.cache_timeout = 10


def test_secrets_are_not_printed(mock_env):
    settings = Settings(_env_file=None)
    assert "env_refresh_token" not in repr(settings)
    assert "env_refresh_token" not in repr(settings.segment_config())


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
