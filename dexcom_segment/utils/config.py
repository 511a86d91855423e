"""Configuration utilities for the Dexcom segment."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEXCOM_API_BASE_URL = "https://api.dexcom.com"

DEFAULT_CACHE_TIMEOUT = 5
DEFAULT_HTTP_TIMEOUT = 20.0


class SegmentConfig(BaseModel):
    """Explicit configuration handed to the segment at construction."""

    model_config = ConfigDict(frozen=True)

    access_token: Optional[SecretStr] = Field(None, description="OAuth access token")
    refresh_token: Optional[SecretStr] = Field(None, description="OAuth refresh token")
    client_id: Optional[str] = Field(None, description="Dexcom API client ID")
    client_secret: Optional[SecretStr] = Field(None, description="Dexcom API client secret")
    cache_timeout: int = Field(DEFAULT_CACHE_TIMEOUT, description="Reading cache TTL in seconds, <= 0 disables the cache")
    http_timeout: float = Field(DEFAULT_HTTP_TIMEOUT, description="HTTP request timeout in seconds")
    base_url: str = Field(DEXCOM_API_BASE_URL, description="Dexcom API base URL")


class Settings(BaseSettings):
    """Settings loaded from environment variables and an optional .env file."""

    # Dexcom API Configuration
    dexcom_access_token: Optional[SecretStr] = Field(None, description="Dexcom OAuth access token")
    dexcom_refresh_token: Optional[SecretStr] = Field(None, description="Dexcom OAuth refresh token")
    dexcom_client_id: Optional[str] = Field(None, description="Dexcom API client ID")
    dexcom_client_secret: Optional[SecretStr] = Field(None, description="Dexcom API client secret")
    dexcom_api_base_url: str = Field(DEXCOM_API_BASE_URL, description="Dexcom API base URL")

    # Request / cache behaviour
    cache_timeout: int = Field(DEFAULT_CACHE_TIMEOUT, description="Reading cache TTL in seconds")
    http_timeout: float = Field(DEFAULT_HTTP_TIMEOUT, description="HTTP request timeout in seconds")
    cache_backend: Literal["file", "memory", "dynamodb"] = Field("file", description="Cache backend")
    cache_path: Optional[str] = Field(None, description="Cache file path for the file backend")

    # DynamoDB cache backend
    dynamodb_cache_table: str = Field("segment_cache", description="DynamoDB table for the cache backend")
    dynamodb_endpoint: Optional[str] = Field(None, description="DynamoDB endpoint URL, primarily for local development")
    aws_region: str = Field("us-east-1", description="AWS region")

    # Logging
    log_level: str = Field("WARNING", description="Logging level")
    log_format: Literal["plain", "json"] = Field("plain", description="Log output format")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )

    @field_validator("dexcom_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """
        Normalize the base URL so endpoint paths can be appended.

        Args:
            v: Base URL

        Returns:
            str: Base URL without trailing slash
        """
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    def segment_config(self) -> SegmentConfig:
        """
        Build the explicit segment configuration from these settings.

        Returns:
            SegmentConfig: Configuration for ``DexcomSegment``
        """
        return SegmentConfig(
            access_token=self.dexcom_access_token,
            refresh_token=self.dexcom_refresh_token,
            client_id=self.dexcom_client_id,
            client_secret=self.dexcom_client_secret,
            cache_timeout=self.cache_timeout,
            http_timeout=self.http_timeout,
            base_url=self.dexcom_api_base_url,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Create and cache settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
