"""Models for the Dexcom OAuth token pair."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field, SecretStr


class TokenPair(BaseModel):
    """Access/refresh token pair shared between the client and its transport.

    The transport updates an instance in place when it refreshes, so every
    holder of the same object sees the new tokens.
    """

    access_token: Optional[SecretStr] = Field(None, description="Access token for API calls")
    refresh_token: Optional[SecretStr] = Field(None, description="Refresh token for obtaining new access tokens")
    expires_at: Optional[datetime] = Field(None, description="When the access token expires, if known")

    def is_expired(self) -> bool:
        """Check if the access token is known to have expired."""
        if self.expires_at is None:
            return False
        # Add a 30-second buffer to account for latency and clock differences
        buffer_time = timedelta(seconds=30)
        return datetime.now(timezone.utc) >= (self.expires_at - buffer_time)

    def update(self, token_response: "TokenResponse") -> None:
        """Replace the pair with the tokens from a refresh response."""
        self.access_token = SecretStr(token_response.access_token)
        if token_response.refresh_token:
            self.refresh_token = SecretStr(token_response.refresh_token)
        self.expires_at = token_response.expires_at


class TokenResponse(BaseModel):
    """OAuth2 token response model."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_token: Optional[str] = None
    scope: str = ""

    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def expires_at(self) -> datetime:
        """Calculate when the token will expire."""
        return self.issued_at + timedelta(seconds=self.expires_in)
