"""Data models for cached OAuth credentials."""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field


class TokenStatus(str, Enum):
    """State of the credential held by the cache."""

    VALID = "valid"
    EXPIRED = "expired"
    MISSING = "missing"


class OAuthToken(BaseModel):
    """An access token and its absolute expiry.

    Attributes:
        access_token: Opaque bearer token.
        expires_at: Timezone-aware instant at which the token expires.
    """

    access_token: str = Field(..., description="Bearer token")
    expires_at: datetime = Field(..., description="Absolute expiry (UTC)")

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        """Check whether the token is expired or about to expire.

        Args:
            buffer_seconds: Safety margin; a token with less remaining
                lifetime than this is treated as expired.

        Returns:
            True if the token should no longer be served.
        """
        deadline = self.expires_at - timedelta(seconds=buffer_seconds)
        return datetime.now(timezone.utc) >= deadline
