"""In-memory access token cache backed by the OAuth2 refresh-token grant.

The cache holds a single Google access token for the lifetime of the
process. A token is served while more than ``margin_seconds`` of its
lifetime remain; otherwise it is exchanged for a new one using the
statically configured client id, client secret and refresh token.

Concurrent callers that find the token expired share a single pending
refresh instead of each hitting the token endpoint.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from mcp_hub.auth.models import OAuthToken, TokenStatus
from mcp_hub.config import DEFAULT_TOKEN_MARGIN_SECONDS, HubSettings
from mcp_hub.exceptions import UpstreamAuthError

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"  # nosec B105 - public endpoint


class CredentialCache:
    """Single-slot cache for a Google OAuth access token.

    Attributes:
        margin_seconds: Remaining lifetime below which a token is refreshed.

    Example:
        ```python
        cache = CredentialCache(
            client_id="...",
            client_secret="...",  # pragma: allowlist secret
            refresh_token="...",
        )
        access_token = await cache.get_token()
        ```
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        refresh_token: str | None,
        margin_seconds: int = DEFAULT_TOKEN_MARGIN_SECONDS,
        token_uri: str = GOOGLE_TOKEN_URI,
    ) -> None:
        """Initialize the cache.

        Args:
            client_id: Google OAuth client ID.
            client_secret: Google OAuth client secret.
            refresh_token: Refresh token for the Google account.
            margin_seconds: Safety margin applied to token expiry.
            token_uri: Token endpoint used for the refresh grant.
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._token_uri = token_uri
        self.margin_seconds = margin_seconds
        self._token: OAuthToken | None = None
        self._refresh_task: asyncio.Future[OAuthToken] | None = None

    @classmethod
    def from_settings(cls, settings: HubSettings) -> "CredentialCache":
        """Create a cache from hub settings."""
        return cls(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            refresh_token=settings.google_refresh_token,
            margin_seconds=settings.token_margin_seconds,
        )

    @property
    def is_configured(self) -> bool:
        """Whether the refresh-token triple is complete."""
        return bool(self._client_id and self._client_secret and self._refresh_token)

    @property
    def token(self) -> OAuthToken | None:
        """The currently cached token, if any."""
        return self._token

    def get_status(self) -> TokenStatus:
        """Get the status of the cached token.

        Returns:
            TokenStatus for the cached credential.
        """
        if self._token is None:
            return TokenStatus.MISSING
        if self._token.is_expired(buffer_seconds=self.margin_seconds):
            return TokenStatus.EXPIRED
        return TokenStatus.VALID

    async def get_token(self) -> str:
        """Get a usable access token, refreshing if necessary.

        Returns:
            Access token string.

        Raises:
            UpstreamAuthError: If credentials are missing or the refresh fails.
        """
        token = self._token
        if token is not None and not token.is_expired(buffer_seconds=self.margin_seconds):
            return token.access_token

        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._refresh())
            self._refresh_task.add_done_callback(self._on_refresh_done)

        # Shield so one cancelled caller does not abort the refresh for the others
        new_token = await asyncio.shield(self._refresh_task)
        return new_token.access_token

    def _on_refresh_done(self, task: "asyncio.Future[OAuthToken]") -> None:
        """Clear the pending refresh so failures are retried on the next call."""
        if self._refresh_task is task:
            self._refresh_task = None
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Google token refresh failed: %s", task.exception())

    async def _refresh(self) -> OAuthToken:
        """Exchange the refresh token for a new access token.

        Returns:
            The new token, which also replaces the cached one.

        Raises:
            UpstreamAuthError: If credentials are missing or the exchange fails.
        """
        if not self.is_configured:
            raise UpstreamAuthError(
                "Google OAuth credentials are not configured. Set GOOGLE_CLIENT_ID, "
                "GOOGLE_CLIENT_SECRET and GOOGLE_REFRESH_TOKEN."
            )

        logger.info("Refreshing Google access token...")
        credentials = self._build_credentials()

        # Run refresh in executor (blocking)
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, credentials.refresh, Request())
        except GoogleAuthError as e:
            raise UpstreamAuthError(f"Token refresh failed: {e}") from e
        except (ValueError, TypeError, KeyError) as e:
            # Malformed token endpoint response
            raise UpstreamAuthError(f"Token refresh failed: malformed response ({e})") from e

        if not credentials.token:
            raise UpstreamAuthError("Token refresh failed: no access_token in response")

        token = self._credentials_to_token(credentials)
        self._token = token
        logger.info("Google access token refreshed, expires at %s", token.expires_at.isoformat())
        return token

    def _build_credentials(self) -> Credentials:
        """Build refresh-only google-auth credentials.

        Returns:
            Credentials without an access token, ready to be refreshed.
        """
        return Credentials(  # nosec B106 - token_uri is public Google OAuth endpoint
            token=None,
            refresh_token=self._refresh_token,
            token_uri=self._token_uri,
            client_id=self._client_id,
            client_secret=self._client_secret,
        )

    def _credentials_to_token(self, credentials: Credentials) -> OAuthToken:
        """Convert refreshed google-auth Credentials to an OAuthToken.

        Args:
            credentials: Refreshed Google OAuth2 credentials.

        Returns:
            OAuthToken with a timezone-aware expiry.
        """
        if credentials.expiry:
            expires_at = credentials.expiry
            # google-auth reports naive UTC
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
        else:
            # Default to 1 hour expiration
            expires_at = datetime.now(timezone.utc) + timedelta(hours=1)

        return OAuthToken(
            access_token=credentials.token,
            expires_at=expires_at,
        )
