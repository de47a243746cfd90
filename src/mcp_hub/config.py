"""Runtime configuration for MCP Hub.

Environment Variables:
    GOOGLE_CLIENT_ID: Google OAuth client ID
    GOOGLE_CLIENT_SECRET: Google OAuth client secret
    GOOGLE_REFRESH_TOKEN: Long-lived refresh token for the Google account
    NOTION_TOKEN: Notion integration secret used as a static bearer token
    HOST: Listen address for the HTTP server (default: 0.0.0.0)
    PORT: Listen port for the HTTP server (default: 10000)
"""

import os

from pydantic import BaseModel, Field

DEFAULT_HOST = "0.0.0.0"  # nosec B104 - the hub is deployed behind a platform router
DEFAULT_PORT = 10000

# A cached token is not served once less than this many seconds remain
DEFAULT_TOKEN_MARGIN_SECONDS = 60
DEFAULT_SSE_PING_SECONDS = 20


class HubSettings(BaseModel):
    """Settings shared by the HTTP app, the stdio server and the CLI.

    Attributes:
        google_client_id: OAuth client ID for the refresh-token grant.
        google_client_secret: OAuth client secret for the refresh-token grant.
        google_refresh_token: Refresh token exchanged for access tokens.
        notion_token: Static bearer secret for the Notion API.
        host: HTTP listen address.
        port: HTTP listen port.
        token_margin_seconds: Safety margin applied to token expiry.
        sse_ping_seconds: Interval between SSE keep-alive comments.
    """

    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_refresh_token: str | None = None
    notion_token: str | None = None
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    token_margin_seconds: int = Field(default=DEFAULT_TOKEN_MARGIN_SECONDS, ge=0)
    sse_ping_seconds: int = Field(default=DEFAULT_SSE_PING_SECONDS, gt=0)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "HubSettings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Uses ``os.environ`` if not provided.

        Returns:
            HubSettings populated from the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, str | None] = {
            "google_client_id": env.get("GOOGLE_CLIENT_ID"),
            "google_client_secret": env.get("GOOGLE_CLIENT_SECRET"),
            "google_refresh_token": env.get("GOOGLE_REFRESH_TOKEN"),
            "notion_token": env.get("NOTION_TOKEN"),
            "host": env.get("HOST"),
            "port": env.get("PORT"),
        }
        # Unset variables fall back to model defaults
        return cls.model_validate({k: v for k, v in values.items() if v})

    @property
    def has_google_credentials(self) -> bool:
        """Whether the client id/secret/refresh-token triple is complete."""
        return bool(
            self.google_client_id and self.google_client_secret and self.google_refresh_token
        )
