"""OAuth credential handling for MCP Hub.

Quick Start:
    ```python
    from mcp_hub.auth import CredentialCache

    cache = CredentialCache(
        client_id="your-client-id",
        client_secret="your-client-secret",  # pragma: allowlist secret
        refresh_token="your-refresh-token",
    )

    access_token = await cache.get_token()
    ```
"""

from mcp_hub.auth.models import OAuthToken, TokenStatus
from mcp_hub.auth.token_cache import GOOGLE_TOKEN_URI, CredentialCache

__all__ = [
    "CredentialCache",
    "OAuthToken",
    "TokenStatus",
    "GOOGLE_TOKEN_URI",
]
