"""Upstream connectors exposed as MCP tools.

Tools (registration order):
- gmail: Search Gmail messages
- calendar: List upcoming primary-calendar events
- drive: List Google Drive files
- notion: Search Notion pages
"""

import httpx

from mcp_hub.auth import CredentialCache
from mcp_hub.connectors.base import Connector, GoogleConnector, create_http_client
from mcp_hub.connectors.calendar import CalendarConnector
from mcp_hub.connectors.drive import DriveConnector
from mcp_hub.connectors.gmail import GmailConnector
from mcp_hub.connectors.notion import NotionConnector


def build_connectors(
    client: httpx.AsyncClient,
    credentials: CredentialCache,
    notion_token: str | None,
) -> list[Connector]:
    """Create the default connector set.

    Args:
        client: Shared HTTP client.
        credentials: Google access token cache.
        notion_token: Static Notion integration secret.

    Returns:
        Connectors in registration order.
    """
    return [
        GmailConnector(client, credentials),
        CalendarConnector(client, credentials),
        DriveConnector(client, credentials),
        NotionConnector(client, notion_token),
    ]


__all__ = [
    "build_connectors",
    "create_http_client",
    "Connector",
    "GoogleConnector",
    "GmailConnector",
    "CalendarConnector",
    "DriveConnector",
    "NotionConnector",
]
