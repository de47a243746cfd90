"""Notion workspace search."""

from typing import Any

import httpx

from mcp_hub.connectors.base import Connector
from mcp_hub.exceptions import UpstreamAuthError

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
PAGE_SIZE = 10


class NotionConnector(Connector):
    """Search Notion pages and databases shared with the integration.

    Authenticates with a static integration secret rather than the
    Google credential cache.
    """

    name = "notion"
    description = "Search Notion pages. Actions: search"
    input_schema = {
        "type": "object",
        "properties": {
            "action": {"type": "string"},
            "query": {"type": "string", "description": "Text to search for"},
        },
    }

    def __init__(self, client: httpx.AsyncClient, token: str | None) -> None:
        super().__init__(client)
        self._token = token

    async def run(self, arguments: dict[str, Any]) -> dict[str, Any]:
        if not self._token:
            raise UpstreamAuthError("Notion token is not configured. Set NOTION_TOKEN.")

        query = arguments.get("query") or ""
        response = await self._request(
            "POST",
            f"{NOTION_API_BASE}/search",
            self._token,
            json_data={"query": query, "page_size": PAGE_SIZE},
            headers={"Notion-Version": NOTION_VERSION},
        )

        pages = [
            {"id": page.get("id"), "title": self._page_title(page), "url": page.get("url")}
            for page in response.get("results") or []
        ]
        return {"pages": pages}

    @staticmethod
    def _page_title(page: dict[str, Any]) -> str:
        properties = page.get("properties") or {}
        # Pages expose "title"; database rows usually name the column "Name"
        for key in ("title", "Name"):
            fragments = (properties.get(key) or {}).get("title") or []
            if fragments and fragments[0].get("plain_text"):
                return fragments[0]["plain_text"]
        return "Untitled"
