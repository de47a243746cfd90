"""Gmail message search."""

import asyncio
import logging
from typing import Any

from mcp_hub.connectors.base import GoogleConnector, int_argument

logger = logging.getLogger(__name__)

GMAIL_API_BASE = "https://gmail.googleapis.com/gmail/v1"
DEFAULT_MAX_RESULTS = 5
METADATA_HEADERS = ["Subject", "From", "Date"]


class GmailConnector(GoogleConnector):
    """Search Gmail and return subject, sender and date per message.

    Message metadata is fetched concurrently, one request per message id.
    A message whose metadata fetch fails is reported as ``{id, error}``
    instead of failing the whole search.
    """

    name = "gmail"
    description = "Search Gmail messages. Actions: search"
    input_schema = {
        "type": "object",
        "properties": {
            "action": {"type": "string"},
            "query": {
                "type": "string",
                "description": "Gmail search query (e.g., 'from:alice is:unread')",
            },
            "maxResults": {
                "type": "number",
                "description": "Maximum number of messages to return (default: 5)",
            },
        },
    }

    async def run(self, arguments: dict[str, Any]) -> dict[str, Any]:
        query = arguments.get("query") or ""
        max_results = int_argument(arguments, "maxResults", DEFAULT_MAX_RESULTS)

        url = f"{GMAIL_API_BASE}/users/me/messages"
        response = await self._make_request(
            "GET", url, params={"q": query, "maxResults": max_results}
        )

        # Entries without an id cannot be fetched
        message_ids = [
            msg["id"]
            for msg in response.get("messages") or []
            if isinstance(msg, dict) and msg.get("id")
        ][:max_results]
        if not message_ids:
            return {"emails": []}

        details = await asyncio.gather(
            *[self._fetch_metadata(msg_id) for msg_id in message_ids],
            return_exceptions=True,
        )

        emails = []
        for msg_id, detail in zip(message_ids, details):
            if isinstance(detail, BaseException):
                logger.warning("Failed to fetch message %s: %s", msg_id, detail)
                emails.append({"id": msg_id, "error": str(detail)})
                continue
            emails.append(self._format_message(msg_id, detail))

        return {"emails": emails}

    async def _fetch_metadata(self, msg_id: str) -> dict[str, Any]:
        url = f"{GMAIL_API_BASE}/users/me/messages/{msg_id}"
        params = {"format": "metadata", "metadataHeaders": METADATA_HEADERS}
        return await self._make_request("GET", url, params=params)

    @staticmethod
    def _format_message(msg_id: str, detail: dict[str, Any]) -> dict[str, Any]:
        headers = (detail.get("payload") or {}).get("headers") or []

        def header(name: str) -> str | None:
            # First matching header wins
            for h in headers:
                if h.get("name") == name:
                    return h.get("value")
            return None

        return {
            "id": msg_id,
            "subject": header("Subject") or "No subject",
            "from": header("From") or "Unknown",
            "date": header("Date") or "",
        }
