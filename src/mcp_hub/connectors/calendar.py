"""Google Calendar upcoming events."""

from datetime import datetime, timezone
from typing import Any

from mcp_hub.connectors.base import GoogleConnector, int_argument

CALENDAR_API_BASE = "https://www.googleapis.com/calendar/v3"
DEFAULT_MAX_RESULTS = 10


class CalendarConnector(GoogleConnector):
    """List upcoming events from the primary calendar."""

    name = "calendar"
    description = "List upcoming Google Calendar events. Actions: list_events"
    input_schema = {
        "type": "object",
        "properties": {
            "action": {"type": "string"},
            "maxResults": {
                "type": "number",
                "description": "Maximum number of events to return (default: 10)",
            },
        },
    }

    async def run(self, arguments: dict[str, Any]) -> dict[str, Any]:
        max_results = int_argument(arguments, "maxResults", DEFAULT_MAX_RESULTS)

        url = f"{CALENDAR_API_BASE}/calendars/primary/events"
        params: dict[str, Any] = {
            "timeMin": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "maxResults": max_results,
            "singleEvents": True,
            "orderBy": "startTime",
        }
        response = await self._make_request("GET", url, params=params)

        events = []
        for item in response.get("items") or []:
            start = item.get("start") or {}
            end = item.get("end") or {}
            events.append(
                {
                    "id": item.get("id"),
                    "title": item.get("summary") or "No title",
                    "start": start.get("dateTime") or start.get("date"),
                    "end": end.get("dateTime") or end.get("date"),
                    "location": item.get("location") or "",
                }
            )

        return {"events": events}
