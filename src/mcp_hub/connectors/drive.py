"""Google Drive file listing."""

from typing import Any

from mcp_hub.connectors.base import GoogleConnector, int_argument

DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"
DEFAULT_MAX_RESULTS = 10
FILE_FIELDS = ("id", "name", "mimeType", "modifiedTime")


class DriveConnector(GoogleConnector):
    """List Drive files, optionally filtered by a name substring."""

    name = "drive"
    description = "List Google Drive files. Actions: list_files"
    input_schema = {
        "type": "object",
        "properties": {
            "action": {"type": "string"},
            "query": {
                "type": "string",
                "description": "Only return files whose name contains this text",
            },
            "maxResults": {
                "type": "number",
                "description": "Maximum number of files to return (default: 10)",
            },
        },
    }

    async def run(self, arguments: dict[str, Any]) -> dict[str, Any]:
        query = arguments.get("query") or ""
        max_results = int_argument(arguments, "maxResults", DEFAULT_MAX_RESULTS)

        url = f"{DRIVE_API_BASE}/files"
        params: dict[str, Any] = {
            "pageSize": max_results,
            "fields": f"files({','.join(FILE_FIELDS)})",
        }
        if query:
            params["q"] = self._name_filter(query)

        response = await self._make_request("GET", url, params=params)

        files = [
            {field: item.get(field) for field in FILE_FIELDS}
            for item in response.get("files") or []
        ]
        return {"files": files}

    @staticmethod
    def _name_filter(query: str) -> str:
        """Build a Drive ``name contains`` clause."""
        # Escape backslashes and single quotes per the Drive query grammar
        escaped = query.replace("\\", "\\\\").replace("'", "\\'")
        return f"name contains '{escaped}'"
