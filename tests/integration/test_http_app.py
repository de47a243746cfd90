"""Integration tests for the HTTP surface.

Requests go through the Starlette app; upstream APIs are answered by the
``UpstreamStub`` from conftest.
"""

import json
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from starlette.testclient import TestClient

from mcp_hub.auth import CredentialCache
from mcp_hub.server.http_app import create_app, tool_events

CALENDAR_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"
NOTION_SEARCH_URL = "https://api.notion.com/v1/search"

TWO_EVENTS = {
    "items": [
        {
            "id": "evt_1",
            "summary": "Design review",
            "start": {"dateTime": "2025-03-03T09:00:00Z"},
            "end": {"dateTime": "2025-03-03T10:00:00Z"},
            "location": "Room 2",
        },
        {
            "id": "evt_2",
            "summary": "Offsite",
            "start": {"date": "2025-03-05"},
            "end": {"date": "2025-03-06"},
        },
    ]
}


@pytest.fixture
def hub(make_hub):
    return make_hub()


@pytest.fixture
def client(hub) -> Iterator[TestClient]:
    with TestClient(create_app(hub)) as test_client:
        yield test_client


@pytest.mark.integration
class TestDiscoveryRoutes:
    """Tests for GET routes."""

    def test_index(self, client: TestClient) -> None:
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["name"] == "MCP Hub Universal"
        assert "version" in body

    def test_health(self, client: TestClient) -> None:
        body = client.get("/health").json()

        assert body["status"] == "ok"
        assert body["authenticated"] is True
        assert "timestamp" in body

    def test_health_without_credentials(self, make_hub) -> None:
        hub = make_hub(credentials=CredentialCache(None, None, None))
        with TestClient(create_app(hub)) as test_client:
            assert test_client.get("/health").json()["authenticated"] is False

    def test_tools(self, client: TestClient, hub) -> None:
        body = client.get("/tools").json()

        assert [t["name"] for t in body["tools"]] == ["gmail", "calendar", "drive", "notion"]
        assert body["tools"] == hub.registry.to_json()

    def test_cors_headers(self, client: TestClient) -> None:
        response = client.get("/tools", headers={"Origin": "https://example.com"})
        assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.integration
class TestJsonRpcEndpoint:
    """Tests for POST /mcp."""

    def test_calendar_tool_call_end_to_end(self, client: TestClient, upstream) -> None:
        upstream.add("GET", CALENDAR_EVENTS_URL, TWO_EVENTS)

        response = client.post(
            "/mcp",
            json={
                "jsonrpc": "2.0",
                "id": 1,
                "method": "tools/call",
                "params": {"name": "calendar", "arguments": {"maxResults": 3}},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"jsonrpc", "id", "result"}
        assert body["jsonrpc"] == "2.0"
        assert body["id"] == 1
        assert list(body["result"]) == ["content"]
        content = body["result"]["content"]
        assert len(content) == 1
        assert content[0]["type"] == "text"

        payload = json.loads(content[0]["text"])
        assert len(payload["events"]) == 2
        assert payload["events"][1] == {
            "id": "evt_2",
            "title": "Offsite",
            "start": "2025-03-05",
            "end": "2025-03-06",
            "location": "",
        }
        assert upstream.requests[0].url.params["maxResults"] == "3"

    def test_upstream_failure_is_tool_level_error(self, client: TestClient, upstream) -> None:
        upstream.add("POST", NOTION_SEARCH_URL, httpx.Response(502))

        body = client.post(
            "/mcp",
            json={
                "jsonrpc": "2.0",
                "id": "n-1",
                "method": "tools/call",
                "params": {"name": "notion", "arguments": {"query": "x"}},
            },
        ).json()

        assert "error" not in body
        payload = json.loads(body["result"]["content"][0]["text"])
        assert "HTTP 502" in payload["error"]

    def test_message_alias(self, client: TestClient) -> None:
        body = client.post(
            "/mcp/message", json={"jsonrpc": "2.0", "id": 2, "method": "initialize"}
        ).json()

        assert body["result"]["serverInfo"]["name"] == "mcp-hub-universal"

    def test_unknown_method(self, client: TestClient) -> None:
        body = client.post(
            "/mcp", json={"jsonrpc": "2.0", "id": 3, "method": "resources/list"}
        ).json()

        assert body["error"]["code"] == -32601

    def test_notification_has_empty_body(self, client: TestClient) -> None:
        response = client.post(
            "/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"}
        )

        assert response.status_code == 202
        assert response.content == b""

    @pytest.mark.parametrize("name", [["gmail"], {"x": 1}])
    def test_non_string_tool_name_is_tool_level_error(self, client: TestClient, name) -> None:
        response = client.post(
            "/mcp",
            json={"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": name}},
        )

        assert response.status_code == 200
        body = response.json()
        assert "error" not in body
        assert json.loads(body["result"]["content"][0]["text"]) == {"error": "Tool not found"}

    def test_parse_error(self, client: TestClient) -> None:
        response = client.post(
            "/mcp", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.json() == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32700, "message": "Parse error"},
        }


@pytest.mark.integration
class TestDirectCallRoutes:
    """Tests for the direct-call shims."""

    def test_call_route(self, client: TestClient, upstream) -> None:
        upstream.add("GET", CALENDAR_EVENTS_URL, TWO_EVENTS)

        body = client.post("/call", json={"name": "calendar", "arguments": {}}).json()

        assert len(body["result"]["events"]) == 2

    def test_call_route_unknown_tool(self, client: TestClient) -> None:
        body = client.post("/call", json={"name": "slack"}).json()
        assert body == {"result": {"error": "Tool not found"}}

    @pytest.mark.parametrize("name", [["calendar"], {"x": 1}])
    def test_call_route_non_string_name(self, client: TestClient, name) -> None:
        response = client.post("/call", json={"name": name})

        assert response.status_code == 200
        assert response.json() == {"result": {"error": "Tool not found"}}

    def test_call_route_rejects_non_object(self, client: TestClient) -> None:
        response = client.post("/call", json=["calendar"])
        assert response.status_code == 400

    def test_tool_shim(self, client: TestClient, upstream) -> None:
        upstream.add("POST", NOTION_SEARCH_URL, {"results": [{"id": "p1", "url": "u"}]})

        body = client.post("/notion/search", json={"query": "plans"}).json()

        assert body == {"pages": [{"id": "p1", "title": "Untitled", "url": "u"}]}
        assert json.loads(upstream.requests[0].content)["query"] == "plans"

    def test_tool_shim_accepts_empty_body(self, client: TestClient, upstream) -> None:
        upstream.add("GET", CALENDAR_EVENTS_URL, {})
        assert client.post("/calendar/events").json() == {"events": []}


@pytest.mark.integration
class TestToolEvents:
    """Tests for the SSE event generator."""

    @pytest.mark.asyncio
    async def test_should_emit_tools_then_stop_on_disconnect(self, hub) -> None:
        request = MagicMock()
        request.is_disconnected = AsyncMock(side_effect=[False, True])

        events = [event async for event in tool_events(hub, request, poll_interval=0)]

        assert len(events) == 1
        payload = json.loads(events[0]["data"])
        assert payload["type"] == "tools"
        assert payload["tools"] == hub.registry.to_json()
        assert request.is_disconnected.await_count == 2
