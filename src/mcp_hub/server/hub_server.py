"""MCP Hub server core.

Wires the credential cache, the shared HTTP client, the connectors and
the dispatcher together. The same instance backs the HTTP app
(``mcp_hub.server.http_app``) and the stdio MCP transport below.
"""

import asyncio
import json
import logging
from typing import Any

import httpx
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from mcp_hub.auth import CredentialCache
from mcp_hub.config import HubSettings
from mcp_hub.connectors import build_connectors, create_http_client
from mcp_hub.server.dispatcher import SERVER_NAME, RequestDispatcher
from mcp_hub.server.registry import ToolRegistry

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class McpHubServer:
    """MCP server exposing Gmail, Calendar, Drive and Notion tools.

    Attributes:
        settings: Runtime configuration.
        credentials: Google access token cache.
        registry: Registered tools.
        dispatcher: JSON-RPC dispatcher over the registry.
        server: MCP Server instance for the stdio transport.
    """

    def __init__(
        self,
        settings: HubSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
        credentials: CredentialCache | None = None,
    ) -> None:
        """Initialize the hub.

        Args:
            settings: Runtime configuration. Read from the environment if not provided.
            http_client: HTTP client for upstream calls. A pooled client is
                created (and owned) if not provided.
            credentials: Token cache. Built from ``settings`` if not provided.
        """
        self.settings = settings or HubSettings.from_env()
        self.credentials = credentials or CredentialCache.from_settings(self.settings)
        self._owns_http_client = http_client is None
        self._http_client = http_client or create_http_client()
        self.registry = ToolRegistry(
            build_connectors(self._http_client, self.credentials, self.settings.notion_token)
        )
        self.dispatcher = RequestDispatcher(self.registry)
        self.server = Server(SERVER_NAME)
        self._setup_handlers()

    async def close(self) -> None:
        """Close the shared HTTP client if this hub created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    def _setup_handlers(self) -> None:
        """Register MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return list of available tools."""
            return self.registry.descriptors()

        # Arguments are coerced by each connector, not checked against inputSchema
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            result = await self.dispatcher.call_tool(name, arguments or {})
            return [TextContent(type="text", text=json.dumps(result, indent=2, ensure_ascii=False))]

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main() -> None:
    """Entry point for the stdio MCP server."""
    server = McpHubServer()
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
