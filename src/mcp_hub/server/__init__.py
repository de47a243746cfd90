"""MCP server implementation for MCP Hub.

Provides 4 tools:
- gmail: Search Gmail messages
- calendar: List upcoming Google Calendar events
- drive: List Google Drive files
- notion: Search Notion pages

Transports: HTTP (JSON-RPC on /mcp, discovery routes, SSE) and stdio
Authentication: OAuth 2.0 refresh-token grant with an in-memory token cache
"""

from mcp_hub.server.dispatcher import RequestDispatcher
from mcp_hub.server.hub_server import McpHubServer, main
from mcp_hub.server.registry import ToolRegistry


def create_server() -> McpHubServer:
    """Create and configure an MCP Hub server from the environment.

    Returns:
        McpHubServer: Configured server instance ready to run.

    Example:
        >>> server = create_server()
        >>> asyncio.run(server.run())
    """
    return McpHubServer()


__all__ = ["create_server", "McpHubServer", "RequestDispatcher", "ToolRegistry", "main"]
