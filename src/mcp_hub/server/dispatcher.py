"""JSON-RPC request dispatcher for the MCP tool protocol.

Each request is handled independently. Methods are matched in order:

1. ``initialize``: fixed capability and server-info descriptor
2. ``tools/list``: the tool registry
3. ``tools/call``: run a connector; failures become ``{"error": ...}`` in
   the tool result, never JSON-RPC errors
4. ``notifications/*``: acknowledged without a response envelope
5. anything else: JSON-RPC error -32601
"""

import json
import logging
from typing import Any

from mcp.types import (
    Implementation,
    InitializeResult,
    ServerCapabilities,
    TextContent,
    ToolsCapability,
)

from mcp_hub.__version__ import __version__
from mcp_hub.exceptions import (
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    HubError,
    ProtocolError,
    ToolNotFoundError,
)
from mcp_hub.server.registry import ToolRegistry

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "mcp-hub-universal"


def error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    """Build a JSON-RPC error envelope."""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


class RequestDispatcher:
    """Maps JSON-RPC requests onto the tool registry.

    Attributes:
        registry: Tools available to ``tools/list`` and ``tools/call``.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        server_name: str = SERVER_NAME,
        server_version: str = __version__,
    ) -> None:
        self.registry = registry
        self._initialize_result = InitializeResult(
            protocolVersion=PROTOCOL_VERSION,
            capabilities=ServerCapabilities(tools=ToolsCapability()),
            serverInfo=Implementation(name=server_name, version=server_version),
        ).model_dump(mode="json", by_alias=True, exclude_none=True)

    async def handle(self, message: Any) -> dict[str, Any] | None:
        """Handle one decoded JSON-RPC message.

        Args:
            message: Decoded request body.

        Returns:
            Response envelope, or None for notifications.
        """
        request_id = message.get("id") if isinstance(message, dict) else None

        try:
            if not isinstance(message, dict) or not isinstance(message.get("method"), str):
                raise ProtocolError(INVALID_REQUEST, "Invalid Request")
            result = await self._dispatch(message["method"], message.get("params"))
        except ProtocolError as e:
            logger.info("JSON-RPC error %s: %s", e.code, e.message)
            return error_response(request_id, e.code, e.message)

        if result is None:
            return None
        return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}

    async def _dispatch(self, method: str, params: Any) -> dict[str, Any] | None:
        if method == "initialize":
            return dict(self._initialize_result)

        if method == "tools/list":
            return {"tools": self.registry.to_json()}

        if method == "tools/call":
            params = params if isinstance(params, dict) else {}
            arguments = params.get("arguments")
            result = await self.call_tool(
                params.get("name"), arguments if isinstance(arguments, dict) else {}
            )
            return self._tool_content(result)

        if method.startswith("notifications/"):
            logger.debug("Notification received: %s", method)
            return None

        raise ProtocolError(METHOD_NOT_FOUND, f"Method not found: {method}")

    async def call_tool(self, name: object, arguments: dict[str, Any]) -> dict[str, Any]:
        """Run a tool and return its raw result.

        Unknown tools and connector failures are returned as
        ``{"error": message}`` rather than raised.

        Args:
            name: Tool name.
            arguments: Tool arguments.

        Returns:
            Tool result or error payload.
        """
        try:
            connector = self.registry.get(name)
        except ToolNotFoundError as e:
            logger.warning("Unknown tool requested: %r", name)
            return {"error": str(e)}

        logger.info("Calling tool %s", name)
        try:
            return await connector.run(arguments)
        except HubError as e:
            logger.warning("Tool %s failed: %s", name, e)
            return {"error": str(e)}
        except Exception as e:
            logger.exception(f"Error calling tool {name}")
            return {"error": str(e)}

    @staticmethod
    def _tool_content(result: dict[str, Any]) -> dict[str, Any]:
        """Wrap a tool result as a single pretty-printed text content item."""
        content = TextContent(type="text", text=json.dumps(result, indent=2, ensure_ascii=False))
        return {"content": [content.model_dump(mode="json", by_alias=True, exclude_none=True)]}
