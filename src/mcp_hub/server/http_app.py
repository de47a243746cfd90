"""HTTP transport for MCP Hub.

Routes:
    GET  /             Service banner
    GET  /health       Liveness and credential configuration
    GET  /tools        Tool registry
    GET  /sse          Tool list event followed by keep-alive pings
    POST /mcp          JSON-RPC endpoint (alias: /mcp/message)
    POST /call         Direct tool call: {"name": ..., "arguments": {...}}
    POST /gmail/search, /calendar/events, /drive/list, /notion/search
                       Direct calls to a single tool, body used as arguments
"""

import asyncio
import contextlib
import json
import logging
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Any

from sse_starlette.sse import EventSourceResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from mcp_hub.__version__ import __version__
from mcp_hub.exceptions import PARSE_ERROR
from mcp_hub.server.dispatcher import error_response
from mcp_hub.server.hub_server import McpHubServer

logger = logging.getLogger(__name__)

SERVICE_NAME = "MCP Hub Universal"

# Direct-call shim path -> tool name
TOOL_SHIMS = {
    "/gmail/search": "gmail",
    "/calendar/events": "calendar",
    "/drive/list": "drive",
    "/notion/search": "notion",
}


async def _read_json(request: Request) -> Any:
    """Decode the request body, treating an empty body as an empty object."""
    body = await request.body()
    if not body.strip():
        return {}
    return json.loads(body)


def create_app(hub: McpHubServer | None = None) -> Starlette:
    """Create the Starlette application.

    Args:
        hub: Hub instance to serve. Created from the environment if not provided.

    Returns:
        Configured Starlette app.
    """
    hub = hub or McpHubServer()

    async def index(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "name": SERVICE_NAME, "version": __version__})

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "authenticated": hub.credentials.is_configured,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    async def list_tools(request: Request) -> JSONResponse:
        return JSONResponse({"tools": hub.registry.to_json()})

    async def sse(request: Request) -> EventSourceResponse:
        return EventSourceResponse(
            tool_events(hub, request), ping=hub.settings.sse_ping_seconds
        )

    async def rpc(request: Request) -> Response:
        try:
            message = await _read_json(request)
        except ValueError:
            return JSONResponse(error_response(None, PARSE_ERROR, "Parse error"))

        response = await hub.dispatcher.handle(message)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(response)

    async def call(request: Request) -> JSONResponse:
        try:
            body = await _read_json(request)
        except ValueError:
            return JSONResponse({"error": "Invalid JSON"}, status_code=400)
        if not isinstance(body, dict):
            return JSONResponse({"error": "Request body must be an object"}, status_code=400)

        arguments = body.get("arguments")
        result = await hub.dispatcher.call_tool(
            body.get("name"), arguments if isinstance(arguments, dict) else {}
        )
        return JSONResponse({"result": result})

    def tool_shim(tool_name: str):
        async def endpoint(request: Request) -> JSONResponse:
            try:
                body = await _read_json(request)
            except ValueError:
                return JSONResponse({"error": "Invalid JSON"}, status_code=400)
            arguments = body if isinstance(body, dict) else {}
            return JSONResponse(await hub.dispatcher.call_tool(tool_name, arguments))

        return endpoint

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info(f"{SERVICE_NAME} serving {len(hub.registry)} tools")
        try:
            yield
        finally:
            await hub.close()

    routes = [
        Route("/", index, methods=["GET"]),
        Route("/health", health, methods=["GET"]),
        Route("/tools", list_tools, methods=["GET"]),
        Route("/sse", sse, methods=["GET"]),
        Route("/mcp", rpc, methods=["POST"]),
        Route("/mcp/message", rpc, methods=["POST"]),
        Route("/call", call, methods=["POST"]),
    ]
    routes += [Route(path, tool_shim(name), methods=["POST"]) for path, name in TOOL_SHIMS.items()]

    return Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["*"],
                allow_headers=["*"],
            )
        ],
        lifespan=lifespan,
    )


async def tool_events(
    hub: McpHubServer, request: Request, poll_interval: float = 1.0
) -> AsyncIterator[dict[str, str]]:
    """Yield the tool list once, then idle until the client disconnects.

    Keep-alive comments are sent by ``EventSourceResponse`` itself.
    """
    yield {"data": json.dumps({"type": "tools", "tools": hub.registry.to_json()})}
    while not await request.is_disconnected():
        await asyncio.sleep(poll_interval)
    logger.info("SSE client disconnected")
