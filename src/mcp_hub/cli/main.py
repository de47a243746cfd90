"""Command-line interface for mcp-hub."""

import asyncio
import json
import sys

import click

from mcp_hub.__version__ import __version__
from mcp_hub.config import DEFAULT_HOST, DEFAULT_PORT, HubSettings


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """MCP Hub Universal - Gmail, Calendar, Drive and Notion as MCP tools.

    Tools:
    - gmail (search messages)
    - calendar (upcoming events)
    - drive (list files)
    - notion (search pages)
    """
    pass


@main.command()
@click.option("--host", envvar="HOST", default=DEFAULT_HOST, show_default=True)
@click.option("--port", envvar="PORT", default=DEFAULT_PORT, type=int, show_default=True)
def serve(host: str, port: int) -> None:
    """Start the HTTP server (JSON-RPC on /mcp, discovery routes, SSE)."""
    import uvicorn

    from mcp_hub.server.http_app import create_app
    from mcp_hub.server.hub_server import McpHubServer

    settings = HubSettings.from_env().model_copy(update={"host": host, "port": port})
    if not settings.has_google_credentials:
        click.echo("⚠️  Google credentials not configured; Google tools will fail.", err=True)

    app = create_app(McpHubServer(settings=settings))
    click.echo(f"MCP Hub Universal running on port {port}", err=True)
    uvicorn.run(app, host=host, port=port, timeout_keep_alive=120)


@main.command()
def stdio() -> None:
    """Start the MCP server over stdio for desktop MCP clients."""
    from mcp_hub.server import main as server_main

    try:
        click.echo("Starting MCP Hub stdio server...", err=True)
        server_main()
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)
    except Exception as e:
        click.echo(f"❌ Server error: {e}", err=True)
        sys.exit(1)


@main.command()
def tools() -> None:
    """Print the tool registry as JSON."""
    from mcp_hub.server.hub_server import McpHubServer

    async def _list() -> list[dict]:
        hub = McpHubServer(settings=HubSettings.from_env())
        try:
            return hub.registry.to_json()
        finally:
            await hub.close()

    click.echo(json.dumps({"tools": asyncio.run(_list())}, indent=2))


@main.command()
def doctor() -> None:
    """Check configuration and Google token refresh.

    Verifies:
    1. Google OAuth credentials configured
    2. Notion token configured
    3. A Google access token can be obtained
    """
    from mcp_hub.auth import CredentialCache, TokenStatus
    from mcp_hub.exceptions import UpstreamAuthError

    settings = HubSettings.from_env()

    click.echo("MCP Hub Status:")
    click.echo("")
    click.echo("Configuration:")
    for label, value in (
        ("GOOGLE_CLIENT_ID", settings.google_client_id),
        ("GOOGLE_CLIENT_SECRET", settings.google_client_secret),
        ("GOOGLE_REFRESH_TOKEN", settings.google_refresh_token),
        ("NOTION_TOKEN", settings.notion_token),
    ):
        mark = "✓" if value else "❌"
        click.echo(f"  {mark} {label}")
    click.echo("")

    if not settings.has_google_credentials:
        click.echo("❌ Google OAuth credentials required.")
        click.echo("")
        click.echo("Set environment variables:")
        click.echo("  export GOOGLE_CLIENT_ID='your-client-id'")
        click.echo("  export GOOGLE_CLIENT_SECRET='your-client-secret'")
        click.echo("  export GOOGLE_REFRESH_TOKEN='your-refresh-token'")
        sys.exit(1)

    cache = CredentialCache.from_settings(settings)
    click.echo("Authentication:")
    try:
        asyncio.run(cache.get_token())
    except UpstreamAuthError as e:
        click.echo(f"  ❌ {e}")
        sys.exit(1)

    token = cache.token
    status = cache.get_status()
    if status != TokenStatus.VALID:
        click.echo(f"  ❌ Refreshed token is {status.value}")
        sys.exit(1)

    click.echo("  ✓ Token refresh succeeded")
    if token:
        click.echo(f"  Token expires: {token.expires_at.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    click.echo("")
    click.echo("✓ Ready to use!")


if __name__ == "__main__":
    main()
