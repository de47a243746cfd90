"""MCP Hub Universal.

Exposes Gmail, Google Calendar, Google Drive and Notion as MCP tools over
JSON-RPC, with a small HTTP surface for discovery and health checks.
"""

from mcp_hub.__version__ import __version__

__all__ = ["__version__"]
