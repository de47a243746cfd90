"""Command-line interface for mcp-hub."""
