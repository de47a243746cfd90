"""Exception hierarchy for MCP Hub.

Connector failures (``UpstreamAuthError``, ``UpstreamRequestError``) are
converted to tool-level payloads by the dispatcher. ``ProtocolError`` is the
only exception rendered as a JSON-RPC error object.
"""

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601


class HubError(Exception):
    """Base class for all MCP Hub errors."""


class UpstreamAuthError(HubError):
    """Raised when an access token cannot be obtained or refreshed."""


class UpstreamRequestError(HubError):
    """Raised when an upstream API call fails or returns unparseable JSON.

    Attributes:
        status_code: HTTP status returned by the upstream, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(HubError):
    """Raised for requests that must be answered with a JSON-RPC error.

    Attributes:
        code: JSON-RPC error code.
    """

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class ToolNotFoundError(HubError, KeyError):
    """Raised when a tool name does not resolve to a registered connector."""

    def __init__(self, name: object) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return "Tool not found"
