"""Base class and HTTP plumbing shared by upstream connectors."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from mcp.types import Tool

from mcp_hub.auth import CredentialCache
from mcp_hub.exceptions import UpstreamRequestError

logger = logging.getLogger(__name__)


def create_http_client() -> httpx.AsyncClient:
    """Create the HTTP client shared by all connectors.

    Returns:
        httpx.AsyncClient with connection pooling and default timeouts.
    """
    return httpx.AsyncClient(
        http2=True,
        limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
        timeout=httpx.Timeout(30.0, connect=10.0),
    )


class Connector(ABC):
    """A single tool backed by one upstream API query.

    Subclasses set ``name``, ``description`` and ``input_schema`` and
    implement :meth:`run`.

    Attributes:
        client: Shared HTTP client used for upstream calls.
    """

    name: str
    description: str
    input_schema: dict[str, Any]

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    @property
    def descriptor(self) -> Tool:
        """Tool descriptor advertised for discovery."""
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)

    @abstractmethod
    async def run(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Run the upstream query and normalize its response.

        Args:
            arguments: Tool arguments from the caller.

        Returns:
            JSON-serializable result record.

        Raises:
            UpstreamRequestError: If the upstream call fails.
            UpstreamAuthError: If no access token can be obtained.
        """

    async def _request(
        self,
        method: str,
        url: str,
        access_token: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated HTTP request and decode the JSON body.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Full URL to request.
            access_token: Bearer token for the Authorization header.
            params: Optional query parameters.
            json_data: Optional JSON body data.
            headers: Optional additional headers.

        Returns:
            JSON response as a dictionary.

        Raises:
            UpstreamRequestError: On network failure, non-2xx status or invalid JSON.
        """
        request_headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        if headers:
            request_headers.update(headers)

        try:
            response = await self.client.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                headers=request_headers,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamRequestError(
                f"{self.name}: upstream returned HTTP {status}", status_code=status
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamRequestError(f"{self.name}: request failed: {e}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise UpstreamRequestError(f"{self.name}: invalid JSON in upstream response") from e

        if not isinstance(result, dict):
            raise UpstreamRequestError(f"{self.name}: unexpected upstream response shape")
        return result


class GoogleConnector(Connector):
    """Connector for Google APIs, authenticated through the credential cache.

    Attributes:
        credentials: Cache providing Google access tokens.
    """

    def __init__(self, client: httpx.AsyncClient, credentials: CredentialCache) -> None:
        super().__init__(client)
        self.credentials = credentials

    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make a Google API request with a cached access token."""
        access_token = await self.credentials.get_token()
        return await self._request(method, url, access_token, params=params, json_data=json_data)


def int_argument(arguments: dict[str, Any], key: str, default: int) -> int:
    """Read a positive integer argument, falling back to a default.

    Falsy or non-numeric values use the default.
    """
    value = arguments.get(key)
    if not value:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric %s=%r", key, value)
        return default
    return number if number > 0 else default
