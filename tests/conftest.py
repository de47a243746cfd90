"""Shared pytest fixtures for mcp-hub tests.

This module provides reusable fixtures for testing the credential cache,
the connectors, and the HTTP surface against stubbed upstream APIs.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest

from mcp_hub.auth import CredentialCache, OAuthToken
from mcp_hub.config import HubSettings

# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def valid_token() -> OAuthToken:
    """Create a valid, non-expired OAuth token."""
    return OAuthToken(
        access_token="test_access_token_abc123",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
    )


@pytest.fixture
def expired_token() -> OAuthToken:
    """Create an expired OAuth token."""
    return OAuthToken(
        access_token="expired_access_token",
        expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
    )


# =============================================================================
# Settings and Credential Fixtures
# =============================================================================


@pytest.fixture
def hub_settings() -> HubSettings:
    """Create settings with a complete (fake) credential set."""
    return HubSettings(
        google_client_id="test_client_id",
        google_client_secret="test_client_secret",  # pragma: allowlist secret
        google_refresh_token="test_refresh_token",
        notion_token="test_notion_token",
    )


@pytest.fixture
def credential_cache(hub_settings: HubSettings, valid_token: OAuthToken) -> CredentialCache:
    """Create a credential cache already holding a valid token."""
    cache = CredentialCache.from_settings(hub_settings)
    cache._token = valid_token
    return cache


# =============================================================================
# Upstream Stubs
# =============================================================================


def _route_url(request: httpx.Request) -> str:
    """URL of a request without its query string."""
    return f"{request.url.scheme}://{request.url.host}{request.url.path}"


class UpstreamStub:
    """Routing stub for ``httpx.MockTransport``.

    Routes are keyed by method and URL without query string. A route maps
    to a JSON body, an ``httpx.Response``, an exception instance to raise,
    or a callable taking the request.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, url: str, response: Any) -> None:
        self.routes[(method, url)] = response

    def requests_to(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if _route_url(r) == url]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, _route_url(request))
        route = self.routes.get(key)

        if route is None:
            return httpx.Response(404, json={"error": "not stubbed"})
        if isinstance(route, BaseException):
            raise route
        if callable(route):
            route = route(request)
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)


@pytest.fixture
def upstream() -> UpstreamStub:
    """Create an empty upstream stub."""
    return UpstreamStub()


@pytest.fixture
def http_client(upstream: UpstreamStub) -> httpx.AsyncClient:
    """Create an HTTP client whose requests are answered by the upstream stub."""
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def make_hub(
    hub_settings: HubSettings,
    http_client: httpx.AsyncClient,
    credential_cache: CredentialCache,
) -> Callable[..., Any]:
    """Factory for hub servers wired to the upstream stub."""
    from mcp_hub.server.hub_server import McpHubServer

    def _make(**overrides: Any) -> McpHubServer:
        kwargs: dict[str, Any] = {
            "settings": hub_settings,
            "http_client": http_client,
            "credentials": credential_cache,
        }
        kwargs.update(overrides)
        return McpHubServer(**kwargs)

    return _make
