"""Shared pytest fixtures: credentials, a fake 20i API and the MCP runtime."""

import os
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest

# Importing twentyi_mcp.mcp.server must not build a live client during tests
os.environ["TWENTYI_SKIP_MCP_AUTOSTART"] = "1"

from twentyi_mcp.common.api_client.client import TwentyIClient
from twentyi_mcp.mcp import core

RESELLER_ID = "0f8b7d7c-d878-4356-9b00-e6210a26fff1"

Route = Tuple[str, str]


class FakeAPI:
    """Route table behind an httpx.MockTransport.

    Routes map (method, path) to a JSON-able body, an httpx.Response, an
    exception instance to raise, or a callable taking the request.
    """

    def __init__(self):
        self.routes: Dict[Route, Any] = {("GET", "/reseller"): {"id": RESELLER_ID}}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, result: Any) -> None:
        self.routes[(method, path)] = result

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": f"No route {key}"})
        result = self.routes[key]
        if isinstance(result, Exception):
            raise result
        if callable(result):
            result = result(request)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)

    def last(self, method: str, path: str) -> httpx.Request:
        for request in reversed(self.requests):
            if request.method == method and request.url.path == path:
                return request
        raise AssertionError(f"No {method} {path} request recorded")


@pytest.fixture
def credentials_env(monkeypatch) -> Dict[str, str]:
    values = {
        "TWENTYI_API_KEY": "demo-key",
        "TWENTYI_OAUTH_KEY": "demo-oauth",
        "TWENTYI_COMBINED_KEY": "demo-combined",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    for key in ("TWENTYI_API_BASE_URL", "TWENTYI_API_TIMEOUT", "TWENTYI_LOG_LEVEL", "TWENTYI_LOG_DIR"):
        monkeypatch.delenv(key, raising=False)
    return values


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def make_client(fake_api) -> Callable[[], TwentyIClient]:
    clients: List[TwentyIClient] = []

    def _make() -> TwentyIClient:
        client = TwentyIClient(
            authorization="Bearer ZGVtby1rZXk=",
            transport=httpx.MockTransport(fake_api.handler),
        )
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def runtime(make_client):
    """Attach a fake-API client to the MCP runtime for handler tests."""
    client = make_client()
    core.set_runtime(None, client)
    yield client
    core.set_runtime(None, None)
