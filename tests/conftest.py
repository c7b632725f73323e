"""Shared fixtures for the Carity MCP server tests."""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from carity_mcp.config import CarityApiClient, Settings
from carity_mcp.dispatcher import ToolDispatcher
from carity_mcp.registry import ToolRegistry

BASE_URL = "https://carity.test"


@pytest.fixture
def settings() -> Settings:
    return Settings(server_api_key="server-secret", api_key="upstream-secret", base_url=BASE_URL, timeout=5)


class RecordingUpstream:
    """MockTransport handler that records requests and replays a canned reply."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"ok": True}
        )

    def reply(self, status_code: int = 200, **kwargs: Any) -> None:
        self.responder = lambda request: httpx.Response(status_code, **kwargs)

    def fail(self, exc_factory: Callable[[httpx.Request], Exception]) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            raise exc_factory(request)

        self.responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def upstream() -> RecordingUpstream:
    return RecordingUpstream()


@pytest.fixture
def client(settings: Settings, upstream: RecordingUpstream) -> CarityApiClient:
    return CarityApiClient.from_settings(settings, transport=httpx.MockTransport(upstream))


@pytest.fixture
def dispatcher(client: CarityApiClient) -> ToolDispatcher:
    return ToolDispatcher(ToolRegistry.build(), client)
