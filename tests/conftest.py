"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from http_replay import settings

pytest_plugins = ("pytest_asyncio",)

CRAB_URL = "http://localhost:3000"
CRAB_BODY = b'{"query":"crab"}'
CRAB_PHRASE = "Clumsy crab counts clouds."
HAT_PHRASE = "Crab wears jellyfish hat."


class StubServer:
    """Stand-in for the network that counts how often it is reached."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def route(
        self,
        method: str,
        path: str,
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> None:
        self.routes[(method.upper(), path)] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="not found", request=request)
        return route(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def stub_server() -> StubServer:
    """Provide a stub transport answering the crab fixtures."""
    server = StubServer()

    def crab(request: httpx.Request) -> httpx.Response:
        if request.content == CRAB_BODY:
            return httpx.Response(200, text=CRAB_PHRASE, request=request)
        return httpx.Response(400, text="unknown query", request=request)

    def hat(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=HAT_PHRASE, request=request)

    server.route("POST", "/", crab)
    server.route("GET", "/", hat)
    return server


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent from the developer's environment."""
    for name in (
        "HTTP_REPLAY_CACHE_DIR",
        "HTTP_REPLAY_TIMEOUT",
        "HTTP_REPLAY_USER_AGENT",
        "HTTP_REPLAY_PROXY",
        "HTTP_REPLAY_USE_PROXY",
        "HTTP_REPLAY_DOTENV_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings, "_CACHED_SETTINGS", None)
