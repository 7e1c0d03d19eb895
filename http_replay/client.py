"""Builder for httpx clients that record and replay responses."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx

from .middleware import Middleware, MiddlewareTransport, ReplayMiddleware
from .settings import DEFAULT_CACHE_DIR, Settings

__all__ = ["ClientBuilder"]


class ClientBuilder:
    """Configure and build an ``httpx.AsyncClient`` with replay caching.

    Example::

        client = ClientBuilder().cache_dir("docs_cache").build()
        async with client:
            response = await client.post("https://httpbin.org/post", json={"q": 1})
    """

    def __init__(self) -> None:
        self._cache_dir: Path = Path(DEFAULT_CACHE_DIR)
        self._transport: httpx.AsyncBaseTransport | None = None
        self._middlewares: list[Middleware] = []
        self._timeout: float | None = None
        self._headers: dict[str, str] = {}
        self._proxy: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ClientBuilder:
        """Return a builder pre-populated from runtime settings."""
        builder = cls().cache_dir(settings.cache_dir).timeout(settings.timeout)
        builder.headers({"User-Agent": settings.user_agent})
        if settings.use_proxy and settings.proxy:
            builder._proxy = settings.proxy
        return builder

    def cache_dir(self, path: Path | str) -> ClientBuilder:
        """Store cache files under ``path`` instead of the default directory."""
        self._cache_dir = Path(path)
        return self

    def transport(self, transport: httpx.AsyncBaseTransport) -> ClientBuilder:
        """Use ``transport`` for cache misses instead of a network transport."""
        self._transport = transport
        return self

    def with_middleware(self, middleware: Middleware) -> ClientBuilder:
        """Append a stage that runs after the replay stage on every miss."""
        self._middlewares.append(middleware)
        return self

    def timeout(self, seconds: float) -> ClientBuilder:
        self._timeout = seconds
        return self

    def headers(self, headers: Mapping[str, str]) -> ClientBuilder:
        self._headers.update(headers)
        return self

    def build(self) -> httpx.AsyncClient:
        """Create the client; the caller owns it and must close it."""
        inner = self._transport or httpx.AsyncHTTPTransport(
            http2=True,
            proxy=self._proxy,
        )
        transport = MiddlewareTransport(
            inner,
            [ReplayMiddleware(self._cache_dir), *self._middlewares],
        )
        client_kwargs: dict[str, Any] = {
            "transport": transport,
            "headers": self._headers,
        }
        if self._timeout is not None:
            client_kwargs["timeout"] = httpx.Timeout(self._timeout)
        return httpx.AsyncClient(**client_kwargs)
