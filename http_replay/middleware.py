"""Request-processing stages and the record/replay interceptor."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import Protocol

import httpx

from .cache import ResponseCache
from .fingerprint import request_body, request_fingerprint
from .types import CacheRecord, RequestSummary, build_cache_record, summarize_request

__all__ = ["Middleware", "MiddlewareTransport", "Next", "ReplayMiddleware"]

logger = logging.getLogger(__name__)

Next = Callable[[httpx.Request], Awaitable[httpx.Response]]

_DECODED_BODY_STALE_HEADERS = frozenset({b"content-encoding", b"content-length"})


class Middleware(Protocol):
    """A pipeline stage: given a request and a way to forward it, produce a response."""

    async def handle(self, request: httpx.Request, call_next: Next) -> httpx.Response: ...


class MiddlewareTransport(httpx.AsyncBaseTransport):
    """Async transport running an ordered chain of middlewares.

    The first middleware sees the request first. The last ``call_next`` in the
    chain goes to the wrapped transport.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        middlewares: Sequence[Middleware] = (),
    ) -> None:
        self._transport = transport
        self._middlewares = tuple(middlewares)

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return self._middlewares

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._dispatch(0, request)

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def _dispatch(self, index: int, request: httpx.Request) -> httpx.Response:
        if index >= len(self._middlewares):
            return await self._transport.handle_async_request(request)

        async def call_next(forwarded: httpx.Request) -> httpx.Response:
            return await self._dispatch(index + 1, forwarded)

        return await self._middlewares[index].handle(request, call_next)


class ReplayMiddleware:
    """Serve responses from disk when seen before, otherwise record them.

    Errors raised while forwarding propagate untouched and nothing is stored.
    Responses of every status, 4xx and 5xx included, are recorded.
    """

    def __init__(self, cache: ResponseCache | Path | str) -> None:
        if not isinstance(cache, ResponseCache):
            cache = ResponseCache(cache)
        self._cache = cache

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    async def handle(self, request: httpx.Request, call_next: Next) -> httpx.Response:
        key = request_fingerprint(request)
        record = await self._cache.lookup(key)
        if record is not None:
            logger.info(
                "Cache HIT for %s (file: %s)", request.url, self._cache.path_for(key)
            )
            return _rebuild_response(record, request)

        logger.info("Cache MISS for %s", request.url)
        summary = summarize_request(request, request_body(request))
        response = await call_next(request)
        record = await _capture_response(response, summary)
        # A failed write only costs a future cache hit; the result is ignored.
        await self._cache.put(key, record)
        return _rebuild_response(record, request)


async def _capture_response(
    response: httpx.Response,
    summary: RequestSummary | None,
) -> CacheRecord:
    """Drain a live response into a record and release its connection.

    When a later stage has already read the body, only the decoded content is
    left; the record then omits the encoding and length headers that no longer
    describe it.
    """
    headers = response.headers.raw
    try:
        if isinstance(response.stream, httpx.ByteStream):
            # In-memory bodies are read on construction but stay iterable as raw bytes.
            body = b"".join([chunk async for chunk in response.stream])
        elif response.is_stream_consumed:
            body = response.content
            headers = [
                (name, value)
                for name, value in headers
                if name.lower() not in _DECODED_BODY_STALE_HEADERS
            ]
        else:
            body = b"".join([chunk async for chunk in response.aiter_raw()])
    finally:
        await response.aclose()
    return build_cache_record(response.status_code, headers, body, request=summary)


def _rebuild_response(record: CacheRecord, request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        record.status,
        headers=record.raw_headers(),
        stream=httpx.ByteStream(record.body),
        request=request,
    )
