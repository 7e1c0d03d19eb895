"""
Record HTTP responses to disk and replay them for identical requests.

Requests made through a client from :class:`ClientBuilder` are fingerprinted
by method, URL and body. Known fingerprints are answered from the cache
directory without touching the network.
"""

from __future__ import annotations

from .cache import ResponseCache
from .client import ClientBuilder
from .fingerprint import fingerprint, request_fingerprint
from .middleware import Middleware, MiddlewareTransport, ReplayMiddleware
from .types import CacheRecord, RequestSummary

__all__: tuple[str, ...] = (
    "CacheRecord",
    "ClientBuilder",
    "Middleware",
    "MiddlewareTransport",
    "ReplayMiddleware",
    "RequestSummary",
    "ResponseCache",
    "fingerprint",
    "request_fingerprint",
)
