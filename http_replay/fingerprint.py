"""Deterministic request fingerprints used as cache keys.

Only the method, URL and body participate. Headers are deliberately left
out, so two requests that differ only by headers (authentication tokens,
``Accept`` negotiation) resolve to the same cache entry.
"""

from __future__ import annotations

import hashlib

import httpx

__all__ = ["fingerprint", "request_body", "request_fingerprint"]


def fingerprint(method: str, url: str, body: bytes | None = None) -> str:
    """Return the lowercase hex SHA-256 digest of method, URL and body."""
    hasher = hashlib.sha256()
    hasher.update(method.encode("utf-8"))
    hasher.update(url.encode("utf-8"))
    if body is not None:
        hasher.update(body)
    return hasher.hexdigest()


def request_body(request: httpx.Request) -> bytes | None:
    """Return the buffered request body, or ``None`` for unread streams."""
    try:
        return request.content
    except httpx.RequestNotRead:
        return None


def request_fingerprint(request: httpx.Request) -> str:
    """Fingerprint an outgoing httpx request."""
    return fingerprint(request.method, str(request.url), request_body(request))
