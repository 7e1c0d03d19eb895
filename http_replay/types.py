"""Package-wide type definitions and the cache document codec."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

_HEADER_ENCODING = "latin-1"


@dataclass(slots=True)
class RequestSummary:
    """Originating request, stored alongside a record for human inspection."""

    method: str
    url: str
    body: str | None = None

    def to_document(self) -> dict[str, Any]:
        """Convert the summary into a JSON-serializable mapping."""
        return {"method": self.method, "url": self.url, "body": self.body}


@dataclass(slots=True)
class CacheRecord:
    """Captured response: status, ordered header pairs and raw body bytes."""

    status: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""
    request: RequestSummary | None = None

    def raw_headers(self) -> list[tuple[bytes, bytes]]:
        """Return header pairs as bytes, in stored order."""
        return [
            (name.encode(_HEADER_ENCODING), value.encode(_HEADER_ENCODING))
            for name, value in self.headers
        ]

    def to_document(self) -> dict[str, Any]:
        """Convert the record into a JSON-serializable document.

        The body is base64-encoded so arbitrary bytes survive; header text is
        latin-1 so every header byte maps to exactly one character.
        """
        return {
            "request": self.request.to_document() if self.request else None,
            "response": {
                "status": self.status,
                "headers": [[name, value] for name, value in self.headers],
                "body": base64.b64encode(self.body).decode("ascii"),
            },
        }

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> CacheRecord:
        """Rebuild a record from a decoded JSON document.

        Raises ``ValueError`` when the document does not have the expected shape.
        """
        try:
            response = document["response"]
            status = response["status"]
            headers = response["headers"]
            body = response["body"]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"missing cache field: {exc}") from exc

        if isinstance(status, bool) or not isinstance(status, int):
            raise ValueError("status must be an integer")
        if not 0 <= status <= 0xFFFF:
            raise ValueError(f"status out of range: {status}")
        if not isinstance(body, str):
            raise ValueError("body must be a base64 string")
        try:
            payload = base64.b64decode(body.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise ValueError(f"invalid body encoding: {exc}") from exc

        return cls(
            status=status,
            headers=_parse_header_pairs(headers),
            body=payload,
            request=_parse_request(document.get("request")),
        )


def _parse_header_pairs(value: Any) -> list[tuple[str, str]]:
    if not isinstance(value, list):
        raise ValueError("headers must be a list of pairs")
    pairs: list[tuple[str, str]] = []
    for item in value:
        if (
            not isinstance(item, (list, tuple))
            or len(item) != 2
            or not all(isinstance(part, str) for part in item)
        ):
            raise ValueError(f"invalid header pair: {item!r}")
        pairs.append((item[0], item[1]))
    return pairs


def _parse_request(value: Any) -> RequestSummary | None:
    # Inspection-only data; a malformed summary is dropped rather than rejected.
    if not isinstance(value, Mapping):
        return None
    method = value.get("method")
    url = value.get("url")
    if not isinstance(method, str) or not isinstance(url, str):
        return None
    body = value.get("body")
    return RequestSummary(
        method=method,
        url=url,
        body=body if isinstance(body, str) else None,
    )


def decode_header_pairs(raw: Iterable[tuple[bytes, bytes]]) -> list[tuple[str, str]]:
    """Decode raw header pairs into text without losing any bytes."""
    return [
        (name.decode(_HEADER_ENCODING), value.decode(_HEADER_ENCODING))
        for name, value in raw
    ]


def summarize_request(request: httpx.Request, body: bytes | None) -> RequestSummary:
    """Utility for building a `RequestSummary` from an outgoing request."""
    text = body.decode("utf-8", errors="replace") if body else None
    return RequestSummary(method=request.method, url=str(request.url), body=text)


def build_cache_record(
    status: int,
    headers: Iterable[tuple[bytes, bytes]],
    body: bytes,
    *,
    request: RequestSummary | None = None,
) -> CacheRecord:
    """Utility for constructing `CacheRecord` from captured wire data."""
    return CacheRecord(
        status=status,
        headers=decode_header_pairs(headers),
        body=body,
        request=request,
    )
