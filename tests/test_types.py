"""Tests for cache record encoding."""

from __future__ import annotations

import pytest

from http_replay.types import CacheRecord, RequestSummary, build_cache_record


def test_build_cache_record_decodes_raw_headers() -> None:
    record = build_cache_record(
        200,
        [(b"Content-Type", b"text/plain"), (b"X-Odd", b"\xe9\xff")],
        b"body",
    )
    assert record.headers == [("Content-Type", "text/plain"), ("X-Odd", "\xe9\xff")]
    assert record.raw_headers() == [(b"Content-Type", b"text/plain"), (b"X-Odd", b"\xe9\xff")]
    assert record.request is None


def test_from_document_restores_record() -> None:
    original = CacheRecord(
        status=500,
        headers=[("Retry-After", "5")],
        body=b"\x00\x01",
        request=RequestSummary(method="GET", url="https://example.test"),
    )
    restored = CacheRecord.from_document(original.to_document())
    assert restored == original


@pytest.mark.parametrize(
    "document",
    [
        {},
        {"response": None},
        {"response": {"status": True, "headers": [], "body": ""}},
        {"response": {"status": 70000, "headers": [], "body": ""}},
        {"response": {"status": 200, "headers": {"a": "b"}, "body": ""}},
        {"response": {"status": 200, "headers": [["a", 1]], "body": ""}},
        {"response": {"status": 200, "headers": [], "body": None}},
        {"response": {"status": 200, "headers": [], "body": "abc"}},
    ],
)
def test_from_document_rejects_malformed_documents(document: dict) -> None:
    with pytest.raises(ValueError):
        CacheRecord.from_document(document)


def test_malformed_request_summary_is_dropped() -> None:
    document = {
        "request": {"method": 1, "url": "https://example.test"},
        "response": {"status": 200, "headers": [], "body": ""},
    }
    record = CacheRecord.from_document(document)
    assert record.request is None
    assert record.status == 200
