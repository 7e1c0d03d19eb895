"""Disk-backed store for captured responses."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from pathlib import Path

from .types import CacheRecord

__all__ = ["CACHE_EXTENSION", "ResponseCache"]

CACHE_EXTENSION = ".json"

logger = logging.getLogger(__name__)


class ResponseCache:
    """Asynchronous cache storing one JSON document per fingerprint.

    The directory is created on the first successful ``put``. Reads that fail
    for any reason count as misses and writes that fail are reported through
    the return value, so callers never see an exception from caching itself.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        """Return the file holding the record for ``key``."""
        return self._root / f"{key}{CACHE_EXTENSION}"

    async def lookup(self, key: str) -> CacheRecord | None:
        """Return the cached record if present and readable."""
        path = self.path_for(key)
        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            logger.debug("No cache file at %s", path)
            return None
        except OSError as exc:
            logger.warning("Unable to read cache file %s: %s", path, exc)
            return None
        try:
            return CacheRecord.from_document(json.loads(raw))
        except (ValueError, RecursionError) as exc:
            # JSONDecodeError and UnicodeDecodeError are ValueErrors; deep nesting recurses.
            logger.warning("Ignoring unreadable cache file %s: %s", path, exc)
            return None

    async def put(self, key: str, record: CacheRecord) -> bool:
        """Persist ``record`` under ``key``; return whether it was written."""
        path = self.path_for(key)
        data = json.dumps(record.to_document(), indent=2).encode("utf-8")
        try:
            await asyncio.to_thread(self._write_atomic, path, data)
        except OSError as exc:
            logger.warning("Unable to write cache file %s: %s", path, exc)
            return False
        return True

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            tmp_path.write_bytes(data)
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
