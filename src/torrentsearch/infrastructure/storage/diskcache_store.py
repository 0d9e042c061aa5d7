"""Diskcache store - SQLite-backed persistent key-value store without daemon."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import structlog
from diskcache import Cache as DiskCache

from torrentsearch.domain.providers.exceptions import StorageError

log = structlog.get_logger(__name__)


class DiskcacheStore:
    """Async wrapper for diskcache.Cache (sync-only library).

    - Uses `asyncio.to_thread` for I/O (no blocking of the event loop).
    - Semaphore prevents too many parallel disk writes (SQLite lock contention).
    - Values are stored as JSON text and never expire.
    - Implements context manager (`async with`).

    Args:
        directory: SQLite DB path (default: `./data`).
        max_concurrent: Max parallel disk ops (default: 10, tunable).
    """

    def __init__(
        self,
        directory: str | Path = "./data",
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self._cache: DiskCache | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

        log.info(
            "diskcache_store_init",
            directory=str(self.directory),
            max_concurrent=max_concurrent,
        )

    # --- Context Manager ---
    async def __aenter__(self) -> DiskcacheStore:
        """Open SQLite store (lazy, on first access)."""
        if self._cache is None:
            try:
                self._cache = await asyncio.to_thread(DiskCache, str(self.directory))
            except OSError as e:
                raise StorageError(f"cannot open store at {self.directory}: {e}") from e
            log.info("diskcache_opened", path=str(self.directory))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._cache is not None:
            await asyncio.to_thread(self._cache.close)
            self._cache = None
            log.info("diskcache_closed", directory=str(self.directory))

    def _require_open(self) -> DiskCache:
        if self._cache is None:
            raise StorageError(
                "Store not initialized. Use 'async with store:'"
            )
        return self._cache

    # --- KeyValueStorePort implementation ---
    async def get(self, key: str) -> Any:
        cache = self._require_open()
        async with self._semaphore:
            try:
                raw = await asyncio.to_thread(cache.get, key, default=None)
            except Exception as e:
                raise StorageError(f"read failed for {key!r}: {e}") from e
        log.debug("store_get", key=key, hit=raw is not None)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"corrupt value for {key!r}: {e}") from e

    async def set(self, key: str, value: Any) -> None:
        cache = self._require_open()
        try:
            packed = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"value for {key!r} is not serialisable: {e}") from e

        async with self._semaphore:
            try:
                await asyncio.to_thread(cache.set, key, packed)
            except Exception as e:
                raise StorageError(f"write failed for {key!r}: {e}") from e
        log.debug("store_set", key=key, size_bytes=len(packed))

    async def delete(self, key: str) -> bool:
        cache = self._require_open()
        async with self._semaphore:
            try:
                deleted = await asyncio.to_thread(cache.delete, key)
            except Exception as e:
                raise StorageError(f"delete failed for {key!r}: {e}") from e
        log.debug("store_delete", key=key, deleted=deleted)
        return bool(deleted)

    async def exists(self, key: str) -> bool:
        cache = self._require_open()
        async with self._semaphore:
            return await asyncio.to_thread(cache.__contains__, key)

    async def clear(self) -> None:
        """Delete ALL keys."""
        cache = self._require_open()
        async with self._semaphore:
            await asyncio.to_thread(cache.clear)
        log.warning("store_cleared", directory=str(self.directory))
