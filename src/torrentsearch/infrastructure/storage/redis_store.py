"""Redis store - async persistent key-value store via redis.asyncio."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from torrentsearch.domain.providers.exceptions import StorageError

log = structlog.get_logger(__name__)


class RedisStore:
    """Async Redis store with bounded concurrency via semaphore.

    - Uses `redis.asyncio.Redis` (async-native, no to_thread needed).
    - Keys are namespaced with ``prefix`` so ``clear()`` never touches
      foreign keys in a shared database.
    - Serialization via JSON (consistent with the diskcache store).

    Args:
        url: Redis URL (e.g. `redis://localhost:6379/0`).
        prefix: Key namespace.
        max_concurrent: Max parallel Redis ops (default: 50, tunable).
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        prefix: str = "torrentsearch:",
        max_concurrent: int = 50,
    ) -> None:
        self.url = url
        self.prefix = prefix
        self._client: Redis | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

        log.info("redis_store_init", url=url, max_concurrent=max_concurrent)

    # --- Context Manager ---
    async def __aenter__(self) -> RedisStore:
        """Initialize Redis client (connection pool) and PING."""
        if self._client is None:
            self._client = Redis.from_url(self.url, decode_responses=True)
            try:
                await self._client.ping()
            except RedisError as e:
                log.error("redis_connection_failed", url=self.url, error=str(e))
                await self._client.aclose()
                self._client = None
                raise StorageError(f"cannot connect to {self.url}: {e}") from e
            log.info("redis_connected", url=self.url)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.info("redis_closed")

    def _require_open(self) -> Redis:
        if self._client is None:
            raise StorageError("Redis not initialized. Use 'async with store:'")
        return self._client

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    # --- KeyValueStorePort implementation ---
    async def get(self, key: str) -> Any:
        client = self._require_open()
        async with self._semaphore:
            try:
                raw = await client.get(self._key(key))
            except RedisError as e:
                log.error("redis_get_error", key=key, error=str(e))
                raise StorageError(f"read failed for {key!r}: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"corrupt value for {key!r}: {e}") from e

    async def set(self, key: str, value: Any) -> None:
        client = self._require_open()
        try:
            packed = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"value for {key!r} is not serialisable: {e}") from e

        async with self._semaphore:
            try:
                await client.set(self._key(key), packed)
            except RedisError as e:
                log.error("redis_set_error", key=key, error=str(e))
                raise StorageError(f"write failed for {key!r}: {e}") from e
        log.debug("store_set", key=key, size_bytes=len(packed))

    async def delete(self, key: str) -> bool:
        client = self._require_open()
        async with self._semaphore:
            try:
                deleted = await client.delete(self._key(key))
            except RedisError as e:
                raise StorageError(f"delete failed for {key!r}: {e}") from e
        return deleted > 0

    async def exists(self, key: str) -> bool:
        client = self._require_open()
        async with self._semaphore:
            try:
                return await client.exists(self._key(key)) > 0
            except RedisError as e:
                raise StorageError(f"exists failed for {key!r}: {e}") from e

    async def clear(self) -> None:
        """Delete every key under ``prefix``."""
        client = self._require_open()
        async with self._semaphore:
            try:
                keys = [k async for k in client.scan_iter(match=f"{self.prefix}*")]
                if keys:
                    await client.delete(*keys)
            except RedisError as e:
                raise StorageError(f"clear failed: {e}") from e
        log.warning("redis_cleared", prefix=self.prefix)
