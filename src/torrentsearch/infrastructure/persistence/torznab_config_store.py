"""Torznab provider configuration repository backed by the key-value store."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

import structlog

from torrentsearch.application.reactive import StateStream, map_stream
from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.ports.kv_store import KeyValueStorePort
from torrentsearch.domain.providers.base import ProviderId, TorznabConfig
from torrentsearch.domain.providers.exceptions import StorageError

log = structlog.get_logger(__name__)

TORZNAB_PROVIDERS_KEY = "torznab_providers"


def _serialize_config(config: TorznabConfig) -> dict[str, Any]:
    return {
        "id": config.id,
        "name": config.name,
        "url": config.url,
        "api_key": config.api_key,
        "category": config.category.name,
        "unsafe_reason": config.unsafe_reason,
        "category_map": {str(k): v.name for k, v in config.category_map.items()},
    }


def _deserialize_config(d: dict[str, Any]) -> TorznabConfig:
    return TorznabConfig(
        id=d["id"],
        name=d["name"],
        url=d["url"],
        api_key=d.get("api_key"),
        category=Category[d.get("category", "ALL")],
        unsafe_reason=d.get("unsafe_reason"),
        category_map={
            int(k): Category[v] for k, v in (d.get("category_map") or {}).items()
        },
    )


class CacheTorznabConfigRepository:
    """Stores Torznab configs as one ordered JSON list (insertion order).

    Writes are serialised through a lock and replace the whole list, so
    concurrent readers always see a complete snapshot.
    """

    def __init__(self, store: KeyValueStorePort) -> None:
        self.store = store
        self._lock = asyncio.Lock()
        self._stream: StateStream[tuple[TorznabConfig, ...]] | None = None

    async def _read(self) -> tuple[TorznabConfig, ...]:
        data = await self.store.get(TORZNAB_PROVIDERS_KEY)
        if data is None:
            return ()
        try:
            return tuple(_deserialize_config(d) for d in data)
        except (KeyError, TypeError, ValueError) as e:
            log.error("torznab_config_deserialize_error", error=str(e))
            raise StorageError(f"corrupt torznab provider list: {e}") from e

    async def _state(self) -> StateStream[tuple[TorznabConfig, ...]]:
        if self._stream is None:
            async with self._lock:
                if self._stream is None:
                    self._stream = StateStream(await self._read())
        return self._stream

    async def _write(self, configs: tuple[TorznabConfig, ...]) -> None:
        await self.store.set(
            TORZNAB_PROVIDERS_KEY, [_serialize_config(c) for c in configs]
        )
        if self._stream is not None:
            self._stream.emit(configs)

    async def insert(self, config: TorznabConfig) -> bool:
        state = await self._state()
        async with self._lock:
            current = state.value
            if any(c.id == config.id for c in current):
                log.debug("torznab_config_insert_ignored", provider_id=config.id)
                return False
            await self._write((*current, config))
        log.info("torznab_config_inserted", provider_id=config.id, name=config.name)
        return True

    async def find_by_id(self, provider_id: ProviderId) -> TorznabConfig | None:
        state = await self._state()
        return next((c for c in state.value if c.id == provider_id), None)

    async def update(self, config: TorznabConfig) -> None:
        state = await self._state()
        async with self._lock:
            current = state.value
            if not any(c.id == config.id for c in current):
                return
            await self._write(
                tuple(config if c.id == config.id else c for c in current)
            )
        log.info("torznab_config_updated", provider_id=config.id)

    async def delete_by_id(self, provider_id: ProviderId) -> None:
        state = await self._state()
        async with self._lock:
            current = state.value
            remaining = tuple(c for c in current if c.id != provider_id)
            if len(remaining) == len(current):
                return
            await self._write(remaining)
        log.info("torznab_config_deleted", provider_id=provider_id)

    async def list_all(self) -> list[TorznabConfig]:
        state = await self._state()
        return list(state.value)

    async def observe_all(self) -> AsyncIterator[list[TorznabConfig]]:
        state = await self._state()
        async for configs in state.observe():
            yield list(configs)

    def observe_count(self) -> AsyncIterator[int]:
        return map_stream(self.observe_all(), len)
