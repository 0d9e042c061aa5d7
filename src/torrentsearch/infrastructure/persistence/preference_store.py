"""Scalar preference store backed by the key-value store."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import structlog

from torrentsearch.application.reactive import StateStream
from torrentsearch.domain.ports.kv_store import KeyValueStorePort

log = structlog.get_logger(__name__)

_PREFIX = "pref:"


class CachePreferenceStore:
    """One JSON value per key with get/observe/set semantics.

    Each observed key is backed by a ``StateStream`` holding the raw stored
    value (``None`` when never written); every ``set`` is followed by an
    emission to that key's observers.
    """

    def __init__(self, store: KeyValueStorePort) -> None:
        self.store = store
        self._streams: dict[str, StateStream[Any]] = {}
        self._lock = asyncio.Lock()

    async def _stream(self, key: str) -> StateStream[Any]:
        stream = self._streams.get(key)
        if stream is None:
            async with self._lock:
                stream = self._streams.get(key)
                if stream is None:
                    stream = StateStream(await self.store.get(_PREFIX + key))
                    self._streams[key] = stream
        return stream

    async def get(self, key: str, default: Any = None) -> Any:
        stream = self._streams.get(key)
        if stream is not None:
            value = stream.value
        else:
            value = await self.store.get(_PREFIX + key)
        return default if value is None else value

    async def observe(self, key: str, default: Any = None) -> AsyncIterator[Any]:
        stream = await self._stream(key)
        async for value in stream.observe():
            yield default if value is None else value

    async def set(self, key: str, value: Any) -> None:
        # Same lock as stream creation: a stream is either created after
        # this write or exists before it and receives the emission.
        async with self._lock:
            await self.store.set(_PREFIX + key, value)
            stream = self._streams.get(key)
            if stream is not None:
                stream.emit(value)
        log.debug("preference_set", key=key)
