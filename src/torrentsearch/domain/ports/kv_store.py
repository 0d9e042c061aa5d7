"""Key-value store port - backend-agnostic persistence for small records."""

from __future__ import annotations

from typing import Any, Protocol


class KeyValueStorePort(Protocol):
    """Port for an async, persistent key-value store.

    Implementations:
      - DiskcacheStore (SQLite-based, no daemon)
      - RedisStore (Redis async client)

    Values never expire. Backend failures surface as ``StorageError``.

    Each adapter MUST support async context-manager semantics:
        async with store:
            await store.set("key", value)
    """

    async def get(self, key: str) -> Any:
        """Retrieve value. None = not found."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Replace the value stored under ``key`` atomically."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete key. True = deleted, False = did not exist."""
        ...

    async def exists(self, key: str) -> bool: ...

    async def clear(self) -> None:
        """Delete ALL keys."""
        ...

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> KeyValueStorePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
