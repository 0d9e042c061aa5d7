"""Port for scalar user preferences."""

from __future__ import annotations

from typing import Any, AsyncIterator, Protocol, runtime_checkable


@runtime_checkable
class PreferenceStorePort(Protocol):
    """One JSON-serialisable value per key with get/observe/set semantics."""

    async def get(self, key: str, default: Any = None) -> Any: ...

    def observe(self, key: str, default: Any = None) -> AsyncIterator[Any]:
        """Yield the current value, then each new value after a write."""
        ...

    async def set(self, key: str, value: Any) -> None: ...
