"""Port for Torznab provider configuration persistence."""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from torrentsearch.domain.providers.base import ProviderId, TorznabConfig


@runtime_checkable
class TorznabConfigRepository(Protocol):
    """Async interface for storing user-added Torznab providers.

    ``observe_all``/``observe_count`` yield the current state first and
    again after every successful write.
    """

    async def insert(self, config: TorznabConfig) -> bool:
        """Insert; returns False (no-op) when the id already exists."""
        ...

    async def find_by_id(self, provider_id: ProviderId) -> TorznabConfig | None: ...

    async def update(self, config: TorznabConfig) -> None: ...

    async def delete_by_id(self, provider_id: ProviderId) -> None: ...

    async def list_all(self) -> list[TorznabConfig]: ...

    def observe_all(self) -> AsyncIterator[list[TorznabConfig]]: ...

    def observe_count(self) -> AsyncIterator[int]: ...
