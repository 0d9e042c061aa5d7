"""Port for provider discovery, listing and instantiation."""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from torrentsearch.domain.providers.base import (
    ProviderId,
    ProviderInfo,
    SearchProviderProtocol,
    TorznabConfig,
)


@runtime_checkable
class ProviderCataloguePort(Protocol):
    """Built-in providers plus the live set of user-added Torznab providers."""

    async def list_all(self) -> list[ProviderInfo]: ...

    def observe(self) -> AsyncIterator[list[ProviderInfo]]: ...

    def observe_count(self) -> AsyncIterator[int]: ...

    async def instantiate(self) -> list[tuple[ProviderId, SearchProviderProtocol]]: ...

    def default_enabled_ids(self) -> frozenset[ProviderId]: ...

    async def add_torznab(self, config: TorznabConfig) -> TorznabConfig: ...

    async def find_torznab(self, provider_id: ProviderId) -> TorznabConfig | None: ...

    async def update_torznab(self, config: TorznabConfig) -> TorznabConfig: ...

    async def delete_torznab(self, provider_id: ProviderId) -> None: ...
