"""Provider catalogue: fixed built-ins plus live user-added Torznab providers."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from dataclasses import replace
from urllib.parse import urlparse

import httpx
import structlog

from torrentsearch.application.reactive import map_stream
from torrentsearch.domain.ports.torznab_config_repository import (
    TorznabConfigRepository,
)
from torrentsearch.domain.providers.base import (
    ProviderId,
    ProviderInfo,
    SearchProviderProtocol,
    TorznabConfig,
    new_torznab_id,
)
from torrentsearch.domain.providers.exceptions import (
    ConfigValidationError,
    ProviderNotFoundError,
    StorageError,
)
from torrentsearch.infrastructure.providers.torznab import TorznabProvider

log = structlog.get_logger(__name__)


def validate_torznab_config(config: TorznabConfig) -> TorznabConfig:
    """Normalise a Torznab config and reject malformed ones.

    Raises:
        ConfigValidationError: Empty name, non-http(s) URL or missing host.
    """
    normalized = config.normalized()
    if not normalized.name:
        raise ConfigValidationError("name must not be empty")

    parsed = urlparse(normalized.url)
    if parsed.scheme not in ("http", "https"):
        raise ConfigValidationError(
            f"url must use http or https, got {normalized.url!r}"
        )
    if not parsed.netloc:
        raise ConfigValidationError(f"url has no host: {normalized.url!r}")
    return normalized


class ProviderCatalogue:
    """Authoritative list of providers.

    Built-ins come first in fixed order, then Torznab providers in
    insertion order. Read-side storage failures degrade to "no dynamic
    providers"; write-side ``StorageError`` propagates.
    """

    def __init__(
        self,
        builtins: Sequence[SearchProviderProtocol],
        repository: TorznabConfigRepository,
        http_client: httpx.AsyncClient,
    ) -> None:
        self._builtins = list(builtins)
        self._builtin_ids = frozenset(p.info.id for p in self._builtins)
        self._repository = repository
        self._http_client = http_client

    def _builtin_infos(self) -> list[ProviderInfo]:
        return [p.info for p in self._builtins]

    async def _dynamic_configs(self) -> list[TorznabConfig]:
        try:
            return await self._repository.list_all()
        except StorageError as e:
            log.warning("catalogue_dynamic_read_failed", error=str(e))
            return []

    async def list_all(self) -> list[ProviderInfo]:
        configs = await self._dynamic_configs()
        return self._builtin_infos() + [c.to_info() for c in configs]

    async def observe(self) -> AsyncIterator[list[ProviderInfo]]:
        builtins = self._builtin_infos()
        try:
            async for configs in self._repository.observe_all():
                yield builtins + [c.to_info() for c in configs]
        except StorageError as e:
            log.warning("catalogue_dynamic_observe_failed", error=str(e))
            yield builtins

    def observe_count(self) -> AsyncIterator[int]:
        return map_stream(self.observe(), len)

    async def instantiate(self) -> list[tuple[ProviderId, SearchProviderProtocol]]:
        """Built-ins are shared singletons; Torznab adapters are built per call."""
        pairs: list[tuple[ProviderId, SearchProviderProtocol]] = [
            (p.info.id, p) for p in self._builtins
        ]
        for config in await self._dynamic_configs():
            pairs.append((config.id, TorznabProvider(self._http_client, config)))
        return pairs

    def default_enabled_ids(self) -> frozenset[ProviderId]:
        return frozenset(p.info.id for p in self._builtins if p.info.enabled_by_default)

    # --- Torznab mutations ---
    async def add_torznab(self, config: TorznabConfig) -> TorznabConfig:
        normalized = validate_torznab_config(config)
        if not normalized.id:
            normalized = replace(normalized, id=new_torznab_id())
        if normalized.id in self._builtin_ids:
            raise ConfigValidationError(
                f"id {normalized.id!r} is reserved by a built-in provider"
            )
        inserted = await self._repository.insert(normalized)
        log.info(
            "torznab_provider_added",
            provider_id=normalized.id,
            name=normalized.name,
            inserted=inserted,
        )
        return normalized

    async def find_torznab(self, provider_id: ProviderId) -> TorznabConfig | None:
        return await self._repository.find_by_id(provider_id)

    async def update_torznab(self, config: TorznabConfig) -> TorznabConfig:
        normalized = validate_torznab_config(config)
        if await self._repository.find_by_id(normalized.id) is None:
            raise ProviderNotFoundError(f"unknown torznab provider {normalized.id!r}")
        await self._repository.update(normalized)
        log.info("torznab_provider_updated", provider_id=normalized.id)
        return normalized

    async def delete_torznab(self, provider_id: ProviderId) -> None:
        if await self._repository.find_by_id(provider_id) is None:
            raise ProviderNotFoundError(f"unknown torznab provider {provider_id!r}")
        await self._repository.delete_by_id(provider_id)
        log.info("torznab_provider_deleted", provider_id=provider_id)
