"""Persisted set of enabled provider ids, reconciled with the catalogue."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from typing import Any

import structlog

from torrentsearch.application.reactive import combine, first
from torrentsearch.domain.entities.settings import ENABLED_PROVIDERS_KEY
from torrentsearch.domain.ports.preference_store import PreferenceStorePort
from torrentsearch.domain.ports.provider_catalogue import ProviderCataloguePort
from torrentsearch.domain.providers.base import ProviderId, ProviderInfo
from torrentsearch.domain.providers.exceptions import StorageError

log = structlog.get_logger(__name__)


class EnablementStore:
    """Which providers are turned on.

    The observed set is always the persisted set intersected with the
    current catalogue ids, so ids of deleted providers drop out silently.
    Until the set is first written the catalogue's default-enabled ids are
    used; read failures degrade to that default as well.
    """

    def __init__(
        self,
        preferences: PreferenceStorePort,
        catalogue: ProviderCataloguePort,
    ) -> None:
        self._preferences = preferences
        self._catalogue = catalogue

    async def _observe_stored(self) -> AsyncIterator[Any]:
        try:
            async for value in self._preferences.observe(ENABLED_PROVIDERS_KEY, None):
                yield value
        except StorageError as e:
            log.warning("enabled_providers_read_failed", error=str(e))
            yield None

    def _reconcile(
        self, stored: Any, providers: list[ProviderInfo]
    ) -> frozenset[ProviderId]:
        ids = {p.id for p in providers}
        if stored is None:
            wanted: Iterable[ProviderId] = self._catalogue.default_enabled_ids()
        else:
            wanted = stored
        return frozenset(i for i in wanted if i in ids)

    def observe(self) -> AsyncIterator[frozenset[ProviderId]]:
        return combine(
            self._observe_stored(),
            self._catalogue.observe(),
            transform=self._reconcile,
        )

    async def current(self) -> frozenset[ProviderId]:
        return await first(self.observe())

    async def set_enabled(self, ids: Iterable[ProviderId]) -> None:
        """Replace the whole enabled set atomically."""
        await self._preferences.set(ENABLED_PROVIDERS_KEY, sorted(set(ids)))
        log.debug("enabled_providers_written")
