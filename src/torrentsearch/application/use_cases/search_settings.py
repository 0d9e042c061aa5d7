"""Settings views composed from live preferences, catalogue and enablement.

Reads are ``combine()``d streams recomputed whenever one of their inputs
changes. Writes are pass-through: they validate, persist, and rely on the
next emission to reflect the change.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import structlog

from torrentsearch.application.enablement import EnablementStore
from torrentsearch.application.preferences import (
    decode_bool,
    decode_category,
    decode_max_num_results,
    decode_sort_criteria,
    decode_sort_order,
    encode_category,
)
from torrentsearch.application.reactive import combine
from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.settings import (
    DEFAULT_CATEGORY_KEY,
    ENABLE_NSFW_MODE_KEY,
    HIDE_ZERO_SEEDERS_KEY,
    MAX_NUM_RESULTS_KEY,
    SORT_CRITERIA_KEY,
    SORT_ORDER_KEY,
    GeneralSettings,
    MaxNumResults,
    SearchProviderView,
    SearchSettings,
    SortSettings,
)
from torrentsearch.domain.entities.sorting import SortOptions
from torrentsearch.domain.ports.preference_store import PreferenceStorePort
from torrentsearch.domain.ports.provider_catalogue import ProviderCataloguePort
from torrentsearch.domain.providers.base import ProviderId, ProviderInfo
from torrentsearch.domain.providers.exceptions import (
    ProviderNotFoundError,
    StorageError,
)

log = structlog.get_logger(__name__)


def display_url(url: str) -> str:
    return url.removeprefix("https://")


def is_restricted(info: ProviderInfo) -> bool:
    """Providers switched off when NSFW mode is turned off."""
    return info.specialized_category.is_nsfw or info.safety_status.is_unsafe()


def build_provider_views(
    providers: list[ProviderInfo], enabled: frozenset[ProviderId]
) -> list[SearchProviderView]:
    return [
        SearchProviderView(
            id=p.id,
            name=p.name,
            url=display_url(p.url),
            specialized_category=p.specialized_category,
            safety_status=p.safety_status,
            enabled=p.id in enabled,
        )
        for p in providers
    ]


class SettingsComposer:
    """Read-only settings aggregates plus the pass-through write operations."""

    def __init__(
        self,
        preferences: PreferenceStorePort,
        enablement: EnablementStore,
        catalogue: ProviderCataloguePort,
    ) -> None:
        self.preferences = preferences
        self.enablement = enablement
        self.catalogue = catalogue

    async def _observe(self, key: str) -> AsyncIterator[Any]:
        try:
            async for value in self.preferences.observe(key, None):
                yield value
        except StorageError as e:
            log.warning("preference_read_failed", key=key, error=str(e))
            yield None

    # --- Aggregates ---
    def observe_general(self) -> AsyncIterator[GeneralSettings]:
        return combine(
            self._observe(DEFAULT_CATEGORY_KEY),
            self._observe(ENABLE_NSFW_MODE_KEY),
            transform=lambda category, nsfw: GeneralSettings(
                default_category=decode_category(category),
                enable_nsfw_mode=decode_bool(nsfw),
            ),
        )

    def observe_search(self) -> AsyncIterator[SearchSettings]:
        def _assemble(
            hide_zero: Any,
            providers: list[ProviderInfo],
            enabled: frozenset[ProviderId],
            max_results: Any,
        ) -> SearchSettings:
            return SearchSettings(
                hide_results_with_zero_seeders=decode_bool(hide_zero),
                search_providers=build_provider_views(providers, enabled),
                total_search_providers=len(providers),
                enabled_search_providers=len(enabled),
                max_num_results=decode_max_num_results(max_results),
            )

        return combine(
            self._observe(HIDE_ZERO_SEEDERS_KEY),
            self.catalogue.observe(),
            self.enablement.observe(),
            self._observe(MAX_NUM_RESULTS_KEY),
            transform=_assemble,
        )

    def observe_sort(self) -> AsyncIterator[SortSettings]:
        return combine(
            self._observe(SORT_CRITERIA_KEY),
            self._observe(SORT_ORDER_KEY),
            transform=lambda criteria, order: SortSettings(
                criteria=decode_sort_criteria(criteria),
                order=decode_sort_order(order),
            ),
        )

    # --- General ---
    async def update_default_category(self, category: Category) -> None:
        await self.preferences.set(DEFAULT_CATEGORY_KEY, encode_category(category))

    async def update_enable_nsfw_mode(self, enable: bool) -> None:
        """Persist NSFW mode; turning it off also disables restricted providers.

        The enabled set is rewritten only when filtering changes it and
        leaves at least one provider enabled.
        """
        await self.preferences.set(ENABLE_NSFW_MODE_KEY, enable)
        if enable:
            return

        current = await self.enablement.current()
        restricted = {p.id for p in await self.catalogue.list_all() if is_restricted(p)}
        remaining = current - restricted
        if not remaining:
            log.info("nsfw_disable_skipped_empty_set", enabled=len(current))
            return
        if remaining != current:
            await self.enablement.set_enabled(remaining)
            log.info(
                "nsfw_restricted_providers_disabled",
                disabled=sorted(current - remaining),
            )

    # --- Search ---
    async def update_hide_results_with_zero_seeders(self, hide: bool) -> None:
        await self.preferences.set(HIDE_ZERO_SEEDERS_KEY, hide)

    async def update_max_num_results(self, max_num_results: MaxNumResults) -> None:
        # MaxNumResults validates positivity on construction
        await self.preferences.set(MAX_NUM_RESULTS_KEY, max_num_results.n)

    async def enable_search_provider(
        self, provider_id: ProviderId, enable: bool
    ) -> None:
        known = {p.id for p in await self.catalogue.list_all()}
        if provider_id not in known:
            raise ProviderNotFoundError(f"unknown provider {provider_id!r}")
        current = await self.enablement.current()
        updated = current | {provider_id} if enable else current - {provider_id}
        if updated != current:
            await self.enablement.set_enabled(updated)

    async def enable_all_search_providers(self) -> None:
        await self.enablement.set_enabled(p.id for p in await self.catalogue.list_all())

    async def disable_all_search_providers(self) -> None:
        await self.enablement.set_enabled(())

    async def reset_search_providers_to_default(self) -> None:
        await self.enablement.set_enabled(self.catalogue.default_enabled_ids())

    # --- Sort ---
    async def update_sort_options(self, options: SortOptions) -> None:
        await self.preferences.set(SORT_CRITERIA_KEY, options.criteria.value)
        await self.preferences.set(SORT_ORDER_KEY, options.order.value)
