"""JSON presenters for domain objects returned by the API."""

from __future__ import annotations

from typing import Any

from torrentsearch.application.use_cases import ProviderFailure, SearchOutcome
from torrentsearch.domain.entities.settings import (
    GeneralSettings,
    SearchProviderView,
    SearchSettings,
    SortSettings,
)
from torrentsearch.domain.entities.torrent import Torrent
from torrentsearch.domain.providers.base import ProviderInfo, TorznabConfig


def present_torrent(torrent: Torrent) -> dict[str, Any]:
    return {
        "name": torrent.name,
        "size": torrent.size,
        "size_bytes": torrent.size_in_bytes(),
        "seeders": torrent.seeders,
        "peers": torrent.peers,
        "provider_id": torrent.provider_id,
        "provider_name": torrent.provider_name,
        "upload_date": torrent.upload_date,
        "category": torrent.category.value if torrent.category else None,
        "description_page_url": torrent.description_page_url,
        "info_hash": torrent.info_hash(),
        "magnet_uri": torrent.magnet_uri(),
    }


def present_failure(failure: ProviderFailure) -> dict[str, str]:
    return {
        "provider_id": failure.provider_id,
        "provider_name": failure.provider_name,
        "reason": failure.reason,
    }


def present_outcome(outcome: SearchOutcome) -> dict[str, Any]:
    return {
        "results": [present_torrent(t) for t in outcome.results],
        "failures": [present_failure(f) for f in outcome.failures],
        "count": len(outcome.results),
    }


def present_provider_info(info: ProviderInfo, *, enabled: bool) -> dict[str, Any]:
    return {
        "id": info.id,
        "name": info.name,
        "url": info.url,
        "specialized_category": info.specialized_category.value,
        "unsafe": info.safety_status.is_unsafe(),
        "unsafe_reason": getattr(info.safety_status, "reason", None),
        "enabled_by_default": info.enabled_by_default,
        "enabled": enabled,
    }


def present_torznab_config(config: TorznabConfig) -> dict[str, Any]:
    return {
        "id": config.id,
        "name": config.name,
        "url": config.url,
        "api_key": config.api_key,
        "category": config.category.value,
        "unsafe_reason": config.unsafe_reason,
        "category_map": {str(k): v.value for k, v in config.category_map.items()},
    }


def _present_provider_view(view: SearchProviderView) -> dict[str, Any]:
    return {
        "id": view.id,
        "name": view.name,
        "url": view.url,
        "specialized_category": view.specialized_category.value,
        "unsafe": view.safety_status.is_unsafe(),
        "enabled": view.enabled,
    }


def present_settings(
    general: GeneralSettings, search: SearchSettings, sort: SortSettings
) -> dict[str, Any]:
    return {
        "general": {
            "default_category": general.default_category.value,
            "enable_nsfw_mode": general.enable_nsfw_mode,
        },
        "search": {
            "hide_results_with_zero_seeders": search.hide_results_with_zero_seeders,
            "max_num_results": search.max_num_results.n,
            "total_search_providers": search.total_search_providers,
            "enabled_search_providers": search.enabled_search_providers,
            "search_providers": [
                _present_provider_view(v) for v in search.search_providers
            ],
        },
        "sort": {
            "criteria": sort.criteria.value,
            "order": sort.order.value,
        },
    }
