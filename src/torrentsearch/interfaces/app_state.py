"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from torrentsearch.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from torrentsearch.application.enablement import EnablementStore
    from torrentsearch.application.use_cases import (
        SearchTorrentsUseCase,
        SettingsComposer,
    )
    from torrentsearch.domain.ports import (
        KeyValueStorePort,
        PreferenceStorePort,
        TorznabConfigRepository,
    )
    from torrentsearch.infrastructure.providers import ProviderCatalogue


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    store: KeyValueStorePort
    http_client: httpx.AsyncClient

    # Domain Ports
    torznab_repo: TorznabConfigRepository
    preferences: PreferenceStorePort

    # Providers
    catalogue: ProviderCatalogue
    enablement: EnablementStore

    # Application Services
    search_uc: SearchTorrentsUseCase
    settings: SettingsComposer
