"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import cast

import httpx
import structlog
from fastapi import FastAPI

from torrentsearch.application.enablement import EnablementStore
from torrentsearch.application.use_cases import SearchTorrentsUseCase, SettingsComposer
from torrentsearch.infrastructure.config.schema import AppConfig
from torrentsearch.infrastructure.persistence import (
    CachePreferenceStore,
    CacheTorznabConfigRepository,
)
from torrentsearch.infrastructure.providers import ProviderCatalogue
from torrentsearch.infrastructure.providers.builtin import BUILTIN_PROVIDERS
from torrentsearch.infrastructure.storage import create_store
from torrentsearch.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    """One client for every provider; owned and closed by the lifespan."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )


def wire_services(state: AppState) -> None:
    """Build catalogue, stores and use cases on top of store + HTTP client."""
    config = state.config

    state.torznab_repo = CacheTorznabConfigRepository(state.store)
    state.preferences = CachePreferenceStore(state.store)

    builtins = [cls(state.http_client) for cls in BUILTIN_PROVIDERS]
    state.catalogue = ProviderCatalogue(
        builtins=builtins,
        repository=state.torznab_repo,
        http_client=state.http_client,
    )
    log.info("catalogue_initialized", builtins=len(builtins))

    state.enablement = EnablementStore(state.preferences, state.catalogue)
    state.search_uc = SearchTorrentsUseCase(
        catalogue=state.catalogue,
        enablement=state.enablement,
        preferences=state.preferences,
        provider_timeout=config.provider_timeout_seconds,
    )
    state.settings = SettingsComposer(
        preferences=state.preferences,
        enablement=state.enablement,
        catalogue=state.catalogue,
    )
    log.info(
        "search_use_case_initialized",
        provider_timeout=config.provider_timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Store (preferences and Torznab providers live here)
        2. HTTP client (shared by every provider)
        3. Catalogue, enablement, use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Store
    store = create_store(
        backend=config.storage.backend,
        directory=str(config.storage.directory),
        redis_url=config.storage.redis_url,
        max_concurrent=config.storage.max_concurrent,
    )
    await store.__aenter__()
    state.store = store
    log.info("store_initialized", backend=config.storage.backend)

    try:
        # 2) HTTP client
        state.http_client = build_http_client(config)
        log.info(
            "http_client_initialized",
            timeout=config.http_timeout_seconds,
            user_agent=config.http_user_agent,
        )

        try:
            # 3) Services
            wire_services(state)

            log.info("app_startup_complete")
            yield
        finally:
            await state.http_client.aclose()
            log.info("http_client_closed")
    finally:
        await store.aclose()
        log.info("store_closed")

        log.info("app_shutdown_complete")
