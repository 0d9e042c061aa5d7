"""Shared test fixtures for the torrentsearch test suite."""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from torrentsearch.application.enablement import EnablementStore
from torrentsearch.application.use_cases import SearchTorrentsUseCase, SettingsComposer
from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import ContentLocator, InfoHash, Torrent
from torrentsearch.domain.providers.base import SAFE, ProviderInfo, SafetyStatus
from torrentsearch.domain.providers.exceptions import StorageError
from torrentsearch.infrastructure.persistence import (
    CachePreferenceStore,
    CacheTorznabConfigRepository,
)
from torrentsearch.infrastructure.providers import ProviderCatalogue

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


def _hash_for(name: str) -> str:
    return hashlib.sha1(name.encode()).hexdigest()


@pytest.fixture()
def make_torrent() -> Callable[..., Torrent]:
    """Factory for ``Torrent`` values; the info-hash defaults to one per name."""

    def _make(
        name: str = "Ubuntu 24.04 LTS",
        *,
        seeders: int = 10,
        peers: int = 2,
        size: str = "4.50 GB",
        provider_id: str = "fake",
        provider_name: str = "Fake",
        upload_date: str = "",
        category: Category | None = Category.APPS,
        locator: ContentLocator | None = None,
    ) -> Torrent:
        return Torrent(
            name=name,
            size=size,
            seeders=seeders,
            peers=peers,
            provider_id=provider_id,
            provider_name=provider_name,
            upload_date=upload_date,
            category=category,
            description_page_url=f"https://example.com/{provider_id}/details",
            locator=locator or InfoHash(_hash_for(name)),
        )

    return _make


# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------


class FakeProvider:
    """Scripted provider: returns ``results``, raises ``error`` or stalls."""

    def __init__(
        self,
        info: ProviderInfo,
        results: Sequence[Torrent] = (),
        *,
        error: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self.info = info
        self.results = list(results)
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, Category]] = []
        self.cancelled = False

    async def search(self, query: str, category: Category) -> list[Torrent]:
        self.calls.append((query, category))
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return list(self.results)


@pytest.fixture()
def make_provider() -> Callable[..., FakeProvider]:
    def _make(
        provider_id: str,
        results: Sequence[Torrent] = (),
        *,
        category: Category = Category.ALL,
        enabled_by_default: bool = True,
        error: BaseException | None = None,
        delay: float = 0.0,
        name: str | None = None,
        safety_status: SafetyStatus = SAFE,
    ) -> FakeProvider:
        info = ProviderInfo(
            id=provider_id,
            name=name or provider_id.upper(),
            url=f"https://{provider_id}.example",
            specialized_category=category,
            safety_status=safety_status,
            enabled_by_default=enabled_by_default,
        )
        return FakeProvider(info, results, error=error, delay=delay)

    return _make


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------


class InMemoryStore:
    """Dict-backed key-value store; set ``fail`` to simulate backend outages."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise StorageError("backend unavailable")

    async def get(self, key: str) -> Any:
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self._check()
        self.data[key] = value

    async def delete(self, key: str) -> bool:
        self._check()
        return self.data.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        self._check()
        return key in self.data

    async def clear(self) -> None:
        self._check()
        self.data.clear()

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> InMemoryStore:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


@pytest.fixture()
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def mock_store() -> AsyncMock:
    """Mock KeyValueStorePort."""
    store = AsyncMock()
    store.get = AsyncMock(return_value=None)
    store.set = AsyncMock()
    store.delete = AsyncMock(return_value=True)
    store.exists = AsyncMock(return_value=False)
    store.clear = AsyncMock()
    store.aclose = AsyncMock()
    return store


@pytest.fixture()
async def http_client() -> httpx.AsyncClient:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


# ---------------------------------------------------------------------------
# Application wiring
# ---------------------------------------------------------------------------


@dataclass
class Services:
    store: InMemoryStore
    preferences: CachePreferenceStore
    repository: CacheTorznabConfigRepository
    catalogue: ProviderCatalogue
    enablement: EnablementStore
    search: SearchTorrentsUseCase
    settings: SettingsComposer
    builtins: list[Any] = field(default_factory=list)


@pytest.fixture()
def make_services(
    memory_store: InMemoryStore, http_client: httpx.AsyncClient
) -> Callable[..., Services]:
    """Real stores, catalogue and use cases over an in-memory store."""

    def _make(builtins: Sequence[Any] = (), *, provider_timeout: float = 1.0):
        preferences = CachePreferenceStore(memory_store)
        repository = CacheTorznabConfigRepository(memory_store)
        catalogue = ProviderCatalogue(
            builtins=builtins, repository=repository, http_client=http_client
        )
        enablement = EnablementStore(preferences, catalogue)
        return Services(
            store=memory_store,
            preferences=preferences,
            repository=repository,
            catalogue=catalogue,
            enablement=enablement,
            search=SearchTorrentsUseCase(
                catalogue=catalogue,
                enablement=enablement,
                preferences=preferences,
                provider_timeout=provider_timeout,
            ),
            settings=SettingsComposer(
                preferences=preferences,
                enablement=enablement,
                catalogue=catalogue,
            ),
            builtins=list(builtins),
        )

    return _make
