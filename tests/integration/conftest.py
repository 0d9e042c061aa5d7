"""Shared fixtures for integration tests.

These tests use real infrastructure components (DiskcacheStore and the
persistence adapters on top of it) rooted in a per-test temporary directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from torrentsearch.infrastructure.storage.diskcache_store import DiskcacheStore


@pytest.fixture()
def store_dir(tmp_path: Path) -> Path:
    return tmp_path / "store"


@pytest.fixture()
async def diskcache_store(store_dir: Path) -> DiskcacheStore:
    """Real DiskcacheStore backed by tmp_path (auto-cleaned)."""
    store = DiskcacheStore(directory=store_dir, max_concurrent=5)
    async with store:
        yield store
