"""Store factory - creates the key-value backend selected by config."""

from __future__ import annotations

from typing import Literal

import structlog

from torrentsearch.domain.ports.kv_store import KeyValueStorePort
from torrentsearch.infrastructure.storage.diskcache_store import DiskcacheStore
from torrentsearch.infrastructure.storage.redis_store import RedisStore

log = structlog.get_logger(__name__)

StorageBackend = Literal["diskcache", "redis"]


def create_store(
    backend: StorageBackend = "diskcache",
    *,
    directory: str = "./data",
    redis_url: str = "redis://localhost:6379/0",
    max_concurrent: int = 10,
) -> KeyValueStorePort:
    """Create a key-value store for ``backend``.

    Raises:
        ValueError: If ``backend`` is unknown.
    """
    if backend == "diskcache":
        log.info(
            "store_factory_create",
            backend=backend,
            directory=directory,
            max_concurrent=max_concurrent,
        )
        return DiskcacheStore(directory=directory, max_concurrent=max_concurrent)
    elif backend == "redis":
        log.info("store_factory_create", backend=backend, url=redis_url)
        return RedisStore(url=redis_url, max_concurrent=max(max_concurrent, 50))
    else:
        raise ValueError(
            f"Unknown storage backend: {backend!r}. Must be 'diskcache' or 'redis'."
        )
