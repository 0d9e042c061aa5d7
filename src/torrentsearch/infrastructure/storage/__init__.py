"""Storage infrastructure - persistent key-value backends."""

from .diskcache_store import DiskcacheStore
from .redis_store import RedisStore
from .store_factory import StorageBackend, create_store

__all__ = [
    "DiskcacheStore",
    "RedisStore",
    "StorageBackend",
    "create_store",
]
