"""Persistence adapters built on the key-value store."""

from .preference_store import CachePreferenceStore
from .torznab_config_store import CacheTorznabConfigRepository

__all__ = [
    "CachePreferenceStore",
    "CacheTorznabConfigRepository",
]
