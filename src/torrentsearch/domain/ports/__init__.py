from .kv_store import KeyValueStorePort
from .preference_store import PreferenceStorePort
from .provider_catalogue import ProviderCataloguePort
from .torznab_config_repository import TorznabConfigRepository

__all__ = [
    "KeyValueStorePort",
    "PreferenceStorePort",
    "ProviderCataloguePort",
    "TorznabConfigRepository",
]
