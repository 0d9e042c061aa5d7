"""Provider adapters and the provider catalogue."""

from .catalogue import ProviderCatalogue, validate_torznab_config
from .httpx_base import HttpxProviderBase
from .torznab import TorznabProvider

__all__ = [
    "HttpxProviderBase",
    "ProviderCatalogue",
    "TorznabProvider",
    "validate_torznab_config",
]
