from .base import (
    SAFE,
    TORZNAB_ID_PREFIX,
    ProviderId,
    ProviderInfo,
    Safe,
    SafetyStatus,
    SearchProviderProtocol,
    TorznabConfig,
    Unsafe,
    new_torznab_id,
)
from .exceptions import (
    ConfigValidationError,
    ProviderError,
    ProviderNotFoundError,
    ProviderTimeoutError,
    StorageError,
    TorrentSearchError,
)

__all__ = [
    "SAFE",
    "TORZNAB_ID_PREFIX",
    "ConfigValidationError",
    "ProviderError",
    "ProviderId",
    "ProviderInfo",
    "ProviderNotFoundError",
    "ProviderTimeoutError",
    "Safe",
    "SafetyStatus",
    "SearchProviderProtocol",
    "StorageError",
    "TorrentSearchError",
    "TorznabConfig",
    "Unsafe",
    "new_torznab_id",
]
