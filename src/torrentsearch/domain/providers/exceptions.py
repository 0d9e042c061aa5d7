"""Provider, configuration and storage exceptions."""

from __future__ import annotations


class TorrentSearchError(Exception):
    """Base class for all domain errors."""


class ProviderError(TorrentSearchError):
    """Raised when one provider cannot complete a search.

    Carries only the provider id and a human-readable cause; the original
    exception is chained but never exposed through the public fields.
    """

    def __init__(self, provider_id: str, message: str) -> None:
        super().__init__(f"{provider_id}: {message}")
        self.provider_id = provider_id
        self.message = message


class ProviderTimeoutError(ProviderError):
    """Raised when a provider does not answer within the per-call timeout."""


class ConfigValidationError(TorrentSearchError):
    """Raised when a Torznab provider configuration is malformed."""


class StorageError(TorrentSearchError):
    """Raised when the persistence backend fails."""


class ProviderNotFoundError(TorrentSearchError):
    """Raised when a provider id is not known to the catalogue."""
