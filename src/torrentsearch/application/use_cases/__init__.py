from .search_settings import SettingsComposer
from .search_torrents import (
    ProviderFailure,
    SearchOutcome,
    SearchPreferences,
    SearchSession,
    SearchTorrentsUseCase,
)

__all__ = [
    "ProviderFailure",
    "SearchOutcome",
    "SearchPreferences",
    "SearchSession",
    "SearchTorrentsUseCase",
    "SettingsComposer",
]
