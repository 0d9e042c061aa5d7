from .category import Category, is_nsfw_or_unknown
from .settings import (
    UNLIMITED,
    GeneralSettings,
    MaxNumResults,
    SearchProviderView,
    SearchSettings,
    SortSettings,
)
from .sorting import SortCriteria, SortOptions, SortOrder
from .torrent import ContentLocator, InfoHash, MagnetUri, Torrent

__all__ = [
    "UNLIMITED",
    "Category",
    "ContentLocator",
    "GeneralSettings",
    "InfoHash",
    "MagnetUri",
    "MaxNumResults",
    "SearchProviderView",
    "SearchSettings",
    "SortCriteria",
    "SortOptions",
    "SortOrder",
    "SortSettings",
    "Torrent",
    "is_nsfw_or_unknown",
]
