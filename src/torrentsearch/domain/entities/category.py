"""Content categories shared by providers, torrents and settings."""

from __future__ import annotations

from enum import Enum


class Category(Enum):
    """Closed set of content categories.

    ``ALL`` is the universal value used when no category restriction
    applies (search everything / provider serves everything).
    """

    ALL = "All"
    ANIME = "Anime"
    APPS = "Apps"
    BOOKS = "Books"
    GAMES = "Games"
    MOVIES = "Movies"
    MUSIC = "Music"
    PORN = "Porn"
    SERIES = "Series"
    OTHER = "Other"

    @property
    def is_nsfw(self) -> bool:
        return self is Category.PORN

    @classmethod
    def parse(cls, text: str) -> Category:
        """Case-insensitive lookup by member name or display value.

        Raises:
            ValueError: Unknown category name.
        """
        needle = text.strip().lower()
        for member in cls:
            if member.name.lower() == needle or member.value.lower() == needle:
                return member
        raise ValueError(f"Unknown category: {text!r}")


def is_nsfw_or_unknown(category: Category | None) -> bool:
    """Return ``True`` for NSFW categories and for a missing category."""
    if category is None:
        return True
    return category.is_nsfw
