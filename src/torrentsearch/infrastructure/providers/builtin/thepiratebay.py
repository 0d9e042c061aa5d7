"""The Pirate Bay via the apibay.org JSON API."""

from __future__ import annotations

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import InfoHash, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.parsers import format_size, format_timestamp
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase

_API_URL = "https://apibay.org/q.php"

# Local category → apibay ``cat`` parameter
_REQUEST_CATEGORIES: dict[Category, int] = {
    Category.ALL: 0,
    Category.ANIME: 200,
    Category.APPS: 300,
    Category.BOOKS: 601,
    Category.GAMES: 400,
    Category.MOVIES: 201,
    Category.MUSIC: 101,
    Category.PORN: 500,
    Category.SERIES: 205,
    Category.OTHER: 600,
}

# apibay returns a single placeholder row when nothing matches
_NO_RESULTS_ID = "0"
_ZERO_HASH = "0" * 40


def map_category(code: int) -> Category:
    if code in (102, 601):
        return Category.BOOKS
    if code in (205, 208):
        return Category.SERIES
    group = code // 100
    return {
        1: Category.MUSIC,
        2: Category.MOVIES,
        3: Category.APPS,
        4: Category.GAMES,
        5: Category.PORN,
    }.get(group, Category.OTHER)


class ThePirateBay(HttpxProviderBase):
    INFO = ProviderInfo(
        id="thepiratebay",
        name="ThePirateBay",
        url="https://thepiratebay.org",
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        data = await self.http.get_json(
            _API_URL,
            params={"q": query, "cat": _REQUEST_CATEGORIES[category]},
        )
        if not isinstance(data, list):
            return []

        results: list[Torrent] = []
        for row in data:
            info_hash = str(row.get("info_hash") or "")
            if str(row.get("id")) == _NO_RESULTS_ID or info_hash in ("", _ZERO_HASH):
                continue
            results.append(
                self._torrent(
                    name=row.get("name", ""),
                    size=format_size(row.get("size")),
                    seeders=to_int(row.get("seeders")),
                    peers=to_int(row.get("leechers")),
                    upload_date=format_timestamp(row.get("added")),
                    category=map_category(to_int(row.get("category"))),
                    description_page_url=(
                        f"{self.base_url}/description.php?id={row.get('id')}"
                    ),
                    locator=InfoHash(info_hash.lower()),
                )
            )
        return results
