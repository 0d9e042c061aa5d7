"""UIndex, scraped from the search results table."""

from __future__ import annotations

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import MagnetUri, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.html_selectors import (
    cell_texts,
    extract_attr,
    extract_text,
    parse_html,
    select_items,
)
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase

# ``c`` parameter ids
_REQUEST_CATEGORIES: dict[Category, int] = {
    Category.ALL: 0,
    Category.MOVIES: 1,
    Category.SERIES: 2,
    Category.GAMES: 3,
    Category.MUSIC: 4,
    Category.APPS: 5,
    Category.PORN: 6,
    Category.ANIME: 7,
    Category.OTHER: 8,
    Category.BOOKS: 8,
}

_CATEGORIES: dict[str, Category] = {
    "movies": Category.MOVIES,
    "tv": Category.SERIES,
    "games": Category.GAMES,
    "music": Category.MUSIC,
    "apps": Category.APPS,
    "xxx": Category.PORN,
    "anime": Category.ANIME,
    "other": Category.OTHER,
}

# Column layout: category | name (+ magnet, date) | size | seeders | leechers
_SIZE_COL = 2
_SEEDERS_COL = 3
_LEECHERS_COL = 4


class UIndex(HttpxProviderBase):
    INFO = ProviderInfo(
        id="uindex",
        name="UIndex",
        url="https://uindex.org",
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        html = await self.http.get_text(
            f"{self.base_url}/search.php",
            params={"search": query, "c": _REQUEST_CATEGORIES[category]},
        )
        soup = parse_html(html)

        results: list[Torrent] = []
        for row in select_items(soup, "table.maintable tr"):
            cells = cell_texts(row)
            magnet = extract_attr(row, 'a[href^="magnet:"]', "href")
            name = extract_text(row, 'a[href*="/details.php"]')
            if not magnet or not name or len(cells) <= _LEECHERS_COL:
                continue
            results.append(
                self._torrent(
                    name=name,
                    size=cells[_SIZE_COL],
                    seeders=to_int(cells[_SEEDERS_COL]),
                    peers=to_int(cells[_LEECHERS_COL]),
                    upload_date=extract_text(row, "div.sub"),
                    category=_CATEGORIES.get(cells[0].strip().lower()),
                    description_page_url=extract_attr(
                        row, 'a[href*="/details.php"]', "href", base_url=self.base_url
                    ),
                    locator=MagnetUri(magnet),
                )
            )
        return results
