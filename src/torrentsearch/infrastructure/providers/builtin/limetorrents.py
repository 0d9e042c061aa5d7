"""LimeTorrents, scraped from the search results table."""

from __future__ import annotations

import re
from urllib.parse import quote

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import InfoHash, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.html_selectors import (
    cell_texts,
    parse_html,
    select_items,
)
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase

_HASH_RE = re.compile(r"/torrent/([0-9A-Fa-f]{40})\.torrent")
# "2 days ago - in Movies"
_ADDED_RE = re.compile(r"^(?P<date>.*?)\s*-\s*in\s+(?P<category>.+)$")

_PATHS: dict[Category, str] = {
    Category.ALL: "all",
    Category.ANIME: "anime",
    Category.APPS: "applications",
    Category.BOOKS: "other",
    Category.GAMES: "games",
    Category.MOVIES: "movies",
    Category.MUSIC: "music",
    Category.PORN: "other",
    Category.SERIES: "tv",
    Category.OTHER: "other",
}

_CATEGORIES: dict[str, Category] = {
    "anime": Category.ANIME,
    "applications": Category.APPS,
    "games": Category.GAMES,
    "movies": Category.MOVIES,
    "music": Category.MUSIC,
    "tv shows": Category.SERIES,
    "tv": Category.SERIES,
    "other": Category.OTHER,
}


class LimeTorrents(HttpxProviderBase):
    INFO = ProviderInfo(
        id="limetorrents",
        name="LimeTorrents",
        url="https://www.limetorrents.lol",
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        html = await self.http.get_text(
            f"{self.base_url}/search/{_PATHS[category]}/{quote(query)}/seeds/1/"
        )
        soup = parse_html(html)

        results: list[Torrent] = []
        for row in select_items(soup, "table.table2 tr"):
            links = row.select("div.tt-name a[href]")
            cells = cell_texts(row)
            if len(links) < 2 or len(cells) < 5:
                continue
            match = _HASH_RE.search(str(links[0].get("href", "")))
            if not match:
                continue

            added = _ADDED_RE.match(cells[1])
            upload_date = added.group("date") if added else cells[1]
            row_category = (
                _CATEGORIES.get(added.group("category").strip().lower())
                if added
                else None
            )
            results.append(
                self._torrent(
                    name=links[1].get_text(strip=True),
                    size=cells[2],
                    seeders=to_int(cells[3]),
                    peers=to_int(cells[4]),
                    upload_date=upload_date,
                    category=row_category,
                    description_page_url=self.base_url + str(links[1].get("href", "")),
                    locator=InfoHash(match.group(1).lower()),
                )
            )
        return results
