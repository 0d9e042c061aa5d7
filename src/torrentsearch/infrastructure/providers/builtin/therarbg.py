"""TheRarBg; list rows carry no magnet, so description pages are fetched."""

from __future__ import annotations

from urllib.parse import quote

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

_MAX_ROWS = 30

_CATEGORIES: dict[str, Category] = {
    "movies": Category.MOVIES,
    "tv": Category.SERIES,
    "games": Category.GAMES,
    "music": Category.MUSIC,
    "apps": Category.APPS,
    "software": Category.APPS,
    "books": Category.BOOKS,
    "anime": Category.ANIME,
    "xxx": Category.PORN,
    "other": Category.OTHER,
}

# Column layout: icon | name | category | added | size | - | seeders | leechers
_CATEGORY_COL = 2
_ADDED_COL = 3
_SIZE_COL = 4
_SEEDERS_COL = 6
_LEECHERS_COL = 7


class TheRarBg(HttpxProviderBase):
    INFO = ProviderInfo(
        id="therarbg",
        name="TheRarBg",
        url="https://therarbg.to",
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        html = await self.http.get_text(
            f"{self.base_url}/get-posts/keywords:{quote(query)}/"
        )
        soup = parse_html(html)

        rows: list[dict] = []
        for row in select_items(soup, "table.sortableTable tbody tr", "tr.list-entry"):
            cells = cell_texts(row)
            page = extract_attr(
                row, 'a[href*="/post-detail/"]', "href", base_url=self.base_url
            )
            if not page or len(cells) <= _LEECHERS_COL:
                continue
            rows.append(
                {
                    "name": extract_text(row, 'a[href*="/post-detail/"]'),
                    "page": page,
                    "cells": cells,
                }
            )
            if len(rows) >= _MAX_ROWS:
                break

        magnets = await self.http.resolve_magnets([r["page"] for r in rows])

        results: list[Torrent] = []
        for row, magnet in zip(rows, magnets):
            if not magnet:
                continue
            cells = row["cells"]
            results.append(
                self._torrent(
                    name=row["name"],
                    size=cells[_SIZE_COL],
                    seeders=to_int(cells[_SEEDERS_COL]),
                    peers=to_int(cells[_LEECHERS_COL]),
                    upload_date=cells[_ADDED_COL],
                    category=_CATEGORIES.get(cells[_CATEGORY_COL].strip().lower()),
                    description_page_url=row["page"],
                    locator=MagnetUri(magnet),
                )
            )
        return results
