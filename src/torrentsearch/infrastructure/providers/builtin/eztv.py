"""EZTV TV episodes, scraped from the search results table."""

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

# Column layout: show | episode | links | size | released | seeds
_SIZE_COL = 3
_RELEASED_COL = 4
_SEEDS_COL = 5


class Eztv(HttpxProviderBase):
    INFO = ProviderInfo(
        id="eztv",
        name="Eztv",
        url="https://eztvx.to",
        specialized_category=Category.SERIES,
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        html = await self.http.get_text(f"{self.base_url}/search/{quote(query)}")
        soup = parse_html(html)

        results: list[Torrent] = []
        for row in select_items(soup, "tr.forum_header_border"):
            magnet = extract_attr(row, "a.magnet", "href", 'a[href^="magnet:"]')
            name = extract_text(row, "a.epinfo")
            cells = cell_texts(row)
            if not magnet or not name or len(cells) <= _SEEDS_COL:
                continue
            results.append(
                self._torrent(
                    name=name,
                    size=cells[_SIZE_COL],
                    seeders=to_int(cells[_SEEDS_COL]),
                    peers=0,
                    upload_date=cells[_RELEASED_COL],
                    category=Category.SERIES,
                    description_page_url=extract_attr(
                        row, "a.epinfo", "href", base_url=self.base_url
                    ),
                    locator=MagnetUri(magnet),
                )
            )
        return results
