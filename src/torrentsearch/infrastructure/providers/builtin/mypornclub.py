"""MyPornClub adult index; magnets live on the description pages."""

from __future__ import annotations

from urllib.parse import quote

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import MagnetUri, Torrent
from torrentsearch.domain.providers.base import ProviderInfo, Unsafe
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.html_selectors import (
    extract_attr,
    extract_text,
    parse_html,
    select_items,
)
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase

_MAX_ROWS = 20


class MyPornClub(HttpxProviderBase):
    INFO = ProviderInfo(
        id="mypornclub",
        name="MyPornClub",
        url="https://myporn.club",
        specialized_category=Category.PORN,
        safety_status=Unsafe("Shows pop-up ads and redirects."),
        enabled_by_default=False,
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        html = await self.http.get_text(f"{self.base_url}/s/{quote(query)}")
        soup = parse_html(html)

        rows = select_items(soup, "div.torrent_element", "div.torrents_list > div")[
            :_MAX_ROWS
        ]
        pages = [
            extract_attr(row, 'a[href^="/t/"]', "href", base_url=self.base_url)
            for row in rows
        ]
        magnets = await self.http.resolve_magnets([p for p in pages if p])

        results: list[Torrent] = []
        resolved = iter(magnets)
        for row, page in zip(rows, pages):
            if not page:
                continue
            magnet = next(resolved)
            if not magnet:
                continue
            results.append(
                self._torrent(
                    name=extract_text(row, 'a[href^="/t/"]'),
                    size=extract_text(row, "span.torrent_size", "div.torrent_size"),
                    seeders=to_int(
                        extract_text(row, "span.torrent_seeds", "div.seeds")
                    ),
                    peers=to_int(
                        extract_text(row, "span.torrent_leechs", "div.leechs")
                    ),
                    upload_date=extract_text(row, "span.torrent_date", "div.date"),
                    category=Category.PORN,
                    description_page_url=page,
                    locator=MagnetUri(magnet),
                )
            )
        return results
