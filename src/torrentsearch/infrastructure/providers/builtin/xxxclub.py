"""XXXClub adult index; magnets live on the description pages."""

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

_MAX_ROWS = 30


class XXXClub(HttpxProviderBase):
    INFO = ProviderInfo(
        id="xxxclub",
        name="XXXClub",
        url="https://xxxclub.to",
        specialized_category=Category.PORN,
        safety_status=Unsafe("Shows pop-up ads and redirects."),
        enabled_by_default=False,
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        html = await self.http.get_text(
            f"{self.base_url}/torrents/search/all/{quote(query)}"
        )
        soup = parse_html(html)

        rows: list[dict] = []
        for row in select_items(soup, "div.browsetableinside ul li"):
            page = extract_attr(
                row, 'a[href*="/torrents/details/"]', "href", base_url=self.base_url
            )
            if not page:
                continue
            rows.append(
                {
                    "name": extract_text(row, 'a[href*="/torrents/details/"]'),
                    "page": page,
                    "magnet": extract_attr(row, 'a[href^="magnet:"]', "href"),
                    "date": extract_text(row, "span.adde"),
                    "size": extract_text(row, "span.siz"),
                    "seeders": extract_text(row, "span.see"),
                    "peers": extract_text(row, "span.lee"),
                }
            )
            if len(rows) >= _MAX_ROWS:
                break

        missing = [r["page"] for r in rows if not r["magnet"]]
        resolved = dict(zip(missing, await self.http.resolve_magnets(missing)))

        results: list[Torrent] = []
        for row in rows:
            magnet = row["magnet"] or resolved.get(row["page"])
            if not magnet:
                continue
            results.append(
                self._torrent(
                    name=row["name"],
                    size=row["size"],
                    seeders=to_int(row["seeders"]),
                    peers=to_int(row["peers"]),
                    upload_date=row["date"],
                    category=Category.PORN,
                    description_page_url=row["page"],
                    locator=MagnetUri(magnet),
                )
            )
        return results
