"""TorrentDownloads search RSS feed."""

from __future__ import annotations

from urllib.parse import urljoin

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import InfoHash, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.parsers import format_rfc822, format_size
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase
from torrentsearch.infrastructure.providers.rss import parse_items

_CATEGORIES: dict[str, Category] = {
    "1": Category.ANIME,
    "2": Category.BOOKS,
    "3": Category.GAMES,
    "4": Category.MOVIES,
    "5": Category.MUSIC,
    "7": Category.APPS,
    "8": Category.SERIES,
    "9": Category.OTHER,
}


class TorrentDownloads(HttpxProviderBase):
    INFO = ProviderInfo(
        id="torrentdownloads",
        name="TorrentDownloads",
        url="https://www.torrentdownloads.pro",
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        root = await self.http.get_xml(
            f"{self.base_url}/rss.xml",
            params={"type": "search", "search": query},
        )

        results: list[Torrent] = []
        for item in parse_items(root):
            info_hash = item.extras.get("info_hash")
            if not item.title or not info_hash:
                continue
            results.append(
                self._torrent(
                    name=item.title,
                    size=format_size(item.size),
                    seeders=to_int(item.extras.get("seeders")),
                    peers=to_int(item.extras.get("leechers")),
                    upload_date=format_rfc822(item.pub_date),
                    category=_CATEGORIES.get(item.extras.get("categoryID", "")),
                    description_page_url=urljoin(self.base_url, item.link),
                    locator=InfoHash(info_hash.lower()),
                )
            )
        return results
