"""Nyaa RSS feed (also serves the Sukebei mirror)."""

from __future__ import annotations

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import InfoHash, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.parsers import format_rfc822
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase
from torrentsearch.infrastructure.providers.rss import RssItem, parse_items

# nyaa ``categoryId`` main group → local category
_NYAA_GROUPS: dict[str, Category] = {
    "1": Category.ANIME,
    "2": Category.MUSIC,
    "3": Category.BOOKS,
    "4": Category.MOVIES,
    "5": Category.OTHER,
    "6": Category.APPS,
}


class Nyaa(HttpxProviderBase):
    INFO = ProviderInfo(
        id="nyaa",
        name="Nyaa",
        url="https://nyaa.si",
        specialized_category=Category.ANIME,
    )

    # ``c`` parameter used for a category-restricted search
    _category_filter = "1_0"

    def map_category(self, category_id: str) -> Category | None:
        return _NYAA_GROUPS.get(category_id.split("_", 1)[0])

    async def search(self, query: str, category: Category) -> list[Torrent]:
        params = {
            "page": "rss",
            "q": query,
            "c": "0_0" if category is Category.ALL else self._category_filter,
            "f": "0",
        }
        root = await self.http.get_xml(self.base_url, params=params)
        return [t for t in map(self._build_torrent, parse_items(root)) if t]

    def _build_torrent(self, item: RssItem) -> Torrent | None:
        info_hash = item.extras.get("infoHash")
        if not item.title or not info_hash:
            return None
        return self._torrent(
            name=item.title,
            size=item.extras.get("size", ""),
            seeders=to_int(item.extras.get("seeders")),
            peers=to_int(item.extras.get("leechers")),
            upload_date=format_rfc822(item.pub_date),
            category=self.map_category(item.extras.get("categoryId", "")),
            description_page_url=item.guid or item.link,
            locator=InfoHash(info_hash.lower()),
        )
