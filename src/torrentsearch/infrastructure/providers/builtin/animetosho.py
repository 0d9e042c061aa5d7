"""AnimeTosho JSON feed."""

from __future__ import annotations

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import InfoHash, MagnetUri, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.parsers import format_size, format_timestamp
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase

_FEED_URL = "https://feed.animetosho.org/json"


class AnimeTosho(HttpxProviderBase):
    INFO = ProviderInfo(
        id="animetosho",
        name="AnimeTosho",
        url="https://animetosho.org",
        specialized_category=Category.ANIME,
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        data = await self.http.get_json(_FEED_URL, params={"q": query})
        if not isinstance(data, list):
            return []

        results: list[Torrent] = []
        for entry in data:
            magnet = entry.get("magnet_uri")
            info_hash = entry.get("info_hash")
            if magnet:
                locator = MagnetUri(magnet)
            elif info_hash:
                locator = InfoHash(info_hash.lower())
            else:
                continue
            results.append(
                self._torrent(
                    name=entry.get("title", ""),
                    size=format_size(entry.get("total_size")),
                    seeders=to_int(entry.get("seeders")),
                    peers=to_int(entry.get("leechers")),
                    upload_date=format_timestamp(entry.get("timestamp")),
                    category=Category.ANIME,
                    description_page_url=entry.get("link", ""),
                    locator=locator,
                )
            )
        return results
