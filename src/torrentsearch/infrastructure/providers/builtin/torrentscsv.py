"""torrents-csv.com full-text search API."""

from __future__ import annotations

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import InfoHash, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.parsers import format_size, format_timestamp
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase


class TorrentsCsv(HttpxProviderBase):
    INFO = ProviderInfo(
        id="torrentscsv",
        name="TorrentsCSV",
        url="https://torrents-csv.com",
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        data = await self.http.get_json(
            f"{self.base_url}/service/search",
            params={"q": query, "size": 100},
        )
        rows = data.get("torrents", []) if isinstance(data, dict) else []

        results: list[Torrent] = []
        for row in rows:
            info_hash = row.get("infohash")
            if not info_hash:
                continue
            results.append(
                self._torrent(
                    name=row.get("name", ""),
                    size=format_size(row.get("size_bytes")),
                    seeders=to_int(row.get("seeders")),
                    peers=to_int(row.get("leechers")),
                    upload_date=format_timestamp(row.get("created_unix")),
                    # The index carries no category information
                    category=Category.OTHER,
                    description_page_url=f"{self.base_url}/search?q={info_hash}",
                    locator=InfoHash(info_hash.lower()),
                )
            )
        return results
