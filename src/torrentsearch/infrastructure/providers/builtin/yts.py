"""YTS movie releases via the public JSON API."""

from __future__ import annotations

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import InfoHash, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.parsers import format_size, format_timestamp
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase


class Yts(HttpxProviderBase):
    INFO = ProviderInfo(
        id="yts",
        name="Yts",
        url="https://yts.mx",
        specialized_category=Category.MOVIES,
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        data = await self.http.get_json(
            f"{self.base_url}/api/v2/list_movies.json",
            params={"query_term": query, "limit": 50},
        )
        movies = ((data or {}).get("data") or {}).get("movies") or []

        results: list[Torrent] = []
        for movie in movies:
            title = movie.get("title_long") or movie.get("title", "")
            for t in movie.get("torrents") or []:
                info_hash = t.get("hash")
                if not info_hash:
                    continue
                results.append(
                    self._torrent(
                        name=f"{title} [{t.get('quality', '')}] [{t.get('type', '')}]",
                        size=format_size(t.get("size_bytes")),
                        seeders=to_int(t.get("seeds")),
                        peers=to_int(t.get("peers")),
                        upload_date=format_timestamp(t.get("date_uploaded_unix")),
                        category=Category.MOVIES,
                        description_page_url=movie.get("url", ""),
                        locator=InfoHash(info_hash.lower()),
                    )
                )
        return results
