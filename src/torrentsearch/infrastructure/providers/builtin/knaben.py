"""Knaben meta-index via its JSON API."""

from __future__ import annotations

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import InfoHash, MagnetUri, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.parsers import format_iso, format_size
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase

_API_URL = "https://api.knaben.org/v1"
_MAX_RESULTS = 100

# Knaben top-level category id (millions) → local category
_CATEGORY_GROUPS: dict[int, Category] = {
    1: Category.MUSIC,
    2: Category.SERIES,
    3: Category.MOVIES,
    4: Category.APPS,
    5: Category.PORN,
    6: Category.GAMES,
    7: Category.ANIME,
    8: Category.OTHER,
    9: Category.BOOKS,
}


def map_category(category_ids: list[int]) -> Category | None:
    for cat_id in category_ids:
        mapped = _CATEGORY_GROUPS.get(cat_id // 1_000_000)
        if mapped is not None:
            return mapped
    return None


class Knaben(HttpxProviderBase):
    INFO = ProviderInfo(
        id="knaben",
        name="Knaben",
        url="https://knaben.org",
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        body: dict[str, object] = {
            "search_type": "100%",
            "search_field": "title",
            "query": query,
            "order_by": "seeders",
            "order_direction": "desc",
            "size": _MAX_RESULTS,
            "hide_unsafe": True,
        }
        if category is not Category.ALL:
            body["categories"] = [
                k * 1_000_000 for k, v in _CATEGORY_GROUPS.items() if v is category
            ]

        data = await self.http.get_json(_API_URL, method="POST", json_body=body)
        hits = data.get("hits", []) if isinstance(data, dict) else []

        results: list[Torrent] = []
        for hit in hits:
            if hit.get("magnetUrl"):
                locator = MagnetUri(hit["magnetUrl"])
            elif hit.get("hash"):
                locator = InfoHash(hit["hash"].lower())
            else:
                continue
            results.append(
                self._torrent(
                    name=hit.get("title", ""),
                    size=format_size(hit.get("bytes")),
                    seeders=to_int(hit.get("seeders")),
                    peers=to_int(hit.get("peers")),
                    upload_date=format_iso(hit.get("date")),
                    category=map_category(hit.get("categoryId") or []),
                    description_page_url=hit.get("details") or self.base_url,
                    locator=locator,
                )
            )
        return results
