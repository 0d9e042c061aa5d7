"""Generic adapter for any Torznab-compatible indexer, configured by data."""

from __future__ import annotations

import httpx
import structlog

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import (
    ContentLocator,
    InfoHash,
    MagnetUri,
    Torrent,
    normalize_info_hash,
)
from torrentsearch.domain.providers.base import TorznabConfig
from torrentsearch.domain.providers.exceptions import ProviderError
from torrentsearch.infrastructure.common.converters import to_int
from torrentsearch.infrastructure.common.parsers import format_rfc822, format_size
from torrentsearch.infrastructure.providers.httpx_base import (
    ProviderHttp,
    build_torrent,
)
from torrentsearch.infrastructure.providers.rss import RssItem, parse_items

log = structlog.get_logger(__name__)

# Newznab standard ids that map to a local category on their own.
_STANDARD_SUBCATEGORIES: dict[int, Category] = {
    4050: Category.GAMES,
    5070: Category.ANIME,
    7020: Category.BOOKS,
}

# Newznab standard parent ids.
_STANDARD_PARENTS: dict[int, Category] = {
    1000: Category.GAMES,
    2000: Category.MOVIES,
    3000: Category.MUSIC,
    4000: Category.APPS,
    5000: Category.SERIES,
    6000: Category.PORN,
    7000: Category.BOOKS,
    8000: Category.OTHER,
}


def _standard_category(cat_id: int) -> Category | None:
    if cat_id in _STANDARD_SUBCATEGORIES:
        return _STANDARD_SUBCATEGORIES[cat_id]
    return _STANDARD_PARENTS.get(cat_id - cat_id % 1000)


class TorznabProvider:
    """Searches one user-configured Torznab endpoint.

    Holds its ``TorznabConfig``; request construction and field mapping are
    driven entirely by that data.

    Request: ``GET {url}?t=search&q=<query>[&apikey=<key>][&cat=<ids>]``.
    Response: Torznab RSS; items with neither an info-hash nor a magnet
    URI are skipped.
    """

    def __init__(self, client: httpx.AsyncClient, config: TorznabConfig) -> None:
        self.config = config
        self.info = config.to_info()
        self.http = ProviderHttp(client, config.id)
        self._log = log.bind(provider=config.id)

    def request_category_ids(self, category: Category) -> list[int]:
        """Torznab ids to request for ``category`` (empty = no filter)."""
        if category is Category.ALL:
            return []
        mapped = sorted(k for k, v in self.config.category_map.items() if v is category)
        if mapped:
            return mapped
        ids = [k for k, v in _STANDARD_PARENTS.items() if v is category]
        ids += [k for k, v in _STANDARD_SUBCATEGORIES.items() if v is category]
        return sorted(ids)

    def map_category(self, cat_ids: list[int]) -> Category | None:
        """Resolve item category ids; config mapping wins over the standard."""
        for cat_id in cat_ids:
            if cat_id in self.config.category_map:
                return self.config.category_map[cat_id]
        for cat_id in cat_ids:
            mapped = _standard_category(cat_id)
            if mapped is not None:
                return mapped
        if cat_ids:
            return Category.OTHER
        if self.config.category is not Category.ALL:
            return self.config.category
        return None

    async def search(self, query: str, category: Category) -> list[Torrent]:
        params: dict[str, str] = {"t": "search", "q": query}
        if self.config.api_key:
            params["apikey"] = self.config.api_key
        cat_ids = self.request_category_ids(category)
        if cat_ids:
            params["cat"] = ",".join(str(c) for c in cat_ids)

        root = await self.http.get_xml(self.config.url, params=params)
        if root.tag == "error":
            code = root.get("code", "?")
            description = root.get("description", "unknown error")
            self._log.warning(
                "torznab_error_response", code=code, description=description
            )
            raise ProviderError(self.info.id, f"torznab error {code}: {description}")

        results: list[Torrent] = []
        skipped = 0
        for item in parse_items(root):
            torrent = self._build_torrent(item)
            if torrent is None:
                skipped += 1
                continue
            results.append(torrent)

        self._log.debug(
            "torznab_search", query=query, count=len(results), skipped=skipped
        )
        return results

    def _locator(self, item: RssItem) -> ContentLocator | None:
        magnet = item.attr("magneturl")
        if not magnet:
            for candidate in (item.link, item.enclosure_url, item.guid):
                if candidate.startswith("magnet:"):
                    magnet = candidate
                    break
        if magnet:
            return MagnetUri(magnet)
        info_hash = normalize_info_hash(item.attr("infohash"))
        if info_hash:
            return InfoHash(info_hash)
        return None

    def _build_torrent(self, item: RssItem) -> Torrent | None:
        if not item.title:
            return None
        locator = self._locator(item)
        if locator is None:
            return None

        seeders = to_int(item.attr("seeders"))
        if item.attr("leechers"):
            peers = to_int(item.attr("leechers"))
        else:
            peers = max(to_int(item.attr("peers")) - seeders, 0)

        cat_ids = [
            int(c) for c in item.attrs.get("category", []) if c.strip().isdigit()
        ]
        raw_size = item.size or item.attr("size") or item.enclosure_length
        page = item.comments or (item.guid if item.guid.startswith("http") else "")

        return build_torrent(
            self.info,
            name=item.title,
            size=format_size(raw_size),
            seeders=seeders,
            peers=peers,
            upload_date=format_rfc822(item.pub_date),
            category=self.map_category(cat_ids),
            description_page_url=page or item.link,
            locator=locator,
        )
