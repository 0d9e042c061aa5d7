"""Tokyo Toshokan RSS feed."""

from __future__ import annotations

import re

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import MagnetUri, Torrent
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.common.parsers import format_rfc822
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase
from torrentsearch.infrastructure.providers.rss import parse_items

_MAGNET_RE = re.compile(r'href="(magnet:\?[^"]+)"')
_SIZE_RE = re.compile(r"Size:\s*([\d.]+\s*[KMGT]?i?B)", re.IGNORECASE)

# ``type`` parameter: 1 = anime
_ANIME_TYPE = "1"


class TokyoToshokan(HttpxProviderBase):
    """The feed carries no swarm counts; seeders and peers are reported as 0."""

    INFO = ProviderInfo(
        id="tokyotoshokan",
        name="TokyoToshokan",
        url="https://www.tokyotosho.info",
        specialized_category=Category.ANIME,
    )

    async def search(self, query: str, category: Category) -> list[Torrent]:
        root = await self.http.get_xml(
            f"{self.base_url}/rss.php",
            params={"terms": query, "type": _ANIME_TYPE},
        )

        results: list[Torrent] = []
        for item in parse_items(root):
            magnet = _MAGNET_RE.search(item.description)
            if not item.title or not magnet:
                continue
            size = _SIZE_RE.search(item.description)
            results.append(
                self._torrent(
                    name=item.title,
                    size=size.group(1) if size else "",
                    seeders=0,
                    peers=0,
                    upload_date=format_rfc822(item.pub_date),
                    category=Category.ANIME,
                    description_page_url=item.guid or item.link,
                    locator=MagnetUri(magnet.group(1).replace("&amp;", "&")),
                )
            )
        return results
