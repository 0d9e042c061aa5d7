"""HTTP plumbing shared by provider adapters.

Every transport, status and payload error is translated into a
``ProviderError`` carrying the provider id; adapters never leak raw
``httpx``/parser exceptions to the orchestrator.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any
from xml.etree import ElementTree

import httpx
import structlog

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import ContentLocator, Torrent
from torrentsearch.domain.providers.base import ProviderId, ProviderInfo
from torrentsearch.domain.providers.exceptions import (
    ProviderError,
    ProviderTimeoutError,
)
from torrentsearch.infrastructure.common.html_selectors import extract_attr, parse_html

log = structlog.get_logger(__name__)

# Parallel description-page fetches per search.
_DETAIL_CONCURRENCY = 5


class ProviderHttp:
    """Request helpers bound to one provider id.

    The ``httpx.AsyncClient`` is shared and owned by the composition root;
    this helper never closes it.
    """

    def __init__(self, client: httpx.AsyncClient, provider_id: ProviderId) -> None:
        self.client = client
        self.provider_id = provider_id
        self._log = log.bind(provider=provider_id)

    async def fetch(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        method: str = "GET",
        json_body: Any = None,
        context: str = "search",
    ) -> httpx.Response:
        """Perform one request; raise ``ProviderError`` on any failure."""
        try:
            resp = await self.client.request(
                method, url, params=params, json=json_body
            )
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            self._log.warning("provider_http_timeout", url=url, context=context)
            raise ProviderTimeoutError(self.provider_id, "request timed out") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            self._log.warning(
                "provider_http_status", url=url, status=status, context=context
            )
            raise ProviderError(self.provider_id, f"HTTP {status}") from e
        except httpx.HTTPError as e:
            self._log.warning(
                "provider_http_error", url=url, error=str(e), context=context
            )
            raise ProviderError(
                self.provider_id, f"request failed: {type(e).__name__}"
            ) from e
        return resp

    async def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        method: str = "GET",
        json_body: Any = None,
        context: str = "search",
    ) -> Any:
        resp = await self.fetch(
            url, params=params, method=method, json_body=json_body, context=context
        )
        try:
            return resp.json()
        except ValueError as e:
            self._log.warning("provider_invalid_json", url=url, context=context)
            raise ProviderError(self.provider_id, "invalid JSON response") from e

    async def get_text(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        context: str = "search",
    ) -> str:
        resp = await self.fetch(url, params=params, context=context)
        return resp.text

    async def get_xml(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        context: str = "search",
    ) -> ElementTree.Element:
        text = await self.get_text(url, params=params, context=context)
        try:
            return ElementTree.fromstring(text)
        except ElementTree.ParseError as e:
            self._log.warning("provider_invalid_xml", url=url, context=context)
            raise ProviderError(self.provider_id, "invalid XML response") from e

    async def _fetch_detail_magnet(
        self, url: str, sem: asyncio.Semaphore
    ) -> str | None:
        """Fetch a description page and return its first magnet link.

        A failing detail page drops only that row, never the whole search.
        """
        async with sem:
            try:
                html = await self.get_text(url, context="detail")
            except ProviderError as e:
                self._log.debug("provider_detail_failed", url=url, error=e.message)
                return None
        return extract_attr(parse_html(html), 'a[href^="magnet:"]', "href") or None

    async def resolve_magnets(self, urls: list[str]) -> list[str | None]:
        """Magnet link per description page, in input order."""
        sem = asyncio.Semaphore(_DETAIL_CONCURRENCY)
        return list(
            await asyncio.gather(*(self._fetch_detail_magnet(u, sem) for u in urls))
        )


def build_torrent(
    info: ProviderInfo,
    *,
    name: str,
    size: str,
    seeders: int,
    peers: int,
    upload_date: str,
    category: Category | None,
    description_page_url: str,
    locator: ContentLocator,
) -> Torrent:
    """Build a ``Torrent`` attributed to ``info``."""
    return Torrent(
        name=name,
        size=size,
        seeders=max(seeders, 0),
        peers=max(peers, 0),
        provider_id=info.id,
        provider_name=info.name,
        upload_date=upload_date,
        category=category,
        description_page_url=description_page_url,
        locator=locator,
    )


class HttpxProviderBase:
    """Common shape of the built-in adapters.

    Subclasses set ``INFO`` and implement ``search()``; requests go through
    the composed ``ProviderHttp`` helper.
    """

    INFO: ProviderInfo

    def __init__(
        self, client: httpx.AsyncClient, info: ProviderInfo | None = None
    ) -> None:
        self.info = info if info is not None else self.INFO
        self.http = ProviderHttp(client, self.info.id)

    @property
    def base_url(self) -> str:
        return self.info.url

    async def search(self, query: str, category: Category) -> list[Torrent]:
        raise NotImplementedError

    def _torrent(self, **fields: Any) -> Torrent:
        return build_torrent(self.info, **fields)
