"""Tests for the shared provider HTTP helper and adapter base class."""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import InfoHash
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.domain.providers.exceptions import (
    ProviderError,
    ProviderTimeoutError,
)
from torrentsearch.infrastructure.providers.httpx_base import (
    HttpxProviderBase,
    ProviderHttp,
)

_URL = "https://tracker.example/api"
_HASH = "a" * 40

# ---------------------------------------------------------------------------
# Concrete test subclass
# ---------------------------------------------------------------------------


class _TestProvider(HttpxProviderBase):
    INFO = ProviderInfo(id="test", name="Test", url="https://tracker.example")

    async def search(self, query: str, category: Category) -> list:
        return []


# ---------------------------------------------------------------------------
# ProviderHttp
# ---------------------------------------------------------------------------


class TestFetch:
    @respx.mock
    async def test_returns_response_on_success(
        self, http_client: httpx.AsyncClient
    ) -> None:
        route = respx.get(_URL).respond(200, text="ok")
        http = ProviderHttp(http_client, "test")

        resp = await http.fetch(_URL, params={"q": "ubuntu"})

        assert resp.text == "ok"
        assert route.calls.last.request.url.params["q"] == "ubuntu"

    @respx.mock
    async def test_status_error_names_the_code(
        self, http_client: httpx.AsyncClient
    ) -> None:
        respx.get(_URL).respond(503)

        with pytest.raises(ProviderError) as exc_info:
            await ProviderHttp(http_client, "test").fetch(_URL)

        assert exc_info.value.provider_id == "test"
        assert exc_info.value.message == "HTTP 503"

    @respx.mock
    async def test_timeout_becomes_provider_timeout(
        self, http_client: httpx.AsyncClient
    ) -> None:
        respx.get(_URL).mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(ProviderTimeoutError):
            await ProviderHttp(http_client, "test").fetch(_URL)

    @respx.mock
    async def test_transport_error_is_wrapped(
        self, http_client: httpx.AsyncClient
    ) -> None:
        respx.get(_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ProviderError, match="request failed: ConnectError"):
            await ProviderHttp(http_client, "test").fetch(_URL)

    @respx.mock
    async def test_post_sends_json_body(self, http_client: httpx.AsyncClient) -> None:
        route = respx.post(_URL).respond(200, json={"ok": True})

        data = await ProviderHttp(http_client, "test").get_json(
            _URL, method="POST", json_body={"query": "x"}
        )

        assert data == {"ok": True}
        assert json.loads(route.calls.last.request.content) == {"query": "x"}


class TestPayloadParsing:
    @respx.mock
    async def test_invalid_json(self, http_client: httpx.AsyncClient) -> None:
        respx.get(_URL).respond(200, text="<html>not json</html>")

        with pytest.raises(ProviderError, match="invalid JSON"):
            await ProviderHttp(http_client, "test").get_json(_URL)

    @respx.mock
    async def test_xml_root_returned(self, http_client: httpx.AsyncClient) -> None:
        respx.get(_URL).respond(200, text="<rss><channel/></rss>")

        root = await ProviderHttp(http_client, "test").get_xml(_URL)

        assert root.tag == "rss"

    @respx.mock
    async def test_invalid_xml(self, http_client: httpx.AsyncClient) -> None:
        respx.get(_URL).respond(200, text="<rss><channel>")

        with pytest.raises(ProviderError, match="invalid XML"):
            await ProviderHttp(http_client, "test").get_xml(_URL)


class TestResolveMagnets:
    @respx.mock
    async def test_magnets_in_input_order(
        self, http_client: httpx.AsyncClient
    ) -> None:
        magnet = f"magnet:?xt=urn:btih:{_HASH}"
        respx.get("https://tracker.example/t/1").respond(
            200, text=f'<a href="/dl">dl</a><a href="{magnet}">magnet</a>'
        )
        respx.get("https://tracker.example/t/2").respond(200, text="<p>none</p>")
        respx.get("https://tracker.example/t/3").respond(404)

        magnets = await ProviderHttp(http_client, "test").resolve_magnets(
            [
                "https://tracker.example/t/1",
                "https://tracker.example/t/2",
                "https://tracker.example/t/3",
            ]
        )

        assert magnets == [magnet, None, None]


# ---------------------------------------------------------------------------
# HttpxProviderBase
# ---------------------------------------------------------------------------


class TestProviderBase:
    def test_info_and_base_url(self, http_client: httpx.AsyncClient) -> None:
        provider = _TestProvider(http_client)
        assert provider.info.id == "test"
        assert provider.base_url == "https://tracker.example"
        assert provider.http.provider_id == "test"

    def test_info_override(self, http_client: httpx.AsyncClient) -> None:
        mirror = ProviderInfo(id="mirror", name="Mirror", url="https://m.example")
        provider = _TestProvider(http_client, mirror)
        assert provider.base_url == "https://m.example"
        assert provider.http.provider_id == "mirror"

    def test_torrent_is_attributed_and_clamped(
        self, http_client: httpx.AsyncClient
    ) -> None:
        torrent = _TestProvider(http_client)._torrent(
            name="Ubuntu",
            size="1 GB",
            seeders=-1,
            peers=3,
            upload_date="",
            category=Category.APPS,
            description_page_url="https://tracker.example/t/1",
            locator=InfoHash(_HASH),
        )
        assert torrent.provider_id == "test"
        assert torrent.provider_name == "Test"
        assert torrent.seeders == 0
        assert torrent.peers == 3
