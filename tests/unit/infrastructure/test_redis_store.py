"""Tests for RedisStore with a mocked redis.asyncio client."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from torrentsearch.domain.providers.exceptions import StorageError
from torrentsearch.infrastructure.storage.redis_store import RedisStore

_FROM_URL = "torrentsearch.infrastructure.storage.redis_store.Redis.from_url"


async def _aiter(values):
    for value in values:
        yield value


@pytest.fixture()
def redis_client() -> MagicMock:
    client = MagicMock()
    client.ping = AsyncMock(return_value=True)
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.exists = AsyncMock(return_value=0)
    client.aclose = AsyncMock()
    return client


@pytest.fixture()
async def redis_store(redis_client: MagicMock) -> RedisStore:
    with patch(_FROM_URL, return_value=redis_client):
        async with RedisStore(url="redis://cache:6379/1") as store:
            yield store


class TestLifecycle:
    async def test_connect_pings(self, redis_client: MagicMock) -> None:
        with patch(_FROM_URL, return_value=redis_client) as from_url:
            async with RedisStore(url="redis://cache:6379/1"):
                pass

        from_url.assert_called_once_with("redis://cache:6379/1", decode_responses=True)
        redis_client.ping.assert_awaited_once()
        redis_client.aclose.assert_awaited_once()

    async def test_unreachable_server_raises_storage_error(
        self, redis_client: MagicMock
    ) -> None:
        redis_client.ping.side_effect = RedisConnectionError("refused")

        with patch(_FROM_URL, return_value=redis_client):
            with pytest.raises(StorageError, match="cannot connect"):
                async with RedisStore():
                    pass

        redis_client.aclose.assert_awaited_once()

    async def test_use_before_open_raises(self) -> None:
        with pytest.raises(StorageError, match="not initialized"):
            await RedisStore().get("k")


class TestOperations:
    async def test_set_writes_prefixed_json(
        self, redis_store: RedisStore, redis_client: MagicMock
    ) -> None:
        await redis_store.set("pref:x", {"a": 1})

        key, packed = redis_client.set.await_args.args
        assert key == "torrentsearch:pref:x"
        assert json.loads(packed) == {"a": 1}

    async def test_get_decodes_json(
        self, redis_store: RedisStore, redis_client: MagicMock
    ) -> None:
        redis_client.get.return_value = '["a", "b"]'
        assert await redis_store.get("k") == ["a", "b"]
        redis_client.get.assert_awaited_with("torrentsearch:k")

    async def test_get_missing(self, redis_store: RedisStore) -> None:
        assert await redis_store.get("k") is None

    async def test_corrupt_value_raises(
        self, redis_store: RedisStore, redis_client: MagicMock
    ) -> None:
        redis_client.get.return_value = "{not json"
        with pytest.raises(StorageError, match="corrupt"):
            await redis_store.get("k")

    async def test_backend_error_raises(
        self, redis_store: RedisStore, redis_client: MagicMock
    ) -> None:
        redis_client.set.side_effect = RedisConnectionError("gone")
        with pytest.raises(StorageError, match="write failed"):
            await redis_store.set("k", 1)

    async def test_delete_and_exists(
        self, redis_store: RedisStore, redis_client: MagicMock
    ) -> None:
        assert await redis_store.delete("k") is True
        redis_client.delete.return_value = 0
        assert await redis_store.delete("k") is False
        assert await redis_store.exists("k") is False

    async def test_clear_only_touches_prefixed_keys(
        self, redis_store: RedisStore, redis_client: MagicMock
    ) -> None:
        redis_client.scan_iter = MagicMock(
            return_value=_aiter(["torrentsearch:a", "torrentsearch:b"])
        )

        await redis_store.clear()

        redis_client.scan_iter.assert_called_once_with(match="torrentsearch:*")
        redis_client.delete.assert_awaited_once_with(
            "torrentsearch:a", "torrentsearch:b"
        )
