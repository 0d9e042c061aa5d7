"""Tests for StateStream, combine, map_stream and first."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import pytest

from torrentsearch.application.reactive import StateStream, combine, first, map_stream


async def _values(*values: Any) -> AsyncIterator[Any]:
    for value in values:
        yield value


class TestStateStream:
    async def test_observe_yields_current_value_first(self) -> None:
        stream = StateStream(1)
        it = stream.observe()
        assert await anext(it) == 1
        await it.aclose()

    async def test_equal_values_are_not_emitted(self) -> None:
        stream = StateStream(1)
        it = stream.observe()
        await anext(it)
        stream.emit(1)
        stream.emit(2)
        assert await anext(it) == 2
        await it.aclose()

    async def test_slow_observer_sees_latest_value(self) -> None:
        stream = StateStream("a")
        it = stream.observe()
        await anext(it)
        stream.emit("b")
        stream.emit("c")
        assert await anext(it) == "c"
        await it.aclose()

    async def test_waiting_observer_is_woken(self) -> None:
        stream = StateStream(0)
        it = stream.observe()
        await anext(it)

        async def _next() -> int:
            return await anext(it)

        pending = asyncio.create_task(_next())
        await asyncio.sleep(0)
        assert not pending.done()

        stream.emit(5)
        assert await asyncio.wait_for(pending, timeout=1) == 5
        await it.aclose()

    async def test_every_observer_is_notified(self) -> None:
        stream = StateStream(0)
        first_it, second_it = stream.observe(), stream.observe()
        await anext(first_it)
        await anext(second_it)
        stream.emit(1)
        assert await anext(first_it) == 1
        assert await anext(second_it) == 1
        await first_it.aclose()
        await second_it.aclose()

    def test_value_property(self) -> None:
        stream = StateStream([1])
        stream.emit([1, 2])
        assert stream.value == [1, 2]


class TestCombine:
    async def test_emits_once_every_source_has_a_value(self) -> None:
        a, b = StateStream(1), StateStream("x")
        it = combine(a.observe(), b.observe(), transform=lambda n, s: f"{n}{s}")
        assert await anext(it) == "1x"
        await it.aclose()

    async def test_recomputes_when_any_source_changes(self) -> None:
        a, b = StateStream(1), StateStream("x")
        it = combine(a.observe(), b.observe(), transform=lambda n, s: f"{n}{s}")
        await anext(it)

        a.emit(2)
        assert await asyncio.wait_for(anext(it), timeout=1) == "2x"
        b.emit("y")
        assert await asyncio.wait_for(anext(it), timeout=1) == "2y"
        await it.aclose()

    async def test_consecutive_equal_results_are_dropped(self) -> None:
        a = StateStream(1)
        it = combine(a.observe(), transform=lambda n: n > 0)
        assert await anext(it) is True

        a.emit(2)
        a.emit(-1)
        assert await asyncio.wait_for(anext(it), timeout=1) is False
        await it.aclose()

    async def test_ends_when_all_sources_end(self) -> None:
        results = [
            r
            async for r in combine(
                _values(1, 2), _values(10), transform=lambda x, y: x + y
            )
        ]
        assert results
        assert results[-1] == 12

    async def test_source_error_is_raised_to_consumer(self) -> None:
        async def broken() -> AsyncIterator[int]:
            yield 1
            raise RuntimeError("source failed")

        with pytest.raises(RuntimeError, match="source failed"):
            async for _ in combine(broken(), _values(2), transform=lambda x, y: x):
                pass

    async def test_closing_closes_the_sources(self) -> None:
        closed: list[bool] = []

        async def tracked() -> AsyncIterator[int]:
            try:
                yield 1
                await asyncio.sleep(10)
            finally:
                closed.append(True)

        it = combine(tracked(), transform=lambda v: v)
        assert await anext(it) == 1
        await it.aclose()
        assert closed == [True]


class TestMapStream:
    async def test_maps_and_drops_consecutive_duplicates(self) -> None:
        results = [r async for r in map_stream(_values(1, 3, 4, 6, 7), lambda v: v % 2)]
        assert results == [1, 0, 1]

    async def test_follows_live_stream(self) -> None:
        stream = StateStream([1, 2])
        it = map_stream(stream.observe(), len)
        assert await anext(it) == 2
        stream.emit([1, 2, 3])
        assert await asyncio.wait_for(anext(it), timeout=1) == 3
        await it.aclose()


class TestFirst:
    async def test_returns_current_value(self) -> None:
        assert await first(StateStream("now").observe()) == "now"

    async def test_empty_stream_raises(self) -> None:
        with pytest.raises(LookupError):
            await first(_values())
