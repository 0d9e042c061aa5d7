"""Live values as async iterators.

A ``StateStream`` holds one current value and wakes every observer when it
changes. ``combine`` joins several live sequences into one whose values are
a pure function of the latest value of each input, recomputed whenever any
input changes. Observers are conflated: a slow consumer sees the newest
value, not every intermediate one.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")

_MISSING: Any = object()


class StateStream(Generic[T]):
    """Current value plus change notification.

    Not thread-safe; safe for single-threaded asyncio (``emit`` never
    suspends).
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._version = 0
        self._changed = asyncio.Event()

    @property
    def value(self) -> T:
        return self._value

    def emit(self, value: T) -> None:
        """Replace the current value; equal values are ignored."""
        if value == self._value:
            return
        self._value = value
        self._version += 1
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    async def observe(self) -> AsyncIterator[T]:
        """Yield the current value, then every later distinct value."""
        seen = -1
        while True:
            if self._version != seen:
                seen = self._version
                yield self._value
                continue
            await self._changed.wait()


async def combine(
    *sources: AsyncIterator[Any],
    transform: Callable[..., R],
) -> AsyncIterator[R]:
    """Combine live sequences into one.

    Emits ``transform(*latest)`` once every source produced a value and
    again whenever one of them changes. Consecutive equal results are
    dropped. Ends when all sources end; an error in any source is raised
    to the consumer.
    """
    latest: list[Any] = [_MISSING] * len(sources)
    queue: asyncio.Queue[tuple[int, Any, BaseException | None]] = asyncio.Queue()
    done = 0

    async def _pump(index: int, source: AsyncIterator[Any]) -> None:
        try:
            async for value in source:
                await queue.put((index, value, None))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            await queue.put((index, _MISSING, e))
            return
        await queue.put((index, _MISSING, None))

    tasks = [asyncio.create_task(_pump(i, s)) for i, s in enumerate(sources)]
    last: Any = _MISSING
    try:
        while done < len(sources):
            index, value, error = await queue.get()
            if error is not None:
                raise error
            if value is _MISSING:
                done += 1
                continue
            latest[index] = value
            if any(v is _MISSING for v in latest):
                continue
            result = transform(*latest)
            if result == last:
                continue
            last = result
            yield result
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        for source in sources:
            aclose = getattr(source, "aclose", None)
            if aclose is not None:
                await aclose()


async def map_stream(
    source: AsyncIterator[T], fn: Callable[[T], R]
) -> AsyncIterator[R]:
    """Apply ``fn`` to every value, dropping consecutive duplicates."""
    last: Any = _MISSING
    async with aclosing(source) as it:
        async for value in it:
            result = fn(value)
            if result == last:
                continue
            last = result
            yield result


async def first(source: AsyncIterator[T]) -> T:
    """Return the first value of a live sequence and close it."""
    async with aclosing(source) as it:
        async for value in it:
            return value
    raise LookupError("stream ended without a value")
