"""Concurrent search across every enabled provider.

Flow:
    1. Pick the working subset (enabled ∩ catalogue, category match)
    2. Fan out one task per provider inside a TaskGroup, each under its
       own timeout; failures become ``ProviderFailure`` notices
    3. After the barrier: merge in working-subset order, deduplicate,
       post-filter, stable-sort, cap
"""

from __future__ import annotations

import asyncio
import re
import time
from collections.abc import AsyncIterator, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime

import structlog

from torrentsearch.application.enablement import EnablementStore
from torrentsearch.application.preferences import (
    decode_bool,
    decode_max_num_results,
    decode_sort_criteria,
    decode_sort_order,
)
from torrentsearch.domain.entities.category import Category, is_nsfw_or_unknown
from torrentsearch.domain.entities.settings import (
    ENABLE_NSFW_MODE_KEY,
    HIDE_ZERO_SEEDERS_KEY,
    MAX_NUM_RESULTS_KEY,
    SORT_CRITERIA_KEY,
    SORT_ORDER_KEY,
    UNLIMITED,
    MaxNumResults,
)
from torrentsearch.domain.entities.sorting import SortCriteria, SortOptions, SortOrder
from torrentsearch.domain.entities.torrent import Torrent
from torrentsearch.domain.ports.preference_store import PreferenceStorePort
from torrentsearch.domain.ports.provider_catalogue import ProviderCataloguePort
from torrentsearch.domain.providers.base import ProviderId, SearchProviderProtocol
from torrentsearch.domain.providers.exceptions import ProviderError, StorageError

log = structlog.get_logger(__name__)

DEFAULT_PROVIDER_TIMEOUT = 15.0


@dataclass(frozen=True)
class ProviderFailure:
    """Non-fatal notice: one provider contributed nothing to the merge."""

    provider_id: ProviderId
    provider_name: str
    reason: str


@dataclass(frozen=True)
class SearchOutcome:
    results: list[Torrent] = field(default_factory=list)
    failures: list[ProviderFailure] = field(default_factory=list)


@dataclass(frozen=True)
class SearchPreferences:
    """Snapshot of the preferences that shape one search run."""

    hide_results_with_zero_seeders: bool = False
    enable_nsfw_mode: bool = False
    sort_options: SortOptions = SortOptions()
    max_num_results: MaxNumResults = UNLIMITED


# ---------------------------------------------------------------------------
# Pure pipeline steps
# ---------------------------------------------------------------------------


def select_providers(
    providers: Sequence[tuple[ProviderId, SearchProviderProtocol]],
    enabled: Iterable[ProviderId],
    category: Category,
) -> list[tuple[ProviderId, SearchProviderProtocol]]:
    """Providers to query, in catalogue order.

    A provider qualifies when it is enabled and either the search is for
    ``ALL``, or it serves every category, or it specialises in ``category``.
    """
    enabled_ids = frozenset(enabled)
    selected = []
    for provider_id, provider in providers:
        if provider_id not in enabled_ids:
            continue
        specialized = provider.info.specialized_category
        if (
            category is Category.ALL
            or specialized is Category.ALL
            or specialized is category
        ):
            selected.append((provider_id, provider))
    return selected


def deduplicate(torrents: Iterable[Torrent]) -> list[Torrent]:
    """Drop later duplicates; the first-seen entry wins.

    Entries are the same when they share an info-hash, or, when either of
    them lacks one, the same ``(name, provider_id)`` pair.
    """
    seen_hashes: set[str] = set()
    # (name, provider_id) of every kept entry / of kept entries without a hash
    seen_keys: set[tuple[str, str]] = set()
    hashless_keys: set[tuple[str, str]] = set()
    unique: list[Torrent] = []
    for torrent in torrents:
        info_hash = torrent.info_hash()
        key = (torrent.name, torrent.provider_id)
        if info_hash is not None:
            if info_hash in seen_hashes or key in hashless_keys:
                continue
            seen_hashes.add(info_hash)
        else:
            if key in seen_keys:
                continue
            hashless_keys.add(key)
        seen_keys.add(key)
        unique.append(torrent)
    return unique


def filter_results(
    torrents: Iterable[Torrent],
    *,
    hide_results_with_zero_seeders: bool,
    enable_nsfw_mode: bool,
) -> list[Torrent]:
    """Zero-seeder filter first, then the NSFW/unknown-category filter."""
    results = list(torrents)
    if hide_results_with_zero_seeders:
        results = [t for t in results if t.seeders > 0]
    if not enable_nsfw_mode:
        results = [t for t in results if not is_nsfw_or_unknown(t.category)]
    return results


_RELATIVE_RE = re.compile(
    r"^(?P<n>\d+|an?|one)\s+(?P<unit>second|minute|min|hour|day|week|month|year)s?"
    r"\s+ago$",
    re.IGNORECASE,
)

_UNIT_SECONDS = {
    "second": 1,
    "minute": 60,
    "min": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "month": 30 * 86400,
    "year": 365 * 86400,
}

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%m-%d %Y",
)


def parse_upload_date(text: str, now: datetime | None = None) -> float | None:
    """Turn a display upload date into a unix timestamp, if possible.

    Understands unix timestamps, ISO dates, common display formats, RFC 822
    and relative phrases ("3 days ago", "Yesterday"). Returns ``None`` for
    anything else.
    """
    value = text.strip()
    if not value:
        return None
    if value.isdigit():
        return float(value)

    now = now or datetime.now(timezone.utc)
    lowered = value.lower()
    if lowered in ("today", "just now"):
        return now.timestamp()
    if lowered == "yesterday":
        return (now - timedelta(days=1)).timestamp()

    relative = _RELATIVE_RE.match(value)
    if relative:
        raw_n = relative.group("n").lower()
        n = int(raw_n) if raw_n.isdigit() else 1
        seconds = n * _UNIT_SECONDS[relative.group("unit").lower()]
        return now.timestamp() - seconds

    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        dt = None
    if dt is None:
        for fmt in _DATE_FORMATS:
            try:
                dt = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue
    if dt is None:
        try:
            dt = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def _upload_date_key(torrent: Torrent, now: datetime) -> tuple[int, float, str]:
    ts = parse_upload_date(torrent.upload_date, now)
    if ts is None:
        return (0, 0.0, torrent.upload_date)
    return (1, ts, "")


def sort_results(
    torrents: Iterable[Torrent], options: SortOptions
) -> list[Torrent]:
    """Stable sort by the active criteria; ``DEFAULT`` keeps merge order.

    Upload dates that cannot be parsed compare lexicographically among
    themselves and rank below every parsed date.
    """
    results = list(torrents)
    reverse = options.order is SortOrder.DESCENDING
    criteria = options.criteria
    if criteria is SortCriteria.DEFAULT:
        return results
    if criteria is SortCriteria.NAME:
        results.sort(key=lambda t: t.name.casefold(), reverse=reverse)
    elif criteria is SortCriteria.SIZE:
        results.sort(key=lambda t: t.size_in_bytes(), reverse=reverse)
    elif criteria is SortCriteria.SEEDERS:
        results.sort(key=lambda t: t.seeders, reverse=reverse)
    elif criteria is SortCriteria.PEERS:
        results.sort(key=lambda t: t.peers, reverse=reverse)
    elif criteria is SortCriteria.UPLOAD_DATE:
        now = datetime.now(timezone.utc)
        results.sort(key=lambda t: _upload_date_key(t, now), reverse=reverse)
    return results


def limit_results(torrents: list[Torrent], cap: MaxNumResults) -> list[Torrent]:
    if cap.is_unlimited:
        return torrents
    return torrents[: cap.n]


# ---------------------------------------------------------------------------
# Use case
# ---------------------------------------------------------------------------


class SearchTorrentsUseCase:
    """Runs one search across the enabled providers.

    Provider failures and timeouts never abort a run; they are reported as
    ``ProviderFailure`` notices next to the merged results. Cancelling
    ``execute`` cancels every outstanding provider task.
    """

    def __init__(
        self,
        catalogue: ProviderCataloguePort,
        enablement: EnablementStore,
        preferences: PreferenceStorePort,
        provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ) -> None:
        self.catalogue = catalogue
        self.enablement = enablement
        self.preferences = preferences
        self.provider_timeout = provider_timeout

    async def load_preferences(self) -> SearchPreferences:
        """Read the current preferences; storage failures yield defaults."""
        try:
            return SearchPreferences(
                hide_results_with_zero_seeders=decode_bool(
                    await self.preferences.get(HIDE_ZERO_SEEDERS_KEY)
                ),
                enable_nsfw_mode=decode_bool(
                    await self.preferences.get(ENABLE_NSFW_MODE_KEY)
                ),
                sort_options=SortOptions(
                    criteria=decode_sort_criteria(
                        await self.preferences.get(SORT_CRITERIA_KEY)
                    ),
                    order=decode_sort_order(await self.preferences.get(SORT_ORDER_KEY)),
                ),
                max_num_results=decode_max_num_results(
                    await self.preferences.get(MAX_NUM_RESULTS_KEY)
                ),
            )
        except StorageError as e:
            log.warning("search_preferences_read_failed", error=str(e))
            return SearchPreferences()

    async def execute(
        self,
        query: str,
        category: Category = Category.ALL,
        *,
        preferences: SearchPreferences | None = None,
    ) -> SearchOutcome:
        """Search all enabled providers and return the merged outcome.

        A blank query returns an empty outcome without touching providers.
        """
        query = query.strip()
        if not query:
            return SearchOutcome()

        started = time.perf_counter()
        prefs = preferences or await self.load_preferences()
        enabled = await self.enablement.current()
        providers = await self.catalogue.instantiate()
        working = select_providers(providers, enabled, category)

        log.info(
            "search_started",
            query=query,
            category=category.name,
            providers=[pid for pid, _ in working],
        )

        # One slot per provider; each task writes only its own slot.
        slots: list[list[Torrent] | ProviderFailure | None] = [None] * len(working)

        async def _run(index: int, provider: SearchProviderProtocol) -> None:
            slots[index] = await self._search_one(provider, query, category)

        async with asyncio.TaskGroup() as tg:
            for index, (_, provider) in enumerate(working):
                tg.create_task(_run(index, provider))

        merged: list[Torrent] = []
        failures: list[ProviderFailure] = []
        for slot in slots:
            if isinstance(slot, ProviderFailure):
                failures.append(slot)
            elif slot:
                merged.extend(slot)

        results = deduplicate(merged)
        results = filter_results(
            results,
            hide_results_with_zero_seeders=prefs.hide_results_with_zero_seeders,
            enable_nsfw_mode=prefs.enable_nsfw_mode,
        )
        results = sort_results(results, prefs.sort_options)
        results = limit_results(results, prefs.max_num_results)

        log.info(
            "search_completed",
            query=query,
            merged=len(merged),
            results=len(results),
            failed=[f.provider_id for f in failures],
            duration_ms=round((time.perf_counter() - started) * 1000),
        )
        return SearchOutcome(results=results, failures=failures)

    async def stream(
        self, query: str, category: Category = Category.ALL
    ) -> AsyncIterator[SearchOutcome]:
        """Yield exactly one ``SearchOutcome``, after every provider settled."""
        yield await self.execute(query, category)

    async def _search_one(
        self,
        provider: SearchProviderProtocol,
        query: str,
        category: Category,
    ) -> list[Torrent] | ProviderFailure:
        info = provider.info
        try:
            async with asyncio.timeout(self.provider_timeout):
                results = await provider.search(query, category)
        except TimeoutError:
            log.warning(
                "provider_search_timeout",
                provider=info.id,
                timeout=self.provider_timeout,
            )
            return ProviderFailure(
                info.id, info.name, f"timed out after {self.provider_timeout:g}s"
            )
        except ProviderError as e:
            log.warning("provider_search_failed", provider=info.id, error=e.message)
            return ProviderFailure(info.id, info.name, e.message)
        except Exception as e:
            log.warning(
                "provider_search_crashed",
                provider=info.id,
                error=str(e),
                exc_info=True,
            )
            wrapped = ProviderError(info.id, f"unexpected error: {type(e).__name__}")
            return ProviderFailure(info.id, info.name, wrapped.message)

        log.debug("provider_search_done", provider=info.id, count=len(results))
        return list(results)


class SearchSession:
    """Keeps at most one search in flight; a new run supersedes the old one.

    The superseded caller receives ``None`` instead of a partial outcome.
    """

    def __init__(self, use_case: SearchTorrentsUseCase) -> None:
        self._use_case = use_case
        self._current: asyncio.Task[SearchOutcome] | None = None

    @property
    def in_flight(self) -> bool:
        return self._current is not None and not self._current.done()

    def cancel(self) -> None:
        if self._current is not None and not self._current.done():
            self._current.cancel()

    async def run(
        self, query: str, category: Category = Category.ALL
    ) -> SearchOutcome | None:
        self.cancel()
        task = asyncio.create_task(self._use_case.execute(query, category))
        self._current = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                task.cancel()
                raise
            log.info("search_superseded", query=query)
            return None
        finally:
            if self._current is task:
                self._current = None
