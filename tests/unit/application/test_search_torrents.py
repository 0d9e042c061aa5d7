"""Tests for the search pipeline and SearchTorrentsUseCase."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from torrentsearch.application.use_cases.search_torrents import (
    ProviderFailure,
    SearchOutcome,
    SearchPreferences,
    SearchSession,
    deduplicate,
    filter_results,
    limit_results,
    parse_upload_date,
    select_providers,
    sort_results,
)
from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.settings import UNLIMITED, MaxNumResults
from torrentsearch.domain.entities.sorting import SortCriteria, SortOptions, SortOrder
from torrentsearch.domain.entities.torrent import InfoHash, MagnetUri
from torrentsearch.domain.providers.exceptions import ProviderError

_H1 = "1" * 40
_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Pure pipeline steps
# ---------------------------------------------------------------------------


class TestSelectProviders:
    def test_only_enabled_catalogue_members_are_selected(self, make_provider) -> None:
        providers = [(p.info.id, p) for p in map(make_provider, ["a", "b", "c"])]
        selected = select_providers(providers, {"a", "c", "ghost"}, Category.ALL)
        assert [pid for pid, _ in selected] == ["a", "c"]

    def test_category_selects_specialists_and_generalists(self, make_provider) -> None:
        providers = [
            (p.info.id, p)
            for p in (
                make_provider("anime", category=Category.ANIME),
                make_provider("movies", category=Category.MOVIES),
                make_provider("general", category=Category.ALL),
            )
        ]
        enabled = {"anime", "movies", "general"}
        selected = select_providers(providers, enabled, Category.ANIME)
        assert [pid for pid, _ in selected] == ["anime", "general"]

    def test_all_category_keeps_every_enabled_provider(self, make_provider) -> None:
        providers = [
            (p.info.id, p)
            for p in (
                make_provider("anime", category=Category.ANIME),
                make_provider("movies", category=Category.MOVIES),
            )
        ]
        selected = select_providers(providers, {"anime", "movies"}, Category.ALL)
        assert len(selected) == 2


class TestDeduplicate:
    def test_first_seen_entry_wins(self, make_torrent) -> None:
        a = make_torrent("From A", provider_id="a", locator=InfoHash(_H1))
        b = make_torrent("From B", provider_id="b", locator=InfoHash(_H1.upper()))
        assert deduplicate([a, b]) == [a]

    def test_magnet_and_bare_hash_are_the_same_content(self, make_torrent) -> None:
        a = make_torrent("x", provider_id="a", locator=InfoHash(_H1))
        b = make_torrent(
            "x", provider_id="b", locator=MagnetUri(f"magnet:?xt=urn:btih:{_H1}")
        )
        assert deduplicate([a, b]) == [a]

    def test_without_hash_name_and_provider_identify_an_entry(
        self, make_torrent
    ) -> None:
        no_hash = MagnetUri("magnet:?dn=release")
        a1 = make_torrent("release", provider_id="a", locator=no_hash)
        a2 = make_torrent("release", provider_id="a", locator=no_hash, seeders=99)
        b1 = make_torrent("release", provider_id="b", locator=no_hash)
        assert deduplicate([a1, a2, b1]) == [a1, b1]

    def test_hashed_and_hashless_entry_match_on_name_and_provider(
        self, make_torrent
    ) -> None:
        with_hash = make_torrent("release", provider_id="a", locator=InfoHash(_H1))
        without = make_torrent(
            "release", provider_id="a", locator=MagnetUri("magnet:?dn=release")
        )
        assert deduplicate([with_hash, without]) == [with_hash]
        assert deduplicate([without, with_hash]) == [without]

    def test_distinct_hashes_with_same_name_are_kept(self, make_torrent) -> None:
        older = make_torrent("release", provider_id="a", locator=InfoHash(_H1))
        second = make_torrent("release", provider_id="a", locator=InfoHash("2" * 40))
        assert deduplicate([older, second]) == [older, second]

    def test_is_idempotent(self, make_torrent) -> None:
        torrents = [
            make_torrent("one"),
            make_torrent("two"),
            make_torrent("one again", locator=InfoHash(_H1)),
            make_torrent("dup", locator=InfoHash(_H1)),
        ]
        once = deduplicate(torrents)
        assert deduplicate(once) == once


class TestFilterResults:
    def test_hides_zero_seeders(self, make_torrent) -> None:
        alive = make_torrent("alive", seeders=3)
        dead = make_torrent("dead", seeders=0)
        result = filter_results(
            [alive, dead], hide_results_with_zero_seeders=True, enable_nsfw_mode=True
        )
        assert result == [alive]

    def test_disabling_zero_seeder_filter_restores_input(self, make_torrent) -> None:
        torrents = [make_torrent("a", seeders=0), make_torrent("b", seeders=4)]
        hidden = filter_results(
            torrents, hide_results_with_zero_seeders=True, enable_nsfw_mode=True
        )
        shown = filter_results(
            torrents, hide_results_with_zero_seeders=False, enable_nsfw_mode=True
        )
        assert shown == torrents
        assert hidden == [t for t in torrents if t.seeders > 0]

    def test_nsfw_off_drops_porn_and_unknown_category(self, make_torrent) -> None:
        safe = make_torrent("safe", category=Category.MOVIES)
        porn = make_torrent("porn", category=Category.PORN)
        unknown = make_torrent("unknown", category=None)
        kwargs = {"hide_results_with_zero_seeders": False}
        assert filter_results(
            [safe, porn, unknown], enable_nsfw_mode=False, **kwargs
        ) == [safe]
        assert filter_results(
            [safe, porn, unknown], enable_nsfw_mode=True, **kwargs
        ) == [safe, porn, unknown]


class TestSortResults:
    def test_seeders_descending(self, make_torrent) -> None:
        torrents = [
            make_torrent("a", seeders=5),
            make_torrent("b", seeders=0),
            make_torrent("c", seeders=12),
        ]
        result = sort_results(
            torrents, SortOptions(SortCriteria.SEEDERS, SortOrder.DESCENDING)
        )
        assert [t.seeders for t in result] == [12, 5, 0]

    @pytest.mark.parametrize("order", list(SortOrder))
    def test_sort_is_stable(self, make_torrent, order: SortOrder) -> None:
        first = make_torrent("first", seeders=7)
        middle = make_torrent("middle", seeders=1)
        second = make_torrent("second", seeders=7)
        result = sort_results(
            [first, middle, second], SortOptions(SortCriteria.SEEDERS, order)
        )
        tied = [t for t in result if t.seeders == 7]
        assert tied == [first, second]

    def test_default_keeps_merge_order(self, make_torrent) -> None:
        torrents = [make_torrent("b", seeders=1), make_torrent("a", seeders=9)]
        result = sort_results(
            torrents, SortOptions(SortCriteria.DEFAULT, SortOrder.DESCENDING)
        )
        assert result == torrents

    def test_name_is_case_insensitive(self, make_torrent) -> None:
        torrents = [make_torrent("beta"), make_torrent("Alpha"), make_torrent("gamma")]
        result = sort_results(
            torrents, SortOptions(SortCriteria.NAME, SortOrder.ASCENDING)
        )
        assert [t.name for t in result] == ["Alpha", "beta", "gamma"]

    def test_size_compares_bytes_not_text(self, make_torrent) -> None:
        torrents = [
            make_torrent("big", size="1.2 GB"),
            make_torrent("small", size="900 MB"),
            make_torrent("tiny", size="12 KB"),
        ]
        result = sort_results(
            torrents, SortOptions(SortCriteria.SIZE, SortOrder.ASCENDING)
        )
        assert [t.name for t in result] == ["tiny", "small", "big"]

    def test_peers_ascending(self, make_torrent) -> None:
        torrents = [make_torrent("a", peers=3), make_torrent("b", peers=1)]
        result = sort_results(
            torrents, SortOptions(SortCriteria.PEERS, SortOrder.ASCENDING)
        )
        assert [t.peers for t in result] == [1, 3]

    def test_unparseable_dates_rank_below_parsed_ones(self, make_torrent) -> None:
        torrents = [
            make_torrent("old", upload_date="2023-05-01"),
            make_torrent("garbage", upload_date="sometime"),
            make_torrent("new", upload_date="2024-01-02"),
        ]
        result = sort_results(
            torrents, SortOptions(SortCriteria.UPLOAD_DATE, SortOrder.DESCENDING)
        )
        assert [t.name for t in result] == ["new", "old", "garbage"]


class TestParseUploadDate:
    def test_unix_timestamp(self) -> None:
        assert parse_upload_date("1700000000") == 1700000000.0

    def test_relative_phrase(self) -> None:
        assert parse_upload_date("2 days ago", _NOW) == _NOW.timestamp() - 2 * 86400

    def test_article_counts_as_one(self) -> None:
        assert parse_upload_date("an hour ago", _NOW) == _NOW.timestamp() - 3600

    def test_yesterday(self) -> None:
        assert parse_upload_date("Yesterday", _NOW) == _NOW.timestamp() - 86400

    def test_display_format(self) -> None:
        expected = datetime(2024, 1, 1, tzinfo=timezone.utc).timestamp()
        assert parse_upload_date("01 Jan 2024") == expected

    def test_iso(self) -> None:
        expected = datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc).timestamp()
        assert parse_upload_date("2024-03-05T10:00:00Z") == expected

    def test_rfc822(self) -> None:
        expected = datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc).timestamp()
        assert parse_upload_date("Tue, 05 Mar 2024 10:00:00 +0000") == expected

    @pytest.mark.parametrize("text", ["", "   ", "sometime", "N/A"])
    def test_unparseable(self, text: str) -> None:
        assert parse_upload_date(text) is None


class TestLimitResults:
    def test_unlimited_keeps_everything(self, make_torrent) -> None:
        torrents = [make_torrent(str(i)) for i in range(5)]
        assert limit_results(torrents, UNLIMITED) == torrents

    def test_cap_truncates(self, make_torrent) -> None:
        torrents = [make_torrent(str(i)) for i in range(5)]
        assert limit_results(torrents, MaxNumResults(2)) == torrents[:2]


# ---------------------------------------------------------------------------
# Use case
# ---------------------------------------------------------------------------


class TestSearchTorrentsUseCase:
    async def test_duplicate_hashes_and_timeouts(
        self, make_services, make_provider, make_torrent
    ) -> None:
        a = make_provider(
            "a",
            [
                make_torrent("A one", provider_id="a", locator=InfoHash(_H1)),
                make_torrent("A two", provider_id="a"),
            ],
        )
        b = make_provider(
            "b", [make_torrent("B one", provider_id="b", locator=InfoHash(_H1))]
        )
        c = make_provider("c", [make_torrent("C one")], delay=5.0)
        services = make_services([a, b, c], provider_timeout=0.05)

        outcome = await services.search.execute("ubuntu")

        assert len(outcome.results) == 2
        kept = next(t for t in outcome.results if t.info_hash() == _H1)
        assert kept.provider_id == "a"
        assert outcome.failures == [
            ProviderFailure("c", "C", "timed out after 0.05s")
        ]
        assert c.cancelled is True

    async def test_failed_provider_equals_excluded_provider(
        self, make_services, make_provider, make_torrent
    ) -> None:
        results_a = [make_torrent("x", seeders=3), make_torrent("y", seeders=9)]
        results_c = [make_torrent("z", seeders=5)]

        with_failure = make_services(
            [
                make_provider("a", results_a),
                make_provider("b", error=ProviderError("b", "HTTP 500")),
                make_provider("c", results_c),
            ]
        )
        without = make_services(
            [make_provider("a", results_a), make_provider("c", results_c)]
        )

        failed = await with_failure.search.execute("q")
        clean = await without.search.execute("q")

        assert failed.results == clean.results
        assert [f.provider_id for f in failed.failures] == ["b"]
        assert failed.failures[0].reason == "HTTP 500"

    async def test_only_enabled_catalogue_providers_are_invoked(
        self, make_services, make_provider
    ) -> None:
        a, b, c = make_provider("a"), make_provider("b"), make_provider("c")
        services = make_services([a, b, c])
        await services.enablement.set_enabled({"a", "c", "removed"})

        await services.search.execute("q")

        assert a.calls and c.calls
        assert b.calls == []

    async def test_category_limits_queried_providers(
        self, make_services, make_provider
    ) -> None:
        anime = make_provider("anime", category=Category.ANIME)
        movies = make_provider("movies", category=Category.MOVIES)
        general = make_provider("general")
        services = make_services([anime, movies, general])

        await services.search.execute("frieren", Category.ANIME)

        assert anime.calls == [("frieren", Category.ANIME)]
        assert general.calls == [("frieren", Category.ANIME)]
        assert movies.calls == []

    async def test_blank_query_touches_no_provider(
        self, make_services, make_provider
    ) -> None:
        a = make_provider("a")
        services = make_services([a])

        outcome = await services.search.execute("   ")

        assert outcome == SearchOutcome()
        assert a.calls == []

    async def test_unexpected_exception_becomes_failure(
        self, make_services, make_provider, make_torrent
    ) -> None:
        services = make_services(
            [
                make_provider("ok", [make_torrent("fine")]),
                make_provider("broken", error=KeyError("seeders")),
            ]
        )

        outcome = await services.search.execute("q")

        assert [t.name for t in outcome.results] == ["fine"]
        assert outcome.failures == [
            ProviderFailure("broken", "BROKEN", "unexpected error: KeyError")
        ]

    async def test_stored_preferences_shape_the_results(
        self, make_services, make_provider, make_torrent
    ) -> None:
        torrents = [
            make_torrent("a", seeders=0),
            make_torrent("b", seeders=2),
            make_torrent("c", seeders=8),
            make_torrent("d", seeders=5),
        ]
        services = make_services([make_provider("p", torrents)])
        await services.settings.update_hide_results_with_zero_seeders(True)
        await services.settings.update_max_num_results(MaxNumResults(2))
        await services.settings.update_sort_options(
            SortOptions(SortCriteria.SEEDERS, SortOrder.ASCENDING)
        )

        outcome = await services.search.execute("q")

        assert [t.name for t in outcome.results] == ["b", "d"]

    async def test_explicit_preferences_override_stored(
        self, make_services, make_provider, make_torrent
    ) -> None:
        torrents = [make_torrent("porn", category=Category.PORN)]
        services = make_services([make_provider("p", torrents)])

        hidden = await services.search.execute("q")
        shown = await services.search.execute(
            "q", preferences=SearchPreferences(enable_nsfw_mode=True)
        )

        assert hidden.results == []
        assert [t.name for t in shown.results] == ["porn"]

    async def test_storage_failure_falls_back_to_default_preferences(
        self, make_services, make_provider, make_torrent
    ) -> None:
        services = make_services([make_provider("p", [make_torrent("x")])])
        services.store.fail = True

        prefs = await services.search.load_preferences()

        assert prefs == SearchPreferences()

    async def test_cancellation_cancels_provider_tasks(
        self, make_services, make_provider
    ) -> None:
        slow = make_provider("slow", delay=5.0)
        services = make_services([slow], provider_timeout=10.0)

        task = asyncio.create_task(services.search.execute("q"))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert slow.cancelled is True

    async def test_stream_yields_exactly_one_outcome(
        self, make_services, make_provider, make_torrent
    ) -> None:
        services = make_services([make_provider("p", [make_torrent("x")])])

        outcomes = [o async for o in services.search.stream("q")]

        assert len(outcomes) == 1
        assert [t.name for t in outcomes[0].results] == ["x"]


class TestSearchSession:
    async def test_new_run_supersedes_the_previous_one(
        self, make_services, make_provider, make_torrent
    ) -> None:
        provider = make_provider("p", [make_torrent("x")], delay=0.1)
        services = make_services([provider])
        session = SearchSession(services.search)

        first = asyncio.create_task(session.run("first"))
        await asyncio.sleep(0.02)
        assert session.in_flight

        second = await session.run("second")

        assert await first is None
        assert second is not None
        assert [t.name for t in second.results] == ["x"]
        assert not session.in_flight

    async def test_cancel_without_run_is_a_no_op(self, make_services) -> None:
        session = SearchSession(make_services([]).search)
        session.cancel()
        assert not session.in_flight
