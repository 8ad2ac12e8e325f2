"""Tests for the search use case (track fetches, run_search, SearchAggregator)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from reelscout.application.use_cases.search import (
    SearchAggregator,
    fetch_track_page,
    run_search,
)
from reelscout.domain.entities.media import MediaKind, MediaSummary
from reelscout.domain.entities.search import SearchQuery
from reelscout.domain.exceptions import ProviderError
from reelscout.domain.pagination import ELLIPSIS
from reelscout.domain.ports.metadata import ProviderPage
from reelscout.domain.search_state import FetchKey

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _items(kind: MediaKind, query: str, page: int, count: int = 20):
    return [
        MediaSummary(
            id=f"{query}-{(page - 1) * 20 + i}",
            title=f"{query} {kind} {(page - 1) * 20 + i}",
            kind=kind,
        )
        for i in range(count)
    ]


class FakeProvider:
    """Serves 20-item pages; totals per kind are configurable."""

    def __init__(self, movie_total: int = 137, tv_total: int = 45) -> None:
        self.totals = {"movie": movie_total, "tv": tv_total}
        self.calls: list[tuple[MediaKind, str, int]] = []
        self.fail: set[MediaKind] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.page_gates: dict[tuple[MediaKind, str, int], asyncio.Event] = {}
        self.crash: set[MediaKind] = set()

    async def fetch_page(
        self, kind: MediaKind, query: str, page: int = 1
    ) -> ProviderPage:
        self.calls.append((kind, query, page))
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        page_gate = self.page_gates.get((kind, query, page))
        if page_gate is not None:
            await page_gate.wait()
        if kind in self.crash:
            raise TypeError("unexpected payload")
        if kind in self.fail:
            raise ProviderError(f"{kind} search failed")
        total = self.totals[kind]
        remaining = max(0, total - (page - 1) * 20)
        return ProviderPage(
            items=_items(kind, query, page, min(20, remaining)), total=total
        )


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def aggregator(provider: FakeProvider) -> SearchAggregator:
    return SearchAggregator(provider, debounce_seconds=0.02)


async def _settle(agg: SearchAggregator) -> None:
    await asyncio.sleep(0.06)
    await agg.wait_idle()


# ---------------------------------------------------------------------------
# fetch_track_page
# ---------------------------------------------------------------------------


class TestFetchTrackPage:
    async def test_single_upstream_page(self, provider: FakeProvider) -> None:
        page = await fetch_track_page(
            provider, "movies", FetchKey(text="bat", page=2, page_size=20)
        )
        assert provider.calls == [("movie", "bat", 2)]
        assert page.total == 137
        assert page.items[0].id == "bat-20"
        assert len(page.items) == 20

    async def test_larger_page_size_joins_upstream_pages(
        self, provider: FakeProvider
    ) -> None:
        page = await fetch_track_page(
            provider, "movies", FetchKey(text="bat", page=2, page_size=60)
        )
        assert sorted(c[2] for c in provider.calls) == [4, 5, 6]
        assert len(page.items) == 60
        assert page.items[0].id == "bat-60"
        assert page.items[-1].id == "bat-119"
        assert page.limit == 60

    async def test_short_last_page(self, provider: FakeProvider) -> None:
        page = await fetch_track_page(
            provider, "tv", FetchKey(text="bat", page=2, page_size=40)
        )
        assert len(page.items) == 5
        assert page.total == 45

    async def test_bogus_total_degrades_to_zero(self) -> None:
        provider = AsyncMock()
        provider.fetch_page = AsyncMock(return_value=ProviderPage(items=[], total=-3))
        page = await fetch_track_page(
            provider, "tv", FetchKey(text="x", page=1, page_size=20)
        )
        assert page.total == 0

    async def test_provider_error_propagates(self, provider: FakeProvider) -> None:
        provider.fail.add("movie")
        with pytest.raises(ProviderError):
            await fetch_track_page(
                provider, "movies", FetchKey(text="x", page=1, page_size=20)
            )


# ---------------------------------------------------------------------------
# run_search
# ---------------------------------------------------------------------------


class TestRunSearch:
    async def test_both_tracks_loaded(self, provider: FakeProvider) -> None:
        state = await run_search(provider, SearchQuery(text="bat", tv_page=2))
        assert state.movies.result is not None
        assert state.tv.result is not None
        assert state.movies.result.page == 1
        assert state.tv.result.page == 2
        assert not state.movies.loading
        assert not state.tv.loading

    async def test_one_failing_track_does_not_affect_other(
        self, provider: FakeProvider
    ) -> None:
        provider.fail.add("tv")
        state = await run_search(provider, SearchQuery(text="bat"))
        assert state.tv.error == "tv search failed"
        assert state.tv.result is None
        assert state.movies.error is None
        assert state.movies.result is not None

    async def test_unexpected_exception_becomes_track_error(
        self, provider: FakeProvider
    ) -> None:
        provider.crash.add("movie")
        state = await run_search(provider, SearchQuery(text="bat"))
        assert state.movies.error == "movie search failed unexpectedly"
        assert not state.movies.loading
        assert state.tv.result is not None

    async def test_empty_text_does_not_fetch(self, provider: FakeProvider) -> None:
        state = await run_search(provider, SearchQuery(text="  "))
        assert provider.calls == []
        assert state.movies.result is None


# ---------------------------------------------------------------------------
# SearchAggregator
# ---------------------------------------------------------------------------


class TestSearchAggregator:
    async def test_typing_is_debounced(
        self, aggregator: SearchAggregator, provider: FakeProvider
    ) -> None:
        for text in ("b", "ba", "bat", "batm", "batman"):
            aggregator.set_query_text(text)
        await _settle(aggregator)

        queries = {c[1] for c in provider.calls}
        assert queries == {"batman"}
        assert len(provider.calls) == 2
        assert aggregator.query.text == "batman"

    async def test_submit_searches_immediately_from_page_one(
        self, provider: FakeProvider
    ) -> None:
        agg = SearchAggregator(provider, debounce_seconds=10.0)
        agg.set_query_text("dune")
        agg.submit()
        await agg.wait_idle()

        assert sorted(provider.calls) == [("movie", "dune", 1), ("tv", "dune", 1)]
        view = agg.track_view("movies")
        assert view.page == 1
        assert view.pages == [1, 2, 3, ELLIPSIS, 7]
        await agg.aclose()

    async def test_set_page_refetches_only_that_track(
        self, aggregator: SearchAggregator, provider: FakeProvider
    ) -> None:
        aggregator.set_query_text("bat")
        await _settle(aggregator)
        provider.calls.clear()
        tv_before = aggregator.state.tv

        aggregator.set_page("movies", 3)
        await aggregator.wait_idle()

        assert provider.calls == [("movie", "bat", 3)]
        assert aggregator.state.tv is tv_before
        assert aggregator.query.movie_page == 3
        assert aggregator.query.tv_page == 1

    async def test_page_size_change_resets_and_refetches_both(
        self, aggregator: SearchAggregator, provider: FakeProvider
    ) -> None:
        aggregator.set_query_text("bat")
        await _settle(aggregator)
        aggregator.set_page("tv", 2)
        await aggregator.wait_idle()
        provider.calls.clear()

        aggregator.set_page_size(40)
        await aggregator.wait_idle()

        assert aggregator.query.page_size == 40
        assert (aggregator.query.movie_page, aggregator.query.tv_page) == (1, 1)
        assert sorted(provider.calls) == [
            ("movie", "bat", 1),
            ("movie", "bat", 2),
            ("tv", "bat", 1),
            ("tv", "bat", 2),
        ]
        assert len(aggregator.track_view("movies").items) == 40

    async def test_stale_response_is_discarded(self, provider: FakeProvider) -> None:
        agg = SearchAggregator(provider, debounce_seconds=10.0)
        slow = asyncio.Event()
        provider.gates["bat"] = slow

        agg.set_query_text("bat")
        agg.submit()
        await asyncio.sleep(0)
        agg.set_query_text("batman")
        agg.submit()
        await asyncio.sleep(0.01)

        # "batman" is already in; "bat" arrives late and must be ignored.
        slow.set()
        await agg.wait_idle()

        movies = agg.state.movies.result
        assert movies is not None
        assert all(i.id.startswith("batman-") for i in movies.items)
        assert agg.query.text == "batman"
        assert not agg.state.movies.loading

    async def test_stale_page_of_same_text_is_discarded(
        self, provider: FakeProvider
    ) -> None:
        agg = SearchAggregator(provider, debounce_seconds=10.0)
        slow = asyncio.Event()
        provider.page_gates[("movie", "batman", 1)] = slow

        agg.set_query_text("batman")
        agg.submit()
        await asyncio.sleep(0)
        agg.set_page("movies", 2)
        await asyncio.sleep(0.01)

        # Page 2 is already in; page 1 arrives late and must be ignored.
        slow.set()
        await agg.wait_idle()

        movies = agg.state.movies.result
        assert movies is not None
        assert movies.page == 2
        assert movies.items[0].id == "batman-20"
        assert agg.query.movie_page == 2
        assert not agg.state.movies.loading

    async def test_unexpected_exception_does_not_leave_track_loading(
        self, aggregator: SearchAggregator, provider: FakeProvider
    ) -> None:
        provider.crash.add("movie")
        aggregator.set_query_text("bat")
        await _settle(aggregator)

        assert not aggregator.state.movies.loading
        assert aggregator.state.movies.error == "movie search failed unexpectedly"
        assert aggregator.state.tv.result is not None

        provider.crash.clear()
        aggregator.retry("movies")
        await aggregator.wait_idle()

        assert aggregator.state.movies.error is None
        assert aggregator.state.movies.result is not None

    async def test_error_in_one_track_keeps_other(
        self, aggregator: SearchAggregator, provider: FakeProvider
    ) -> None:
        provider.fail.add("movie")
        aggregator.set_query_text("bat")
        await _settle(aggregator)

        assert aggregator.track_view("movies").error == "movie search failed"
        assert aggregator.track_view("tv").error is None
        assert not aggregator.all_view().error
        assert [t.kind for t in aggregator.combined_view().items] == ["tv"] * 20

    async def test_retry_recovers_track(
        self, aggregator: SearchAggregator, provider: FakeProvider
    ) -> None:
        provider.fail.add("tv")
        aggregator.set_query_text("bat")
        await _settle(aggregator)
        assert aggregator.state.tv.error is not None

        provider.fail.clear()
        aggregator.retry("tv")
        await aggregator.wait_idle()

        assert aggregator.state.tv.error is None
        assert aggregator.state.tv.result is not None

    async def test_tab_switch_never_fetches(
        self, aggregator: SearchAggregator, provider: FakeProvider
    ) -> None:
        aggregator.set_query_text("bat")
        await _settle(aggregator)
        provider.calls.clear()

        aggregator.select_tab("tv")
        aggregator.select_tab("movies")
        await aggregator.wait_idle()

        assert provider.calls == []
        assert aggregator.tab_view().track == "movies"

    async def test_clearing_text_clears_results(
        self, aggregator: SearchAggregator, provider: FakeProvider
    ) -> None:
        aggregator.set_query_text("bat")
        await _settle(aggregator)
        provider.calls.clear()

        aggregator.set_query_text("")
        await _settle(aggregator)

        assert provider.calls == []
        assert aggregator.state.movies.result is None
        assert aggregator.combined_view().items == ()

    async def test_deep_link_load(self, provider: FakeProvider) -> None:
        agg = SearchAggregator(
            provider,
            debounce_seconds=10.0,
            initial=SearchQuery.from_params({"q": "bat", "tvPage": "2"}),
        )
        agg.load()
        await agg.wait_idle()

        assert sorted(provider.calls) == [("movie", "bat", 1), ("tv", "bat", 2)]
        assert agg.track_view("tv").showing == (21, 40)
