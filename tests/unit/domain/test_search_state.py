"""Tests for the dual-list search reducers and views."""

from __future__ import annotations

import pytest

from reelscout.domain.entities.media import MediaSummary, ResultPage
from reelscout.domain.entities.search import SearchQuery
from reelscout.domain.exceptions import InvalidSearchQueryError
from reelscout.domain.pagination import ELLIPSIS
from reelscout.domain.search_state import (
    FetchKey,
    SearchState,
    TrackState,
    all_view,
    apply_error,
    apply_result,
    begin_fetch,
    clear_results,
    combined_view,
    reset_pages,
    set_page,
    set_page_size,
    set_query_text,
    set_tab,
    tab_view,
    track_view,
)


def _movie(i: int) -> MediaSummary:
    return MediaSummary(id=str(i), title=f"Movie {i}", kind="movie")


def _show(i: int) -> MediaSummary:
    return MediaSummary(id=str(i), title=f"Show {i}", kind="tv")


def _page(items: list[MediaSummary], total: int, page: int = 1, limit: int = 20):
    return ResultPage(items=tuple(items), total=total, page=page, limit=limit)


@pytest.fixture()
def state() -> SearchState:
    return SearchState(query=SearchQuery(text="batman"))


def _loaded(state: SearchState) -> SearchState:
    state, mkey = begin_fetch(state, "movies")
    state, tkey = begin_fetch(state, "tv")
    state = apply_result(state, "movies", mkey, _page([_movie(1), _movie(2)], 137))
    state = apply_result(state, "tv", tkey, _page([_show(9)], 3))
    return state


# ---------------------------------------------------------------------------
# Query transitions
# ---------------------------------------------------------------------------


class TestQueryTransitions:
    def test_new_text_resets_both_pages(self, state: SearchState) -> None:
        state = set_page(set_page(state, "movies", 4), "tv", 2)
        after = set_query_text(state, "superman")
        assert after.query.text == "superman"
        assert (after.query.movie_page, after.query.tv_page) == (1, 1)

    def test_same_text_is_a_no_op(self, state: SearchState) -> None:
        assert set_query_text(state, "batman") is state

    def test_page_size_change_resets_both_pages(self, state: SearchState) -> None:
        state = set_page(set_page(state, "movies", 3), "tv", 5)
        after = set_page_size(state, 60)
        assert after.query.page_size == 60
        assert (after.query.movie_page, after.query.tv_page) == (1, 1)

    def test_page_size_must_be_allowed(self, state: SearchState) -> None:
        with pytest.raises(InvalidSearchQueryError):
            set_page_size(state, 30)

    def test_set_page_only_moves_one_track(self, state: SearchState) -> None:
        after = set_page(state, "movies", 3)
        assert after.query.movie_page == 3
        assert after.query.tv_page == 1
        assert after.tv is state.tv

    def test_set_page_rejects_zero(self, state: SearchState) -> None:
        with pytest.raises(InvalidSearchQueryError):
            set_page(state, "tv", 0)

    def test_reset_pages(self, state: SearchState) -> None:
        moved = set_page(state, "tv", 6)
        assert reset_pages(moved).query.tv_page == 1
        assert reset_pages(state) is state

    def test_tab_switch_leaves_tracks_alone(self, state: SearchState) -> None:
        loaded = _loaded(state)
        after = set_tab(loaded, "tv")
        assert after.query.active_tab == "tv"
        assert after.movies is loaded.movies
        assert after.tv is loaded.tv

    def test_clear_results(self, state: SearchState) -> None:
        cleared = clear_results(_loaded(state))
        assert cleared.movies == TrackState()
        assert cleared.tv == TrackState()


# ---------------------------------------------------------------------------
# Fetch lifecycle
# ---------------------------------------------------------------------------


class TestFetchLifecycle:
    def test_begin_fetch_marks_loading(self, state: SearchState) -> None:
        after, key = begin_fetch(state, "movies")
        assert key == FetchKey(text="batman", page=1, page_size=20)
        assert after.movies.loading
        assert after.movies.pending == key
        assert not after.tv.loading

    def test_result_is_applied_for_current_key(self, state: SearchState) -> None:
        state, key = begin_fetch(state, "movies")
        after = apply_result(state, "movies", key, _page([_movie(1)], 1))
        assert not after.movies.loading
        assert after.movies.result is not None
        assert after.movies.result.items == (_movie(1),)

    def test_stale_result_is_discarded(self, state: SearchState) -> None:
        state, old_key = begin_fetch(state, "movies")
        state = set_query_text(state, "superman")
        state, _ = begin_fetch(state, "movies")

        after = apply_result(state, "movies", old_key, _page([_movie(1)], 1))

        assert after is state
        assert after.movies.result is None
        assert after.movies.loading

    def test_stale_page_size_result_is_discarded(self, state: SearchState) -> None:
        state, old_key = begin_fetch(state, "tv")
        state = set_page_size(state, 40)
        assert apply_result(state, "tv", old_key, _page([_show(1)], 1)) is state

    def test_error_sets_flag_and_clears_result(self, state: SearchState) -> None:
        state = _loaded(state)
        state, key = begin_fetch(state, "movies")
        after = apply_error(state, "movies", key, "timeout")
        assert after.movies.error == "timeout"
        assert after.movies.result is None
        assert not after.movies.loading
        # The other track is untouched.
        assert after.tv is state.tv

    def test_stale_error_is_discarded(self, state: SearchState) -> None:
        state, old_key = begin_fetch(state, "tv")
        state = set_page(state, "tv", 2)
        assert apply_error(state, "tv", old_key, "boom") is state

    def test_new_fetch_clears_previous_error(self, state: SearchState) -> None:
        state, key = begin_fetch(state, "tv")
        state = apply_error(state, "tv", key, "boom")
        after, _ = begin_fetch(state, "tv")
        assert after.tv.error is None
        assert after.tv.loading


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


class TestViews:
    def test_combined_is_movies_then_tv(self, state: SearchState) -> None:
        combined = combined_view(_loaded(state))
        assert [t.key for t in combined.items] == ["movie-1", "movie-2", "tv-9"]
        assert combined.total == 140

    def test_combined_with_one_track_missing(self, state: SearchState) -> None:
        state, key = begin_fetch(state, "tv")
        state = apply_result(state, "tv", key, _page([_show(4)], 1))
        combined = combined_view(state)
        assert [t.key for t in combined.items] == ["tv-4"]
        assert combined.total == 1

    def test_track_view_pagination(self, state: SearchState) -> None:
        view = track_view(_loaded(state), "movies")
        assert view.total == 137
        assert view.info.total_pages == 7
        assert view.pages == [1, 2, 3, ELLIPSIS, 7]
        assert view.showing == (1, 20)

    def test_single_page_track_has_no_buttons(self, state: SearchState) -> None:
        view = track_view(_loaded(state), "tv")
        assert view.info.total_pages == 1
        assert view.pages == []
        assert not view.info.has_controls

    def test_deep_link_past_last_page_highlights_last(
        self, state: SearchState
    ) -> None:
        state = set_page(state, "movies", 12)
        state, key = begin_fetch(state, "movies")
        state = apply_result(state, "movies", key, _page([], 137, page=12))
        view = track_view(state, "movies")
        assert view.page == 12
        assert view.pages == [1, ELLIPSIS, 5, 6, 7]
        assert view.showing is None

    def test_all_view_error_only_when_both_failed(self, state: SearchState) -> None:
        state, mkey = begin_fetch(state, "movies")
        state, tkey = begin_fetch(state, "tv")
        one_failed = apply_error(state, "movies", mkey, "boom")
        assert not all_view(one_failed).error
        both_failed = apply_error(one_failed, "tv", tkey, "boom")
        assert all_view(both_failed).error

    def test_all_view_loading_while_any_track_loads(self, state: SearchState) -> None:
        state, _ = begin_fetch(state, "tv")
        assert all_view(state).loading

    def test_tab_view_follows_active_tab(self, state: SearchState) -> None:
        loaded = _loaded(state)
        assert tab_view(loaded) == all_view(loaded)
        assert tab_view(set_tab(loaded, "movies")).track == "movies"
        assert tab_view(set_tab(loaded, "tv")).track == "tv"
