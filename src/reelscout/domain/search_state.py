"""Dual-list search state: explicit immutable state plus pure reducers.

A search view owns two independent *tracks* (movies, TV). They share the
query text and the page size, but each has its own page, loading flag,
error flag and result page.

Every transition is a pure ``state -> state`` function. Nothing here does
I/O, so the full aggregation behaviour can be unit-tested without an event
loop or a UI.

Responses are keyed by :class:`FetchKey` ``(text, page, page_size)``. A
response whose key no longer matches the track's current key is stale, and
:func:`apply_result` / :func:`apply_error` return the state unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal, Union

from reelscout.domain.entities.media import (
    CombinedResult,
    MediaKind,
    MediaSummary,
    ResultPage,
    TaggedItem,
)
from reelscout.domain.entities.search import (
    PAGE_SIZES,
    SEARCH_TABS,
    SearchQuery,
    SearchTab,
)
from reelscout.domain.exceptions import InvalidSearchQueryError
from reelscout.domain.pagination import (
    PageInfo,
    PageMarker,
    result_range,
    total_pages,
    visible_pages,
)

TrackName = Literal["movies", "tv"]

TRACKS: tuple[TrackName, ...] = ("movies", "tv")
TRACK_KIND: dict[TrackName, MediaKind] = {"movies": "movie", "tv": "tv"}


@dataclass(frozen=True)
class FetchKey:
    """Identity of one track fetch."""

    text: str
    page: int
    page_size: int


@dataclass(frozen=True)
class TrackState:
    """Per-track fetch state. The page number lives in ``SearchQuery``."""

    loading: bool = False
    error: str | None = None
    result: ResultPage[MediaSummary] | None = None
    pending: FetchKey | None = None


@dataclass(frozen=True)
class SearchState:
    """Complete state of one search view."""

    query: SearchQuery = field(default_factory=SearchQuery)
    movies: TrackState = field(default_factory=TrackState)
    tv: TrackState = field(default_factory=TrackState)

    def track(self, name: TrackName) -> TrackState:
        if name == "movies":
            return self.movies
        if name == "tv":
            return self.tv
        raise ValueError(f"unknown track: {name!r}")

    def page_for(self, name: TrackName) -> int:
        if name == "movies":
            return self.query.movie_page
        if name == "tv":
            return self.query.tv_page
        raise ValueError(f"unknown track: {name!r}")

    def key_for(self, name: TrackName) -> FetchKey:
        return FetchKey(
            text=self.query.text,
            page=self.page_for(name),
            page_size=self.query.page_size,
        )

    @property
    def movie_key(self) -> FetchKey:
        return self.key_for("movies")

    @property
    def tv_key(self) -> FetchKey:
        return self.key_for("tv")

    def is_current(self, name: TrackName, key: FetchKey) -> bool:
        return self.key_for(name) == key


def _with_track(state: SearchState, name: TrackName, track: TrackState) -> SearchState:
    if name == "movies":
        return replace(state, movies=track)
    if name == "tv":
        return replace(state, tv=track)
    raise ValueError(f"unknown track: {name!r}")


# ---------------------------------------------------------------------------
# Query transitions
# ---------------------------------------------------------------------------


def set_query_text(state: SearchState, text: str) -> SearchState:
    """New shared text; both pages reset to 1."""
    if text == state.query.text:
        return state
    return replace(
        state, query=replace(state.query, text=text, movie_page=1, tv_page=1)
    )


def set_page_size(state: SearchState, page_size: int) -> SearchState:
    """New shared page size; both pages reset to 1."""
    if page_size not in PAGE_SIZES:
        raise InvalidSearchQueryError(
            f"page_size must be one of {PAGE_SIZES}, got {page_size}"
        )
    if page_size == state.query.page_size:
        return state
    return replace(
        state,
        query=replace(state.query, page_size=page_size, movie_page=1, tv_page=1),
    )


def set_page(state: SearchState, name: TrackName, page: int) -> SearchState:
    """Move one track to ``page``. The other track is untouched."""
    if page < 1:
        raise InvalidSearchQueryError(f"page must be >= 1, got {page}")
    if page == state.page_for(name):
        return state
    if name == "movies":
        return replace(state, query=replace(state.query, movie_page=page))
    if name == "tv":
        return replace(state, query=replace(state.query, tv_page=page))
    raise ValueError(f"unknown track: {name!r}")


def reset_pages(state: SearchState) -> SearchState:
    if state.query.movie_page == 1 and state.query.tv_page == 1:
        return state
    return replace(state, query=replace(state.query, movie_page=1, tv_page=1))


def set_tab(state: SearchState, tab: SearchTab) -> SearchState:
    """Switch the displayed view. Track state is never touched."""
    if tab not in SEARCH_TABS:
        raise InvalidSearchQueryError(f"unknown tab: {tab!r}")
    if tab == state.query.active_tab:
        return state
    return replace(state, query=replace(state.query, active_tab=tab))


def clear_results(state: SearchState) -> SearchState:
    return replace(state, movies=TrackState(), tv=TrackState())


# ---------------------------------------------------------------------------
# Fetch lifecycle
# ---------------------------------------------------------------------------


def begin_fetch(state: SearchState, name: TrackName) -> tuple[SearchState, FetchKey]:
    """Mark ``name`` as loading and return the key the fetch must carry."""
    key = state.key_for(name)
    track = replace(state.track(name), loading=True, error=None, pending=key)
    return _with_track(state, name, track), key


def apply_result(
    state: SearchState,
    name: TrackName,
    key: FetchKey,
    page: ResultPage[MediaSummary],
) -> SearchState:
    """Store a fetched page, unless ``key`` is stale."""
    if not state.is_current(name, key):
        return state
    track = TrackState(loading=False, error=None, result=page, pending=None)
    return _with_track(state, name, track)


def apply_error(
    state: SearchState, name: TrackName, key: FetchKey, message: str
) -> SearchState:
    """Flag a failed fetch, unless ``key`` is stale.

    The previous result is dropped: an errored track always shows the
    retry affordance rather than outdated items.
    """
    if not state.is_current(name, key):
        return state
    track = TrackState(loading=False, error=message or "provider error", pending=None)
    return _with_track(state, name, track)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrackView:
    """Everything needed to render the movies or TV tab."""

    track: TrackName
    items: tuple[MediaSummary, ...]
    total: int
    page: int
    page_size: int
    info: PageInfo
    pages: list[PageMarker]
    showing: tuple[int, int] | None
    loading: bool
    error: str | None


@dataclass(frozen=True)
class AllView:
    """Combined "all" tab: a snapshot of both tracks' current pages."""

    combined: CombinedResult
    loading: bool
    error: bool
    showing: tuple[int, int] | None


TabView = Union[AllView, TrackView]


def combined_view(state: SearchState) -> CombinedResult:
    """Movies first, then TV, each in stable order. No own pagination."""
    movie_page = state.movies.result
    tv_page = state.tv.result
    items: list[TaggedItem] = []
    total = 0
    if movie_page is not None:
        items.extend(TaggedItem(kind="movie", item=m) for m in movie_page.items)
        total += movie_page.total
    if tv_page is not None:
        items.extend(TaggedItem(kind="tv", item=t) for t in tv_page.items)
        total += tv_page.total
    return CombinedResult(items=tuple(items), total=total)


def track_view(state: SearchState, name: TrackName, delta: int = 2) -> TrackView:
    track = state.track(name)
    page = state.page_for(name)
    size = state.query.page_size
    result = track.result
    total = result.total if result is not None else 0
    count = total_pages(total, size)

    # A deep link may point past the last page; highlight the last one.
    pages = visible_pages(min(page, count), count, delta) if count > 1 else []

    return TrackView(
        track=name,
        items=result.items if result is not None else (),
        total=total,
        page=page,
        page_size=size,
        info=PageInfo(page=page, total_pages=count),
        pages=pages,
        showing=result_range(page, size, total),
        loading=track.loading,
        error=track.error,
    )


def all_view(state: SearchState) -> AllView:
    combined = combined_view(state)
    return AllView(
        combined=combined,
        loading=state.movies.loading or state.tv.loading,
        # The combined tab only gives up when both sources failed.
        error=state.movies.error is not None and state.tv.error is not None,
        showing=result_range(1, state.query.page_size, combined.total),
    )


def tab_view(state: SearchState, delta: int = 2) -> TabView:
    """The precomputed view for the active tab. Never triggers a fetch."""
    tab = state.query.active_tab
    if tab == "movies":
        return track_view(state, "movies", delta)
    if tab == "tv":
        return track_view(state, "tv", delta)
    return all_view(state)
