"""Search use case: two independently paginated tracks, one combined view.

Movies and TV shows are fetched as independent asyncio tasks (no ordering
between them). Each fetch carries the ``FetchKey`` it was issued for; a
response whose key no longer matches the track's current key is discarded.
Provider failures are caught per track and never cross into the other one.
"""

from __future__ import annotations

import asyncio

import structlog

from reelscout.application.debounce import DebounceTimer
from reelscout.domain.entities.media import CombinedResult, MediaSummary, ResultPage
from reelscout.domain.entities.search import SearchQuery, SearchTab
from reelscout.domain.exceptions import ProviderError
from reelscout.domain.pagination import coerce_total, page_slice
from reelscout.domain.ports.metadata import MetadataProviderPort
from reelscout.domain.search_state import (
    TRACK_KIND,
    TRACKS,
    AllView,
    FetchKey,
    SearchState,
    TabView,
    TrackName,
    TrackView,
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

log = structlog.get_logger(__name__)


async def fetch_track_page(
    provider: MetadataProviderPort,
    track: TrackName,
    key: FetchKey,
) -> ResultPage[MediaSummary]:
    """Fetch one UI page for ``track``.

    A UI page larger than the provider's page spans several upstream
    pages; those are requested concurrently and sliced back together.

    Raises:
        ProviderError: If any upstream page fails.
    """
    kind = TRACK_KIND[track]
    bounds = page_slice(key.page, key.page_size)
    pages = await asyncio.gather(
        *(provider.fetch_page(kind, key.text, p) for p in bounds.upstream)
    )
    items: list[MediaSummary] = []
    for raw in pages:
        items.extend(raw.items)
    window = items[bounds.offset : bounds.offset + key.page_size]
    return ResultPage(
        items=tuple(window),
        total=coerce_total(pages[0].total) if pages else 0,
        page=key.page,
        limit=key.page_size,
    )


async def _load(
    provider: MetadataProviderPort, track: TrackName, key: FetchKey
) -> ResultPage[MediaSummary] | ProviderError:
    """Fetch one track page; any failure becomes that track's error."""
    try:
        return await fetch_track_page(provider, track, key)
    except ProviderError as exc:
        log.warning(
            "search_fetch_failed",
            track=track,
            text=key.text,
            page=key.page,
            page_size=key.page_size,
            error=str(exc),
        )
        return exc
    except Exception as exc:
        log.warning(
            "search_fetch_failed",
            track=track,
            text=key.text,
            page=key.page,
            page_size=key.page_size,
            error=repr(exc),
            exc_info=True,
        )
        wrapped = ProviderError(f"{TRACK_KIND[track]} search failed unexpectedly")
        wrapped.__cause__ = exc
        return wrapped


async def run_search(
    provider: MetadataProviderPort, query: SearchQuery
) -> SearchState:
    """One-shot search for stateless callers (HTTP API).

    Both tracks are fetched concurrently; a failure in one track only
    sets that track's error flag.
    """
    state = SearchState(query=query)
    if not query.has_text:
        return state

    keys: dict[TrackName, FetchKey] = {}
    for track in TRACKS:
        state, keys[track] = begin_fetch(state, track)

    outcomes = await asyncio.gather(
        *(_load(provider, track, keys[track]) for track in TRACKS)
    )
    for track, outcome in zip(TRACKS, outcomes):
        if isinstance(outcome, ProviderError):
            state = apply_error(state, track, keys[track], str(outcome))
        else:
            state = apply_result(state, track, keys[track], outcome)
    return state


class SearchAggregator:
    """Drives one search view's state against the metadata provider.

    Owns exactly one :class:`SearchState`. All mutations go through the
    pure reducers in ``domain.search_state``; this class only decides when
    to fetch and applies responses as they arrive.
    """

    def __init__(
        self,
        provider: MetadataProviderPort,
        *,
        debounce_seconds: float = 0.5,
        window_delta: int = 2,
        initial: SearchQuery | None = None,
    ) -> None:
        self._provider = provider
        self._delta = window_delta
        self._state = SearchState(query=initial or SearchQuery())
        self._debounce: DebounceTimer[str] = DebounceTimer(
            debounce_seconds, self._on_text_settled
        )
        self._inflight: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def query(self) -> SearchQuery:
        return self._state.query

    def combined_view(self) -> CombinedResult:
        return combined_view(self._state)

    def all_view(self) -> AllView:
        return all_view(self._state)

    def track_view(self, track: TrackName) -> TrackView:
        return track_view(self._state, track, self._delta)

    def tab_view(self) -> TabView:
        return tab_view(self._state, self._delta)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_query_text(self, text: str) -> None:
        """Debounced: only the settled value triggers a fetch."""
        self._debounce.arm(text)

    def submit(self) -> None:
        """Explicit search action: settle the text now, back to page 1."""
        self._debounce.flush()
        previous = self._state
        self._state = reset_pages(previous)
        if self._state is not previous:
            self._refresh_all()

    def set_page_size(self, page_size: int) -> None:
        previous = self._state
        self._state = set_page_size(previous, page_size)
        if self._state is not previous:
            self._refresh_all()

    def set_page(self, track: TrackName, page: int) -> None:
        """Only ``track`` is refetched; the other track stays as it is."""
        previous = self._state
        self._state = set_page(previous, track, page)
        if self._state is not previous:
            self._refresh(track)

    def select_tab(self, tab: SearchTab) -> None:
        """Display-only switch; never fetches."""
        self._state = set_tab(self._state, tab)

    def retry(self, track: TrackName) -> None:
        """Manual retry of ``track`` at its current key."""
        self._refresh(track)

    def load(self) -> None:
        """Fetch both tracks for the current query (e.g. after a deep link)."""
        self._refresh_all()

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _on_text_settled(self, text: str) -> None:
        previous = self._state
        self._state = set_query_text(previous, text)
        if self._state is not previous:
            self._refresh_all()

    def _refresh_all(self) -> None:
        if not self._state.query.has_text:
            self._state = clear_results(self._state)
            return
        for track in TRACKS:
            self._refresh(track)

    def _refresh(self, track: TrackName) -> None:
        if not self._state.query.has_text:
            return
        self._state, key = begin_fetch(self._state, track)
        log.debug(
            "search_fetch_started",
            track=track,
            text=key.text,
            page=key.page,
            page_size=key.page_size,
        )
        task = asyncio.get_running_loop().create_task(self._fetch(track, key))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _fetch(self, track: TrackName, key: FetchKey) -> None:
        outcome = await _load(self._provider, track, key)

        if not self._state.is_current(track, key):
            log.debug(
                "search_response_discarded",
                track=track,
                text=key.text,
                page=key.page,
                page_size=key.page_size,
            )
            return

        if isinstance(outcome, ProviderError):
            self._state = apply_error(self._state, track, key, str(outcome))
            return

        self._state = apply_result(self._state, track, key, outcome)
        log.debug(
            "search_fetch_completed",
            track=track,
            text=key.text,
            page=key.page,
            items=len(outcome.items),
            total=outcome.total,
        )

    async def wait_idle(self) -> None:
        """Wait until no fetch (or settled debounce callback) is in flight."""
        await self._debounce.wait()
        while self._inflight:
            await asyncio.gather(*list(self._inflight))

    async def aclose(self) -> None:
        await self._debounce.aclose()
        await self.wait_idle()
