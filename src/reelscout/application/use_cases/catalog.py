"""Catalog use case — trending rows, browse listings and detail pages."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Literal

import structlog

from reelscout.domain.entities.media import (
    MediaKind,
    MediaSummary,
    MovieDetails,
    ResultPage,
    TvDetails,
)
from reelscout.domain.pagination import coerce_total
from reelscout.domain.ports.metadata import MetadataProviderPort

log = structlog.get_logger(__name__)

SortBy = Literal["newest", "oldest", "rating", "title"]

SORT_OPTIONS: tuple[SortBy, ...] = ("newest", "oldest", "rating", "title")
ANY = "all"


@dataclass(frozen=True)
class BrowseOptions:
    """Filters applied to one page of a popular listing."""

    search: str = ""
    genre: str = ANY
    year: str = ANY
    sort_by: SortBy = "newest"
    page: int = 1
    limit: int = 20

    def __post_init__(self) -> None:
        if self.sort_by not in SORT_OPTIONS:
            raise ValueError(f"sort_by must be one of {SORT_OPTIONS}")
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")


@dataclass(frozen=True)
class HomeRows:
    """Rows of the landing page."""

    trending_movies: list[MediaSummary]
    trending_tv: list[MediaSummary]
    latest_releases: list[MediaSummary]


def _year_value(item: MediaSummary) -> int:
    return int(item.year[:4]) if item.year[:4].isdigit() else 0


def _rating_value(item: MediaSummary) -> float:
    try:
        return float(item.rating)
    except ValueError:
        return 0.0


def filter_and_sort(
    items: list[MediaSummary], options: BrowseOptions
) -> list[MediaSummary]:
    """Apply search/genre/year filters, then the requested ordering."""
    result = list(items)

    if options.search:
        needle = options.search.casefold()
        result = [i for i in result if needle in i.title.casefold()]

    if options.genre and options.genre != ANY:
        wanted = options.genre.casefold()
        result = [
            i for i in result if any(g.casefold() == wanted for g in i.genres)
        ]

    if options.year and options.year != ANY:
        result = [i for i in result if i.year == options.year]

    if options.sort_by == "oldest":
        result.sort(key=_year_value)
    elif options.sort_by == "rating":
        result.sort(key=_rating_value, reverse=True)
    elif options.sort_by == "title":
        result.sort(key=lambda i: i.title.casefold())
    else:
        result.sort(key=_year_value, reverse=True)

    return result


class CatalogUseCase:
    """Discovery features backed by the metadata provider.

    Home rows degrade to empty lists on provider errors; everything else
    propagates ``ProviderError`` to the caller.
    """

    def __init__(self, provider: MetadataProviderPort) -> None:
        self._provider = provider

    async def trending(self, kind: MediaKind) -> list[MediaSummary]:
        return await self._provider.trending(kind)

    async def upcoming_movies(self) -> list[MediaSummary]:
        return await self._provider.upcoming_movies()

    async def _row(
        self, name: str, coro: Awaitable[list[MediaSummary]]
    ) -> list[MediaSummary]:
        try:
            return await coro
        except Exception:
            log.warning("catalog_row_failed", row=name, exc_info=True)
            return []

    async def home(self) -> HomeRows:
        """Trending movies, trending TV and latest releases, concurrently."""
        movies, tv, latest = await asyncio.gather(
            self._row("trending_movies", self._provider.trending("movie")),
            self._row("trending_tv", self._provider.trending("tv")),
            self._row("latest_releases", self._provider.upcoming_movies()),
        )
        return HomeRows(
            trending_movies=movies, trending_tv=tv, latest_releases=latest
        )

    async def browse(
        self, kind: MediaKind, options: BrowseOptions
    ) -> ResultPage[MediaSummary]:
        """One page of the popular listing with client-side filters.

        ``total`` is the provider's total for the whole listing; filters
        only narrow the items of the fetched page.
        """
        raw = await self._provider.popular(kind, options.page)
        items = filter_and_sort(raw.items, options)
        return ResultPage(
            items=tuple(items),
            total=coerce_total(raw.total),
            page=options.page,
            limit=options.limit,
        )

    async def genres(self, kind: MediaKind) -> list[str]:
        return sorted(await self._provider.genres(kind))

    async def movie_details(self, movie_id: str) -> MovieDetails:
        return await self._provider.movie_details(movie_id)

    async def tv_details(self, tv_id: str) -> TvDetails:
        """Series details with every season's episodes, in season order."""
        details = await self._provider.tv_details(tv_id)
        seasons = range(1, details.seasons + 1)
        listings = await asyncio.gather(
            *(self._provider.season_episodes(tv_id, s) for s in seasons)
        )
        episodes = [e for listing in listings for e in listing]
        episodes.sort(key=lambda e: (e.season, e.episode))
        log.debug(
            "tv_details_loaded",
            tv_id=tv_id,
            seasons=details.seasons,
            episodes=len(episodes),
        )
        return TvDetails(
            summary=details.summary, seasons=details.seasons, episodes=episodes
        )
