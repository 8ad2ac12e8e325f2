"""Catalog endpoints: home rows, browse listings, genres and detail pages."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from reelscout.application.use_cases.catalog import (
    ANY,
    BrowseOptions,
    CatalogUseCase,
    SortBy,
)
from reelscout.domain.entities.media import MediaKind
from reelscout.domain.exceptions import ProviderError
from reelscout.domain.pagination import visible_pages
from reelscout.interfaces.api.presenter import (
    media_to_dict,
    movie_details_to_dict,
    provider_failed,
    provider_not_configured,
    result_page_to_dict,
    tv_details_to_dict,
)
from reelscout.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["catalog"])


def _catalog(request: Request) -> CatalogUseCase | None:
    state = cast(AppState, request.app.state)
    return getattr(state, "catalog_uc", None)


def _items(items: list[Any]) -> dict[str, Any]:
    return {"items": [media_to_dict(i) for i in items]}


@router.get("/trending/{kind}")
async def trending(request: Request, kind: MediaKind) -> JSONResponse:
    """Today's trending movies or TV shows."""
    catalog = _catalog(request)
    if catalog is None:
        return provider_not_configured()
    try:
        items = await catalog.trending(kind)
    except ProviderError as exc:
        log.warning("trending_failed", kind=kind, error=str(exc))
        return provider_failed(exc)
    return JSONResponse(content=_items(items))


@router.get("/upcoming/movies")
async def upcoming_movies(request: Request) -> JSONResponse:
    catalog = _catalog(request)
    if catalog is None:
        return provider_not_configured()
    try:
        items = await catalog.upcoming_movies()
    except ProviderError as exc:
        log.warning("upcoming_failed", error=str(exc))
        return provider_failed(exc)
    return JSONResponse(content=_items(items))


@router.get("/home")
async def home(request: Request) -> JSONResponse:
    """Landing page rows. A failing row is served empty."""
    catalog = _catalog(request)
    if catalog is None:
        return provider_not_configured()
    rows = await catalog.home()
    return JSONResponse(
        content={
            "trendingMovies": [media_to_dict(i) for i in rows.trending_movies],
            "trendingTv": [media_to_dict(i) for i in rows.trending_tv],
            "latestReleases": [media_to_dict(i) for i in rows.latest_releases],
        }
    )


async def _browse(
    request: Request, kind: MediaKind, options: BrowseOptions
) -> JSONResponse:
    catalog = _catalog(request)
    if catalog is None:
        return provider_not_configured()
    try:
        page = await catalog.browse(kind, options)
    except ProviderError as exc:
        log.warning("browse_failed", kind=kind, page=options.page, error=str(exc))
        return provider_failed(exc)

    state = cast(AppState, request.app.state)
    count = page.total_pages
    pages = (
        visible_pages(min(page.page, count), count, state.config.search.window_delta)
        if count > 1
        else []
    )
    return JSONResponse(content=result_page_to_dict(page, pages))


@router.get("/movies")
async def browse_movies(
    request: Request,
    page: int = Query(default=1, ge=1),
    search: str = Query(default=""),
    genre: str = Query(default=ANY),
    year: str = Query(default=ANY),
    sort_by: SortBy = Query(default="newest", alias="sortBy"),
) -> JSONResponse:
    """One page of popular movies, filtered and sorted."""
    options = BrowseOptions(
        search=search, genre=genre, year=year, sort_by=sort_by, page=page
    )
    return await _browse(request, "movie", options)


@router.get("/tv-shows")
async def browse_tv_shows(
    request: Request,
    page: int = Query(default=1, ge=1),
    search: str = Query(default=""),
    genre: str = Query(default=ANY),
    year: str = Query(default=ANY),
    sort_by: SortBy = Query(default="newest", alias="sortBy"),
) -> JSONResponse:
    """One page of popular TV shows, filtered and sorted."""
    options = BrowseOptions(
        search=search, genre=genre, year=year, sort_by=sort_by, page=page
    )
    return await _browse(request, "tv", options)


@router.get("/genres/{kind}")
async def genres(request: Request, kind: MediaKind) -> JSONResponse:
    catalog = _catalog(request)
    if catalog is None:
        return provider_not_configured()
    try:
        names = await catalog.genres(kind)
    except ProviderError as exc:
        return provider_failed(exc)
    return JSONResponse(content={"genres": names})


@router.get("/movie/{movie_id}")
async def movie_details(request: Request, movie_id: str) -> JSONResponse:
    catalog = _catalog(request)
    if catalog is None:
        return provider_not_configured()
    try:
        details = await catalog.movie_details(movie_id)
    except ProviderError as exc:
        log.warning("movie_details_failed", movie_id=movie_id, error=str(exc))
        return provider_failed(exc)
    return JSONResponse(content=movie_details_to_dict(details))


@router.get("/tv/{tv_id}")
async def tv_details(
    request: Request,
    tv_id: str,
    season: int | None = Query(default=None, ge=1),
) -> JSONResponse:
    """Series details; ``season`` narrows the episode list to one season."""
    catalog = _catalog(request)
    if catalog is None:
        return provider_not_configured()
    try:
        details = await catalog.tv_details(tv_id)
    except ProviderError as exc:
        log.warning("tv_details_failed", tv_id=tv_id, error=str(exc))
        return provider_failed(exc)
    return JSONResponse(content=tv_details_to_dict(details, season))
