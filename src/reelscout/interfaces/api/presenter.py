"""JSON presenters for API responses.

Field names follow the camelCase keys the web client reads.
"""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from reelscout.domain.entities.media import (
    Episode,
    MediaSummary,
    MovieDetails,
    ResultPage,
    TaggedItem,
    TvDetails,
)
from reelscout.domain.exceptions import ProviderAuthError, ProviderError
from reelscout.domain.pagination import PageInfo, PageMarker, result_range
from reelscout.domain.search_state import AllView, TrackView


def media_to_dict(item: MediaSummary) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "type": item.kind,
        "year": item.year,
        "rating": item.rating,
        "poster": item.poster,
        "genres": list(item.genres),
        "description": item.description,
    }


def episode_to_dict(episode: Episode) -> dict[str, Any]:
    return {
        "season": episode.season,
        "episode": episode.episode,
        "title": episode.title,
        "duration": episode.duration,
    }


def tagged_to_dict(tagged: TaggedItem) -> dict[str, Any]:
    return {"key": tagged.key, **media_to_dict(tagged.item)}


def movie_details_to_dict(details: MovieDetails) -> dict[str, Any]:
    return {**media_to_dict(details.summary), "duration": details.duration}


def tv_details_to_dict(details: TvDetails, season: int | None = None) -> dict[str, Any]:
    episodes = (
        details.episodes_for_season(season) if season is not None else details.episodes
    )
    return {
        **media_to_dict(details.summary),
        "seasons": details.seasons,
        "episodes": [episode_to_dict(e) for e in episodes],
    }


def _showing(bounds: tuple[int, int] | None) -> dict[str, int] | None:
    if bounds is None:
        return None
    return {"start": bounds[0], "end": bounds[1]}


def _pagination(info: PageInfo, pages: list[PageMarker]) -> dict[str, Any]:
    return {
        "page": info.page,
        "totalPages": info.total_pages,
        "hasControls": info.has_controls,
        "hasPrevious": info.has_previous,
        "hasNext": info.has_next,
        "previousPage": info.previous_page,
        "nextPage": info.next_page,
        "pages": pages,
    }


def result_page_to_dict(
    page: ResultPage[MediaSummary], pages: list[PageMarker]
) -> dict[str, Any]:
    info = PageInfo(page=page.page, total_pages=page.total_pages)
    return {
        "items": [media_to_dict(i) for i in page.items],
        "total": page.total,
        "limit": page.limit,
        "showing": _showing(result_range(page.page, page.limit, page.total)),
        "pagination": _pagination(info, pages),
    }


def track_view_to_dict(view: TrackView) -> dict[str, Any]:
    return {
        "items": [media_to_dict(i) for i in view.items],
        "total": view.total,
        "pageSize": view.page_size,
        "showing": _showing(view.showing),
        "loading": view.loading,
        "error": view.error,
        "pagination": _pagination(view.info, view.pages),
    }


def all_view_to_dict(view: AllView) -> dict[str, Any]:
    return {
        "items": [tagged_to_dict(t) for t in view.combined.items],
        "total": view.combined.total,
        "showing": _showing(view.showing),
        "loading": view.loading,
        "error": view.error,
    }


def error_response(status_code: int, error: str, detail: str = "") -> JSONResponse:
    content: dict[str, str] = {"error": error}
    if detail:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


def provider_not_configured() -> JSONResponse:
    return error_response(
        503, "provider_not_configured", "Set REELSCOUT_TMDB_API_KEY to enable this"
    )


def provider_failed(exc: ProviderError) -> JSONResponse:
    if isinstance(exc, ProviderAuthError):
        return error_response(502, "provider_auth_failed", str(exc))
    return error_response(502, "provider_unavailable", str(exc))
