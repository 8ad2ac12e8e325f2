"""Search endpoint: two independently paginated tracks plus the combined view.

The query parameters are the same ones the search page keeps in its URL
(``q``, ``tab``, ``moviePage``, ``tvPage``, ``pageSize``), so a shared link
maps 1:1 onto an API call.
"""

from __future__ import annotations

from dataclasses import replace
from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from reelscout.application.use_cases.search import run_search
from reelscout.domain.entities.search import PARAM_PAGE_SIZE, SearchQuery
from reelscout.domain.search_state import all_view, track_view
from reelscout.interfaces.api.presenter import (
    all_view_to_dict,
    provider_not_configured,
    track_view_to_dict,
)
from reelscout.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["search"])


@router.get("/search")
async def search(request: Request) -> JSONResponse:
    """Search movies and TV shows concurrently.

    Malformed parameters fall back to their defaults. A failure of one
    track is reported in that track's ``error`` field and never fails the
    request; ``all.error`` is only set when both tracks failed.
    """
    state = cast(AppState, request.app.state)
    provider = getattr(state, "metadata_provider", None)
    if provider is None:
        return provider_not_configured()

    params = dict(request.query_params)
    query = SearchQuery.from_params(params)
    if PARAM_PAGE_SIZE not in params:
        query = replace(query, page_size=state.config.search.default_page_size)

    result = await run_search(provider, query)
    delta = state.config.search.window_delta

    log.info(
        "search_served",
        text=query.text,
        movie_page=query.movie_page,
        tv_page=query.tv_page,
        page_size=query.page_size,
        movies_error=result.movies.error is not None,
        tv_error=result.tv.error is not None,
    )

    return JSONResponse(
        content={
            "query": query.to_params(),
            "queryString": query.to_query_string(),
            "active": query.active_tab,
            "all": all_view_to_dict(all_view(result)),
            "movies": track_view_to_dict(track_view(result, "movies", delta)),
            "tv": track_view_to_dict(track_view(result, "tv", delta)),
        }
    )
