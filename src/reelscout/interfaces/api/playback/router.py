"""Playback endpoints: resolve the embedded player URL for a title."""

from __future__ import annotations

from typing import Optional, cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from reelscout.application.use_cases.playback import PlaybackLanguage, PlaybackRequest
from reelscout.interfaces.api.presenter import error_response
from reelscout.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/play", tags=["playback"])


def _to_dict(req: PlaybackRequest) -> dict[str, str]:
    return {"url": req.url, "title": req.title, "language": req.language}


@router.get("/movie/{movie_id}")
async def play_movie(
    request: Request,
    movie_id: str,
    title: str = Query(default=""),
    lang: Optional[PlaybackLanguage] = Query(default=None),
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        req = state.playback_uc.movie(movie_id, title=title, language=lang)
    except ValueError as exc:
        return error_response(400, "invalid_playback_request", str(exc))
    log.info(
        "playback_resolved", kind="movie", media_id=movie_id, language=req.language
    )
    return JSONResponse(content=_to_dict(req))


@router.get("/tv/{tv_id}")
async def play_episode(
    request: Request,
    tv_id: str,
    season: Optional[int] = Query(default=None),
    episode: Optional[int] = Query(default=None),
    title: str = Query(default=""),
    lang: Optional[PlaybackLanguage] = Query(default=None),
) -> JSONResponse:
    """Episode player URL; season and episode default to 1."""
    state = cast(AppState, request.app.state)
    try:
        req = state.playback_uc.episode(
            tv_id, season=season, episode=episode, title=title, language=lang
        )
    except ValueError as exc:
        return error_response(400, "invalid_playback_request", str(exc))
    log.info(
        "playback_resolved",
        kind="tv",
        media_id=tv_id,
        season=season or 1,
        episode=episode or 1,
        language=req.language,
    )
    return JSONResponse(content=_to_dict(req))
