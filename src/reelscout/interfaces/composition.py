"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from reelscout.application.use_cases.catalog import CatalogUseCase
from reelscout.application.use_cases.playback import PlaybackUseCase
from reelscout.infrastructure.tmdb.client import HttpxTmdbClient
from reelscout.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan hook: initialize and clean up all resources.

    Order matters:
        1. HTTP client (shared by every outgoing request)
        2. Metadata provider (uses the HTTP client; only with an API key)
        3. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Shared HTTP client
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": config.http_user_agent},
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 2) Metadata provider
    if config.tmdb.api_key:
        state.metadata_provider = HttpxTmdbClient(
            api_key=config.tmdb.api_key,
            http_client=state.http_client,
            base_url=config.tmdb.base_url,
            language=config.tmdb.language,
            image_base_url=config.tmdb.image_base_url,
        )
        log.info("tmdb_client_initialized", language=config.tmdb.language)
    else:
        state.metadata_provider = None
        log.warning(
            "tmdb_client_disabled",
            reason="no API key, catalog and search endpoints will answer 503",
        )

    # 3) Use cases
    state.catalog_uc = (
        CatalogUseCase(state.metadata_provider)
        if state.metadata_provider is not None
        else None
    )
    state.playback_uc = PlaybackUseCase(config.playback)

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
