"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from reelscout.infrastructure.config import AppConfig
from reelscout.interfaces.app_state import AppState
from reelscout.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, metadata provider, use cases) are created in
    lifespan().
    """
    app = FastAPI(
        title="ReelScout",
        description="Movie and TV catalog browsing and search API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from reelscout.interfaces.api.catalog.router import router as catalog_router
    from reelscout.interfaces.api.playback.router import router as playback_router
    from reelscout.interfaces.api.search.router import router as search_router

    app.include_router(catalog_router, prefix="/api/v1")
    app.include_router(search_router, prefix="/api/v1")
    app.include_router(playback_router, prefix="/api/v1")

    @app.get("/api/v1/healthz")
    async def healthz() -> dict[str, str | bool]:
        """Liveness probe; also reports whether the provider is configured."""
        provider = getattr(app.state, "metadata_provider", None)
        return {"status": "ok", "provider_configured": provider is not None}

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
