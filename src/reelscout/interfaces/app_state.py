"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from reelscout.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from reelscout.application.use_cases.catalog import CatalogUseCase
    from reelscout.application.use_cases.playback import PlaybackUseCase
    from reelscout.domain.ports.metadata import MetadataProviderPort


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Metadata provider (optional: requires a TMDB API key)
    metadata_provider: MetadataProviderPort | None

    # Application services
    catalog_uc: CatalogUseCase | None
    playback_uc: PlaybackUseCase
