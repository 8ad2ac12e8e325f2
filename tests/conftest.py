"""Shared test fixtures for the ReelScout test suite."""

from __future__ import annotations

import os

import pytest

from reelscout.domain.entities.media import MediaSummary
from reelscout.infrastructure.config import AppConfig

# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep REELSCOUT_* variables of the host shell out of every test."""
    for name in list(os.environ):
        if name.upper().startswith("REELSCOUT_"):
            monkeypatch.delenv(name)


# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def movie() -> MediaSummary:
    return MediaSummary(
        id="550",
        title="Fight Club",
        kind="movie",
        year="1999",
        rating="8.4",
        poster="https://image.tmdb.org/t/p/w500/poster.jpg",
        genres=["Drama"],
        description="An insomniac office worker...",
    )


@pytest.fixture()
def show() -> MediaSummary:
    return MediaSummary(
        id="1396",
        title="Breaking Bad",
        kind="tv",
        year="2008",
        rating="8.9",
        genres=["Drama", "Crime"],
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def app_config() -> AppConfig:
    """Test config with a (fake) TMDB key so provider endpoints are enabled."""
    return AppConfig.model_validate(
        {"environment": "test", "tmdb": {"api_key": "test-key"}}
    )
