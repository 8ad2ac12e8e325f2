"""Port for metadata provider operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from reelscout.domain.entities.media import (
    Episode,
    MediaKind,
    MediaSummary,
    MovieDetails,
    TvDetails,
)


@dataclass(frozen=True)
class ProviderPage:
    """Raw provider page: the items of one upstream page plus its total."""

    items: list[MediaSummary] = field(default_factory=list)
    total: int = 0


@runtime_checkable
class MetadataProviderPort(Protocol):
    """Async interface for the third-party metadata source.

    Every method raises ``ProviderError`` on network, timeout or
    malformed-response failures.
    """

    async def fetch_page(
        self, kind: MediaKind, query: str, page: int = 1
    ) -> ProviderPage:
        """Search one kind of title by free text."""
        ...

    async def trending(self, kind: MediaKind) -> list[MediaSummary]:
        """Today's trending titles (no pagination metadata)."""
        ...

    async def upcoming_movies(self) -> list[MediaSummary]:
        """Latest / upcoming movie releases (no pagination metadata)."""
        ...

    async def popular(self, kind: MediaKind, page: int = 1) -> ProviderPage:
        """Popular listing used for browsing."""
        ...

    async def genres(self, kind: MediaKind) -> list[str]:
        """Known genre names for a kind of title."""
        ...

    async def movie_details(self, movie_id: str) -> MovieDetails:
        """Detail data for a single movie."""
        ...

    async def tv_details(self, tv_id: str) -> TvDetails:
        """Detail data for a series, without episodes."""
        ...

    async def season_episodes(self, tv_id: str, season: int) -> list[Episode]:
        """Episode list of one season."""
        ...
