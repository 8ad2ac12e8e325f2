"""Domain entities for catalog titles and result pages.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar

from reelscout.domain.pagination import total_pages

MediaKind = Literal["movie", "tv"]

T = TypeVar("T")


@dataclass(frozen=True)
class MediaSummary:
    """Catalog item as supplied by the metadata provider (read-only)."""

    id: str  # Provider ID, e.g. "550"
    title: str
    kind: MediaKind
    year: str = ""  # "1999"
    rating: str = ""  # "8.4"
    poster: str = ""  # Absolute poster URL
    genres: list[str] = field(default_factory=list)
    description: str = ""


@dataclass(frozen=True)
class Episode:
    """A single episode in a series season listing."""

    season: int
    episode: int
    title: str
    duration: str = "N/A"  # "48m" or "N/A"


@dataclass(frozen=True)
class MovieDetails:
    """Movie detail page data."""

    summary: MediaSummary
    duration: str = ""  # "2h 32m"


@dataclass(frozen=True)
class TvDetails:
    """Series detail page data with its flattened episode list."""

    summary: MediaSummary
    seasons: int = 0
    episodes: list[Episode] = field(default_factory=list)

    def episodes_for_season(self, season: int) -> list[Episode]:
        return [e for e in self.episodes if e.season == season]


@dataclass(frozen=True)
class ResultPage(Generic[T]):
    """One page of items plus the total count reported by the source.

    ``items`` never holds more than ``limit`` entries; longer input is
    truncated on construction.
    """

    items: tuple[T, ...] = ()
    total: int = 0
    page: int = 1
    limit: int = 20

    def __post_init__(self) -> None:
        items = tuple(self.items)
        if self.limit >= 0 and len(items) > self.limit:
            items = items[: self.limit]
        object.__setattr__(self, "items", items)
        if self.total < 0:
            object.__setattr__(self, "total", 0)

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    @classmethod
    def empty(cls, page: int = 1, limit: int = 20) -> ResultPage[T]:
        return cls(items=(), total=0, page=page, limit=limit)


@dataclass(frozen=True)
class TaggedItem:
    """A summary tagged with the list it came from (combined view entry)."""

    kind: MediaKind
    item: MediaSummary

    @property
    def key(self) -> str:
        """Stable identity across both lists, e.g. ``"movie-550"``."""
        return f"{self.kind}-{self.item.id}"


@dataclass(frozen=True)
class CombinedResult:
    """Concatenation of the current movie page and the current TV page.

    ``total`` is the sum of both underlying totals. Never persisted.
    """

    items: tuple[TaggedItem, ...] = ()
    total: int = 0
