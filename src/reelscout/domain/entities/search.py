"""Search query value object and its URL-state representation.

The URL surface (``q``, ``tab``, ``moviePage``, ``tvPage``, ``pageSize``)
supports deep links and back-button navigation. Parameters equal to their
default are omitted on serialization so that parse -> serialize is lossless.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, cast
from urllib.parse import urlencode

from reelscout.domain.exceptions import InvalidSearchQueryError

SearchTab = Literal["all", "movies", "tv"]

SEARCH_TABS: tuple[SearchTab, ...] = ("all", "movies", "tv")
PAGE_SIZES: tuple[int, ...] = (20, 40, 60)
DEFAULT_PAGE_SIZE = 20
DEFAULT_TAB: SearchTab = "all"

# URL parameter names (order is the serialization order)
PARAM_QUERY = "q"
PARAM_TAB = "tab"
PARAM_MOVIE_PAGE = "moviePage"
PARAM_TV_PAGE = "tvPage"
PARAM_PAGE_SIZE = "pageSize"


def _parse_int(raw: str | None) -> int | None:
    """ASCII decimal digits only; None for anything ``int()`` would reject."""
    if raw is None:
        return None
    raw = raw.strip()
    if not (raw.isascii() and raw.isdecimal()):
        return None
    try:
        return int(raw)
    except ValueError:
        # Longer than the interpreter's int-string conversion limit.
        return None


def _parse_page(raw: str | None) -> int:
    value = _parse_int(raw)
    return value if value is not None and value >= 1 else 1


def _parse_page_size(raw: str | None) -> int:
    value = _parse_int(raw)
    return value if value in PAGE_SIZES else DEFAULT_PAGE_SIZE


def _parse_tab(raw: str | None) -> SearchTab:
    if raw in SEARCH_TABS:
        return cast(SearchTab, raw)
    return DEFAULT_TAB


@dataclass(frozen=True)
class SearchQuery:
    """Session-owned search parameters for one search view.

    Invariants: ``movie_page >= 1``, ``tv_page >= 1`` and
    ``page_size in PAGE_SIZES``.
    """

    text: str = ""
    page_size: int = DEFAULT_PAGE_SIZE
    movie_page: int = 1
    tv_page: int = 1
    active_tab: SearchTab = DEFAULT_TAB

    def __post_init__(self) -> None:
        if self.page_size not in PAGE_SIZES:
            raise InvalidSearchQueryError(
                f"page_size must be one of {PAGE_SIZES}, got {self.page_size}"
            )
        if self.movie_page < 1 or self.tv_page < 1:
            raise InvalidSearchQueryError(
                f"pages must be >= 1, got movie_page={self.movie_page} "
                f"tv_page={self.tv_page}"
            )
        if self.active_tab not in SEARCH_TABS:
            raise InvalidSearchQueryError(f"unknown tab: {self.active_tab!r}")

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())

    # ------------------------------------------------------------------
    # URL state
    # ------------------------------------------------------------------

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> SearchQuery:
        """Build a query from URL parameters.

        Missing or malformed values fall back to their defaults; a deep
        link never fails to load.
        """
        return cls(
            text=params.get(PARAM_QUERY) or "",
            page_size=_parse_page_size(params.get(PARAM_PAGE_SIZE)),
            movie_page=_parse_page(params.get(PARAM_MOVIE_PAGE)),
            tv_page=_parse_page(params.get(PARAM_TV_PAGE)),
            active_tab=_parse_tab(params.get(PARAM_TAB)),
        )

    def to_params(self) -> dict[str, str]:
        """Serialize to URL parameters, omitting defaults."""
        params: dict[str, str] = {}
        if self.text:
            params[PARAM_QUERY] = self.text
        if self.active_tab != DEFAULT_TAB:
            params[PARAM_TAB] = self.active_tab
        if self.movie_page != 1:
            params[PARAM_MOVIE_PAGE] = str(self.movie_page)
        if self.tv_page != 1:
            params[PARAM_TV_PAGE] = str(self.tv_page)
        if self.page_size != DEFAULT_PAGE_SIZE:
            params[PARAM_PAGE_SIZE] = str(self.page_size)
        return params

    def to_query_string(self) -> str:
        """``to_params()`` urlencoded in a stable order ("" when all default)."""
        return urlencode(self.to_params())
