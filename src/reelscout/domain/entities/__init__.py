from .media import (
    CombinedResult,
    Episode,
    MediaKind,
    MediaSummary,
    MovieDetails,
    ResultPage,
    TaggedItem,
    TvDetails,
)
from .search import (
    DEFAULT_PAGE_SIZE,
    PAGE_SIZES,
    SEARCH_TABS,
    SearchQuery,
    SearchTab,
)

__all__ = [
    "CombinedResult",
    "DEFAULT_PAGE_SIZE",
    "Episode",
    "MediaKind",
    "MediaSummary",
    "MovieDetails",
    "PAGE_SIZES",
    "ResultPage",
    "SEARCH_TABS",
    "SearchQuery",
    "SearchTab",
    "TaggedItem",
    "TvDetails",
]
