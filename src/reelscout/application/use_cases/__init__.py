from .catalog import BrowseOptions, CatalogUseCase, HomeRows
from .playback import PlaybackRequest, PlaybackUseCase, build_embed_url
from .search import SearchAggregator, fetch_track_page, run_search

__all__ = [
    "BrowseOptions",
    "CatalogUseCase",
    "HomeRows",
    "PlaybackRequest",
    "PlaybackUseCase",
    "SearchAggregator",
    "build_embed_url",
    "fetch_track_page",
    "run_search",
]
