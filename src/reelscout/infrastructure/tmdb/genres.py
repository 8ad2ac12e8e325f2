"""Static TMDB genre id -> name tables (en-US).

TMDB list endpoints only carry ``genre_ids``; these tables avoid an extra
``/genre/*/list`` round trip per request.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from reelscout.domain.entities.media import MediaKind

MOVIE_GENRES: dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}

TV_GENRES: dict[int, str] = {
    10759: "Action & Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    10762: "Kids",
    9648: "Mystery",
    10763: "News",
    10764: "Reality",
    10765: "Sci-Fi & Fantasy",
    10766: "Soap",
    10767: "Talk",
    10768: "War & Politics",
    37: "Western",
}


def genre_table(kind: MediaKind) -> dict[int, str]:
    return MOVIE_GENRES if kind == "movie" else TV_GENRES


def genre_names(kind: MediaKind, ids: Iterable[Any]) -> list[str]:
    """Map ``genre_ids`` to names, skipping unknown or malformed ids."""
    table = genre_table(kind)
    names: list[str] = []
    for raw in ids:
        if isinstance(raw, int) and raw in table:
            names.append(table[raw])
    return names
