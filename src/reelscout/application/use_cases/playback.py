"""Playback use case — build the external player embed URL.

Playback itself is delegated to an embedded third-party player; this module
only knows its URL scheme, keyed by id/type/season/episode/language.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol
from urllib.parse import urlencode

from reelscout.domain.entities.media import MediaKind

PlaybackLanguage = Literal["en", "fr"]

PLAYBACK_LANGUAGES: tuple[PlaybackLanguage, ...] = ("en", "fr")


class _PlaybackConfig(Protocol):
    """Configuration values consumed by the embed URL builder."""

    default_language: PlaybackLanguage
    en_base_url: str
    fr_base_url: str


@dataclass(frozen=True)
class PlaybackRequest:
    """A ready-to-embed player URL plus its display title."""

    url: str
    title: str
    language: PlaybackLanguage


def build_embed_url(
    media_id: str,
    kind: MediaKind,
    season: int | None = None,
    episode: int | None = None,
    language: PlaybackLanguage = "en",
    *,
    en_base_url: str = "https://vidsrc.to/embed",
    fr_base_url: str = "https://frembed.top/api",
) -> str:
    """Return the embed URL for a movie or a series episode.

    Series default to season 1, episode 1 when either is omitted.

    Raises:
        ValueError: On an unknown language/kind or a season/episode < 1.
    """
    if language not in PLAYBACK_LANGUAGES:
        raise ValueError(f"unsupported playback language: {language!r}")
    if kind not in ("movie", "tv"):
        raise ValueError(f"unsupported media kind: {kind!r}")

    if kind == "tv":
        season = 1 if season is None else season
        episode = 1 if episode is None else episode
        if season < 1 or episode < 1:
            raise ValueError("season and episode must be >= 1")

    en_base = en_base_url.rstrip("/")
    fr_base = fr_base_url.rstrip("/")

    if language == "fr":
        if kind == "movie":
            return f"{fr_base}/film.php?{urlencode({'id': media_id})}"
        query = urlencode({"id": media_id, "sa": season, "epi": episode})
        return f"{fr_base}/serie.php?{query}"

    if kind == "movie":
        return f"{en_base}/movie/{media_id}"
    return f"{en_base}/tv/{media_id}/{season}/{episode}"


class PlaybackUseCase:
    """Builds playback requests from the configured embed endpoints."""

    def __init__(self, config: _PlaybackConfig) -> None:
        self._config = config

    def movie(
        self, movie_id: str, title: str = "", language: PlaybackLanguage | None = None
    ) -> PlaybackRequest:
        lang = language or self._config.default_language
        url = build_embed_url(
            movie_id,
            "movie",
            language=lang,
            en_base_url=self._config.en_base_url,
            fr_base_url=self._config.fr_base_url,
        )
        return PlaybackRequest(url=url, title=title, language=lang)

    def episode(
        self,
        tv_id: str,
        season: int | None = None,
        episode: int | None = None,
        title: str = "",
        language: PlaybackLanguage | None = None,
    ) -> PlaybackRequest:
        lang = language or self._config.default_language
        season = 1 if season is None else season
        episode = 1 if episode is None else episode
        url = build_embed_url(
            tv_id,
            "tv",
            season,
            episode,
            lang,
            en_base_url=self._config.en_base_url,
            fr_base_url=self._config.fr_base_url,
        )
        label = f"{title} - Season {season}, Episode {episode}" if title else ""
        return PlaybackRequest(url=url, title=label, language=lang)
