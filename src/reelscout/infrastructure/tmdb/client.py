"""TMDB API client: async httpx implementation of ``MetadataProviderPort``."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from reelscout.domain.entities.media import (
    Episode,
    MediaKind,
    MediaSummary,
    MovieDetails,
    TvDetails,
)
from reelscout.domain.exceptions import ProviderAuthError, ProviderError
from reelscout.domain.pagination import coerce_total
from reelscout.domain.ports.metadata import ProviderPage

from .genres import genre_names, genre_table

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"
_POSTER_BASE = "https://image.tmdb.org/t/p/w500"


def _year(date: Any) -> str:
    return date[:4] if isinstance(date, str) and len(date) >= 4 else ""


def _rating(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ""
    return f"{value:.1f}"


def _movie_runtime(minutes: Any) -> str:
    """Render a movie runtime as ``"2h 32m"`` / ``"45m"``; ``""`` when unknown."""
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        return ""
    hours, mins = divmod(minutes, 60)
    if not hours:
        return f"{mins}m"
    return f"{hours}h {mins}m"


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return None
    return value


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _episode_runtime(minutes: Any) -> str:
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        return "N/A"
    return f"{minutes}m"


class HttpxTmdbClient:
    """Async TMDB client using a shared ``httpx.AsyncClient``.

    Implements ``MetadataProviderPort`` from domain.ports.metadata. Every
    failure (transport, timeout, non-2xx, malformed JSON) is raised as
    ``ProviderError``; a rejected API key as ``ProviderAuthError``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        base_url: str = _BASE_URL,
        language: str = "en-US",
        image_base_url: str = _POSTER_BASE,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._language = language
        self._image_base = image_base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: Any) -> dict[str, Any]:
        return {"api_key": self._api_key, "language": self._language, **extra}

    async def _get(self, path: str, **extra: Any) -> dict[str, Any]:
        """GET ``path`` and return the decoded JSON object.

        Raises:
            ProviderAuthError: On HTTP 401.
            ProviderError: On any other failure.
        """
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(url, params=self._params(**extra))
        except httpx.TimeoutException as exc:
            log.warning("tmdb_timeout", path=path)
            raise ProviderError(f"TMDB request timed out: {path}") from exc
        except httpx.HTTPError as exc:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            raise ProviderError(f"TMDB request failed: {path}") from exc

        if resp.status_code == 401:
            log.error("tmdb_api_key_invalid", status=401)
            raise ProviderAuthError("TMDB rejected the API key")
        if resp.status_code >= 400:
            log.warning("tmdb_http_error", path=path, status=resp.status_code)
            raise ProviderError(f"TMDB returned HTTP {resp.status_code} for {path}")

        try:
            data = resp.json()
        except ValueError as exc:
            log.warning("tmdb_invalid_json", path=path)
            raise ProviderError(f"TMDB returned invalid JSON for {path}") from exc
        if not isinstance(data, dict):
            raise ProviderError(f"TMDB returned an unexpected payload for {path}")
        return data

    def _poster_url(self, poster_path: Any) -> str:
        if not poster_path or not isinstance(poster_path, str):
            return ""
        return f"{self._image_base}{poster_path}"

    def _to_summary(self, kind: MediaKind, item: dict[str, Any]) -> MediaSummary:
        if kind == "movie":
            title = _text(item.get("title")) or _text(item.get("original_title"))
            date = item.get("release_date")
        else:
            title = _text(item.get("name")) or _text(item.get("original_name"))
            date = item.get("first_air_date")

        if "genres" in item and isinstance(item["genres"], list):
            genres = [
                g["name"]
                for g in item["genres"]
                if isinstance(g, dict) and isinstance(g.get("name"), str)
            ]
        else:
            ids = item.get("genre_ids")
            genres = genre_names(kind, ids) if isinstance(ids, list) else []

        return MediaSummary(
            id=str(item.get("id", "")),
            title=title,
            kind=kind,
            year=_year(date),
            rating=_rating(item.get("vote_average")),
            poster=self._poster_url(item.get("poster_path")),
            genres=genres,
            description=_text(item.get("overview")),
        )

    def _to_summaries(
        self, kind: MediaKind, data: dict[str, Any]
    ) -> list[MediaSummary]:
        results = data.get("results")
        if not isinstance(results, list):
            raise ProviderError("TMDB response has no results list")
        return [self._to_summary(kind, r) for r in results if isinstance(r, dict)]

    def _to_page(self, kind: MediaKind, data: dict[str, Any]) -> ProviderPage:
        return ProviderPage(
            items=self._to_summaries(kind, data),
            total=coerce_total(data.get("total_results")),
        )

    # ------------------------------------------------------------------
    # Public API (MetadataProviderPort)
    # ------------------------------------------------------------------

    async def fetch_page(
        self, kind: MediaKind, query: str, page: int = 1
    ) -> ProviderPage:
        data = await self._get(
            f"/search/{kind}", query=query, include_adult="false", page=page
        )
        page_data = self._to_page(kind, data)
        log.debug(
            "tmdb_search",
            kind=kind,
            query=query,
            page=page,
            items=len(page_data.items),
            total=page_data.total,
        )
        return page_data

    async def trending(self, kind: MediaKind) -> list[MediaSummary]:
        return self._to_summaries(kind, await self._get(f"/trending/{kind}/day"))

    async def upcoming_movies(self) -> list[MediaSummary]:
        return self._to_summaries("movie", await self._get("/movie/upcoming", page=1))

    async def popular(self, kind: MediaKind, page: int = 1) -> ProviderPage:
        return self._to_page(kind, await self._get(f"/{kind}/popular", page=page))

    async def genres(self, kind: MediaKind) -> list[str]:
        # TMDB genre ids are stable; served from the static table.
        return list(genre_table(kind).values())

    async def movie_details(self, movie_id: str) -> MovieDetails:
        data = await self._get(f"/movie/{movie_id}")
        return MovieDetails(
            summary=self._to_summary("movie", data),
            duration=_movie_runtime(data.get("runtime")),
        )

    async def tv_details(self, tv_id: str) -> TvDetails:
        data = await self._get(f"/tv/{tv_id}")
        seasons = data.get("number_of_seasons")
        if isinstance(seasons, bool) or not isinstance(seasons, int) or seasons < 0:
            seasons = 0
        return TvDetails(summary=self._to_summary("tv", data), seasons=seasons)

    async def season_episodes(self, tv_id: str, season: int) -> list[Episode]:
        data = await self._get(f"/tv/{tv_id}/season/{season}")
        raw = data.get("episodes")
        if not isinstance(raw, list):
            return []
        episodes: list[Episode] = []
        for ep in raw:
            if not isinstance(ep, dict):
                continue
            number = _positive_int(ep.get("episode_number"))
            if number is None:
                log.debug("tmdb_episode_skipped", tv_id=tv_id, season=season)
                continue
            episodes.append(
                Episode(
                    season=_positive_int(ep.get("season_number")) or season,
                    episode=number,
                    title=_text(ep.get("name")),
                    duration=_episode_runtime(ep.get("runtime")),
                )
            )
        return episodes
