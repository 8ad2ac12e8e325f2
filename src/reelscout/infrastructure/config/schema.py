"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
PlaybackLanguage = Literal["en", "fr"]


class TmdbConfig(BaseModel):
    """Metadata provider (TMDB) settings. YAML section: tmdb.*"""

    api_key: Optional[str] = Field(
        default=None,
        description="TMDB API key. Catalog and search endpoints answer 503 without it.",
    )
    base_url: str = Field(
        default="https://api.themoviedb.org/3",
        description="TMDB REST API root.",
    )
    language: str = Field(
        default="en-US",
        description="Language sent with every TMDB request.",
    )
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500",
        description="Prefix for poster paths.",
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_key_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class SearchConfig(BaseModel):
    """Search page behaviour. YAML section: search.*"""

    debounce_ms: int = Field(
        default=500,
        description="Quiet period after the last keystroke before searching.",
    )
    default_page_size: int = Field(
        default=20,
        description="Page size used when the URL does not carry one.",
    )
    window_delta: int = Field(
        default=2,
        description="Neighbours shown on each side of the current page.",
    )

    @field_validator("debounce_ms", "window_delta")
    @classmethod
    def _validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("default_page_size")
    @classmethod
    def _validate_page_size(cls, v: int) -> int:
        if v not in (20, 40, 60):
            raise ValueError("default_page_size must be one of 20, 40, 60")
        return v

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


class PlaybackConfig(BaseModel):
    """Embedded player endpoints. YAML section: playback.*"""

    default_language: PlaybackLanguage = Field(
        default="en",
        description="Player language when a request does not name one.",
    )
    en_base_url: str = Field(
        default="https://vidsrc.to/embed",
        description="Embed root for the English player.",
    )
    fr_base_url: str = Field(
        default="https://frembed.top/api",
        description="Embed root for the French player.",
    )


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/tmdb/search/playback).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    app_name: str = Field(default="reelscout", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout in seconds for metadata provider requests.",
    )
    http_user_agent: str = Field(
        default="ReelScout/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    tmdb: TmdbConfig = Field(default_factory=TmdbConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """Dump configuration in the sectioned shape used by config.yaml."""
        tmdb = self.tmdb.model_dump()
        if tmdb["api_key"]:
            tmdb["api_key"] = "***"
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "tmdb": tmdb,
            "search": self.search.model_dump(),
            "playback": self.playback.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read REELSCOUT_* variables, merges the
    set values into YAML/defaults, then validates AppConfig.

    Supported env var examples (flat, explicit):
    - REELSCOUT_TMDB_API_KEY
    - REELSCOUT_HTTP_TIMEOUT_SECONDS
    - REELSCOUT_SEARCH_DEBOUNCE_MS
    - REELSCOUT_PLAYBACK_DEFAULT_LANGUAGE
    - REELSCOUT_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="REELSCOUT_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    tmdb_api_key: Optional[str] = None
    tmdb_base_url: Optional[str] = None
    tmdb_language: Optional[str] = None

    search_debounce_ms: Optional[int] = None
    search_default_page_size: Optional[int] = None
    search_window_delta: Optional[int] = None

    playback_default_language: Optional[PlaybackLanguage] = None
    playback_en_base_url: Optional[str] = None
    playback_fr_base_url: Optional[str] = None

    def to_update_dict(self) -> dict[str, Any]:
        """Return only values that were actually provided (non-None), for merging."""
        return self.model_dump(exclude_none=True)
