"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "reelscout",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": "ReelScout/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "tmdb": {
        "api_key": None,
        "language": "en-US",
        "base_url": "https://api.themoviedb.org/3",
        "image_base_url": "https://image.tmdb.org/t/p/w500",
    },
    "search": {
        "debounce_ms": 500,
        "default_page_size": 20,
        "window_delta": 2,
    },
    "playback": {
        "default_language": "en",
        "en_base_url": "https://vidsrc.to/embed",
        "fr_base_url": "https://frembed.top/api",
    },
}
