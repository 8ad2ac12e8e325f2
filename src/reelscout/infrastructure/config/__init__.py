"""Layered configuration: defaults < YAML < env (REELSCOUT_*) < CLI."""

from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, PlaybackConfig, SearchConfig, TmdbConfig

__all__ = [
    "AppConfig",
    "EnvOverrides",
    "PlaybackConfig",
    "SearchConfig",
    "TmdbConfig",
    "load_config",
]
