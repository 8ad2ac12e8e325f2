from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTION_KEYS = ("http", "logging", "tmdb", "search", "playback")
_GENERAL_KEYS = ("app_name", "environment")

# Flat (env/CLI) key -> (section, key inside the section)
_FLAT_MAP: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "tmdb_api_key": ("tmdb", "api_key"),
    "tmdb_base_url": ("tmdb", "base_url"),
    "tmdb_language": ("tmdb", "language"),
    "search_debounce_ms": ("search", "debounce_ms"),
    "search_default_page_size": ("search", "default_page_size"),
    "search_window_delta": ("search", "window_delta"),
    "playback_default_language": ("playback", "default_language"),
    "playback_en_base_url": ("playback", "en_base_url"),
    "playback_fr_base_url": ("playback", "fr_base_url"),
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> None:
    """Merge ``override`` into ``base`` in place; nested sections merge by key."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_merge(current, value)
        elif isinstance(value, Mapping):
            base[key] = dict(value)
        else:
            base[key] = value


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer (defaults/YAML/ENV/CLI) into the sectioned shape."""
    out: dict[str, Any] = {}

    for section in _SECTION_KEYS:
        if section in data and isinstance(data[section], Mapping):
            out[section] = dict(data[section])

    for key in _GENERAL_KEYS:
        if key in data:
            out[key] = data[key]

    for flat_key, (section, section_key) in _FLAT_MAP.items():
        if flat_key in data:
            out.setdefault(section, {})
            out[section][section_key] = data[flat_key]

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _layers(
    config_path: Path | None, cli_overrides: Mapping[str, Any]
) -> Iterator[Mapping[str, Any]]:
    """Yield the raw layers, lowest precedence first."""
    yield deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        yield _read_yaml_config(config_path)
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Merge defaults < YAML file < REELSCOUT_* env vars < CLI flags.

    A ``.env`` file only feeds the env layer and never overrides variables
    already set in the process environment. Nothing is written to disk.

    Raises:
        FileNotFoundError: If an explicit config or .env path does not exist.
        ValueError: If the YAML document is not a mapping.
        pydantic.ValidationError: If the merged configuration is invalid.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, cli_overrides or {}):
        _deep_merge(merged, _normalize_layer(layer))
    return AppConfig.model_validate(merged)
