"""Integration tests for configuration loading with layered precedence.

Exercises the real load_config() with YAML files, environment variables,
.env files and CLI overrides: defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from reelscout.infrastructure.config.load import load_config

pytestmark = pytest.mark.integration


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "reelscout-test",
        "environment": "test",
        "http": {"timeout_seconds": 15.0, "user_agent": "TestAgent/1.0"},
        "logging": {"level": "DEBUG", "format": "console"},
        "tmdb": {"api_key": "yaml-key", "language": "fr-FR"},
        "search": {"debounce_ms": 300, "default_page_size": 40},
        "playback": {"default_language": "fr"},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


class TestDefaultsOnly:
    def test_defaults_produce_valid_config(self) -> None:
        config = load_config()
        assert config.app_name == "reelscout"
        assert config.environment == "dev"
        assert config.http_timeout_seconds == 10.0
        assert config.log_level == "INFO"
        assert config.log_format == "console"
        assert config.tmdb.api_key is None
        assert config.tmdb.language == "en-US"
        assert config.search.debounce_ms == 500
        assert config.search.default_page_size == 20
        assert config.search.window_delta == 2
        assert config.playback.default_language == "en"
        assert config.playback.en_base_url == "https://vidsrc.to/embed"


class TestYamlOverrides:
    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "reelscout-test"
        assert config.http_timeout_seconds == 15.0
        assert config.http_user_agent == "TestAgent/1.0"
        assert config.log_level == "DEBUG"
        assert config.tmdb.api_key == "yaml-key"
        assert config.tmdb.language == "fr-FR"
        assert config.search.debounce_ms == 300
        assert config.search.default_page_size == 40
        assert config.playback.default_language == "fr"

    def test_partial_section_preserves_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "partial.yaml"
        path.write_text(yaml.dump({"search": {"window_delta": 1}}), encoding="utf-8")

        config = load_config(config_path=path)
        assert config.search.window_delta == 1
        assert config.search.debounce_ms == 500
        assert config.tmdb.image_base_url == "https://image.tmdb.org/t/p/w500"

    def test_flat_keys_in_yaml_map_to_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "flat.yaml"
        path.write_text(
            yaml.dump({"tmdb_api_key": "flat-key", "search_debounce_ms": 250}),
            encoding="utf-8",
        )

        config = load_config(config_path=path)
        assert config.tmdb.api_key == "flat-key"
        assert config.search.debounce_ms == 250
        assert config.search.default_page_size == 20

    def test_empty_yaml_is_allowed(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(config_path=path).app_name == "reelscout"

    def test_yaml_must_be_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(config_path=path)

    def test_yaml_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_invalid_value_fails_validation(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(
            yaml.dump({"search": {"default_page_size": 25}}), encoding="utf-8"
        )
        with pytest.raises(ValidationError):
            load_config(config_path=path)


class TestEnvOverrides:
    def test_env_overrides_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REELSCOUT_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("REELSCOUT_TMDB_API_KEY", "env-key")
        monkeypatch.setenv("REELSCOUT_SEARCH_DEBOUNCE_MS", "750")

        config = load_config(config_path=yaml_config)
        assert config.log_level == "WARNING"
        assert config.tmdb.api_key == "env-key"
        assert config.search.debounce_ms == 750
        # YAML values not overridden by ENV stay
        assert config.tmdb.language == "fr-FR"

    def test_env_overrides_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REELSCOUT_ENVIRONMENT", "prod")
        monkeypatch.setenv("REELSCOUT_PLAYBACK_DEFAULT_LANGUAGE", "fr")

        config = load_config()
        assert config.environment == "prod"
        assert config.log_format == "json"
        assert config.playback.default_language == "fr"

    def test_dotenv_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        dotenv = tmp_path / ".env"
        dotenv.write_text("REELSCOUT_TMDB_API_KEY=dotenv-key\n", encoding="utf-8")
        # load_dotenv writes into os.environ; let monkeypatch restore it.
        monkeypatch.setenv("REELSCOUT_TMDB_API_KEY", "")
        monkeypatch.delenv("REELSCOUT_TMDB_API_KEY")

        config = load_config(dotenv_path=dotenv)
        assert config.tmdb.api_key == "dotenv-key"

    def test_dotenv_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / ".env.missing")


class TestCliOverrides:
    def test_cli_overrides_yaml_and_env(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REELSCOUT_LOG_LEVEL", "WARNING")

        config = load_config(
            config_path=yaml_config,
            cli_overrides={"log_level": "ERROR", "tmdb_api_key": "cli-key"},
        )
        assert config.log_level == "ERROR"
        assert config.tmdb.api_key == "cli-key"

    def test_cli_overrides_with_sectioned_format(self, yaml_config: Path) -> None:
        config = load_config(
            config_path=yaml_config,
            cli_overrides={"http": {"timeout_seconds": 5.0}},
        )
        assert config.http_timeout_seconds == 5.0
        assert config.http_user_agent == "TestAgent/1.0"
