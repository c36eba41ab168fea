"""Tests for settings persistence."""

from __future__ import annotations

from pathlib import Path

import pytest

from logtint.config import get_config_dir, load_settings, save_settings
from logtint.models import ViewerSettings


class TestConfig:
    def test_env_override(self, config_dir: Path) -> None:
        assert get_config_dir() == config_dir

    def test_default_dir_without_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LOGTINT_CONFIG_DIR", raising=False)
        assert get_config_dir().name == "logtint"

    def test_missing_file_returns_defaults(self, config_dir: Path) -> None:
        assert load_settings() == ViewerSettings()

    def test_save_and_load_roundtrip(self, config_dir: Path) -> None:
        settings = ViewerSettings(
            hide_query="healthcheck",
            filter_query='error OR "timed out"',
            highlight_query="/user=\\w+/",
            wrap_lines=False,
            heuristic_enabled=False,
        )
        path = save_settings(settings)
        assert path == config_dir / "settings.toml"
        assert load_settings() == settings

    def test_corrupt_file_returns_defaults(self, config_dir: Path) -> None:
        config_dir.mkdir(parents=True)
        (config_dir / "settings.toml").write_text("not = [valid toml")
        assert load_settings() == ViewerSettings()

    def test_wrong_types_return_defaults(self, config_dir: Path) -> None:
        config_dir.mkdir(parents=True)
        (config_dir / "settings.toml").write_text('wrap_lines = "sometimes"\n')
        assert load_settings() == ViewerSettings()

    def test_partial_file_fills_defaults(self, config_dir: Path) -> None:
        config_dir.mkdir(parents=True)
        (config_dir / "settings.toml").write_text('filter_query = "error"\n')
        settings = load_settings()
        assert settings.filter_query == "error"
        assert settings.json_enabled is True
