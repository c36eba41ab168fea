"""Tests for the command line interface."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

from typer.testing import CliRunner

from logtint.cli import app
from logtint.config import load_settings
from logtint.highlight import Highlighter

if TYPE_CHECKING:
    from pathlib import Path

runner = CliRunner()


class TestView:
    def test_prints_all_lines(self, sample_log_file: Path, config_dir: Path) -> None:
        result = runner.invoke(app, ["view", str(sample_log_file)])
        assert result.exit_code == 0
        assert "Server started" in result.output
        assert "plain text without any markers" in result.output

    def test_filter(self, sample_log_file: Path, config_dir: Path) -> None:
        result = runner.invoke(app, ["view", str(sample_log_file), "-f", "error OR warn"])
        assert result.exit_code == 0
        assert "request failed" in result.output
        assert "slow response" in result.output
        assert "Server started" not in result.output

    def test_hide(self, sample_log_file: Path, config_dir: Path) -> None:
        result = runner.invoke(app, ["view", str(sample_log_file), "--hide", "INFO"])
        assert result.exit_code == 0
        assert "Server started" not in result.output
        assert "healthcheck" not in result.output
        assert "pool warmed" in result.output

    def test_stdin(self, config_dir: Path) -> None:
        result = runner.invoke(app, ["view", "-f", "keep"], input="keep me\ndrop me\n")
        assert result.exit_code == 0
        assert "keep me" in result.output
        assert "drop me" not in result.output

    def test_invalid_filter(self, sample_log_file: Path, config_dir: Path) -> None:
        result = runner.invoke(app, ["view", str(sample_log_file), "-f", "(error"])
        assert result.exit_code == 1
        assert "Error: filter: unbalanced '('" in result.output

    def test_missing_file(self, tmp_path: Path, config_dir: Path) -> None:
        result = runner.invoke(app, ["view", str(tmp_path / "nope.log")])
        assert result.exit_code == 1
        assert "is not a file" in result.output

    def test_save_persists_settings(self, sample_log_file: Path, config_dir: Path) -> None:
        result = runner.invoke(app, ["view", str(sample_log_file), "-f", "warn", "--no-json", "--save"])
        assert result.exit_code == 0
        settings = load_settings()
        assert settings.filter_query == "warn"
        assert settings.json_enabled is False

        result = runner.invoke(app, ["view", str(sample_log_file)])
        assert result.exit_code == 0
        assert "slow response" in result.output
        assert "Server started" not in result.output

    def test_flag_overrides_saved_toggle(self, sample_log_file: Path, config_dir: Path) -> None:
        runner.invoke(app, ["view", str(sample_log_file), "--no-json", "--save"])
        result = runner.invoke(app, ["view", str(sample_log_file), "--json", "--save"])
        assert result.exit_code == 0
        assert load_settings().json_enabled is True

    def test_highlighter_built_from_merged_settings(self, sample_log_file: Path, config_dir: Path) -> None:
        with patch.object(Highlighter, "from_settings", wraps=Highlighter.from_settings) as mock_from_settings:
            result = runner.invoke(app, ["view", str(sample_log_file), "-H", "started", "--no-heuristic"])
        assert result.exit_code == 0
        settings = mock_from_settings.call_args.args[0]
        assert settings.highlight_query == "started"
        assert settings.heuristic_enabled is False

    def test_without_save_settings_untouched(self, sample_log_file: Path, config_dir: Path) -> None:
        runner.invoke(app, ["view", str(sample_log_file), "-f", "warn"])
        assert not (config_dir / "settings.toml").exists()


class TestCheck:
    def test_valid_query(self) -> None:
        result = runner.invoke(app, ["check", "a b OR -c"])
        assert result.exit_code == 0
        assert result.output.strip() == "a AND b OR NOT c"

    def test_invalid_query_points_at_position(self) -> None:
        result = runner.invoke(app, ["check", "error AND"])
        assert result.exit_code == 1
        lines = result.output.splitlines()
        assert lines[0] == "error AND"
        assert lines[1] == " " * 9 + "^"
        assert lines[2] == "Error: missing term after 'AND' at position 9"

    def test_long_query(self) -> None:
        query = " OR ".join(f"w{i}" for i in range(2000))
        result = runner.invoke(app, ["check", query])
        assert result.exit_code == 0
        assert result.output.strip() == query
