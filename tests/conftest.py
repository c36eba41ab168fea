"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

SAMPLE_LINES = [
    "2024-01-15T10:30:00 [main] INFO Server started on port 8080",
    "2024-01-15T10:30:01 [db] DEBUG connection pool warmed",
    '2024-01-15T10:30:02 [api] ERROR request failed {"code": 500, "retry": false}',
    "2024-01-15T10:30:03 [api] WARN slow response from upstream",
    '10:30:04 worker done {"jobs": [1, 2, 3], "owner": null}',
    "plain text without any markers",
    "",
    "2024-01-15T10:30:05 [main] INFO healthcheck ok",
]


@pytest.fixture
def sample_log_file(tmp_path: Path) -> Path:
    """Create a temporary log file with sample content."""
    log_file = tmp_path / "test.log"
    log_file.write_text("\n".join(SAMPLE_LINES) + "\n")
    return log_file


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings directory at a temporary location."""
    d = tmp_path / "config"
    monkeypatch.setenv("LOGTINT_CONFIG_DIR", str(d))
    return d
