"""XDG directory management and persisted viewer settings."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
from platformdirs import user_config_dir
from pydantic import ValidationError

from logtint.models import ViewerSettings

logger = logging.getLogger(__name__)

_SETTINGS_FILE = "settings.toml"


def get_config_dir() -> Path:
    """Get the logtint config directory.

    Respects LOGTINT_CONFIG_DIR environment variable if set.
    """
    if override := os.environ.get("LOGTINT_CONFIG_DIR"):
        return Path(override)
    return Path(user_config_dir("logtint"))


def load_settings() -> ViewerSettings:
    """Load viewer settings from disk, returning defaults if missing or unreadable."""
    path = get_config_dir() / _SETTINGS_FILE
    if not path.exists():
        return ViewerSettings()
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text())
        return ViewerSettings(**data)
    except (OSError, ValueError, TypeError, ValidationError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return ViewerSettings()


def save_settings(settings: ViewerSettings) -> Path:
    """Save viewer settings to disk. Returns the file path."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / _SETTINGS_FILE
    path.write_bytes(tomli_w.dumps(settings.model_dump()).encode())
    return path
