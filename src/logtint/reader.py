"""Log file reading for the command line viewer."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def read_file(path: Path) -> list[str]:
    """Read all lines from a file, newline-stripped."""
    with path.open(encoding="utf-8", errors="replace") as f:
        return [raw_line.rstrip("\n") for raw_line in f]


def is_pipe() -> bool:
    """Check if stdin is a pipe (not a terminal)."""
    return not sys.stdin.isatty()


def read_stdin() -> list[str]:
    """Read all lines from stdin, newline-stripped."""
    return [raw_line.rstrip("\n") for raw_line in sys.stdin]
