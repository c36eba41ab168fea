"""In-memory store of received lines and the indices currently visible."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel

from logtint.models import LineEvent, SourceErrorEvent

if TYPE_CHECKING:
    from logtint.filters import FilterState
    from logtint.models import SourceEvent


class BufferedLine(BaseModel):
    """A received line with the local time it arrived."""

    text: str
    captured_at: str


class LogBuffer:
    """Lines delivered by a log source, filtered incrementally as they arrive."""

    def __init__(self) -> None:
        self.lines: list[BufferedLine] = []
        self.visible: list[int] = []
        self.status_message: str | None = None

    def add_line(self, text: str, state: FilterState) -> int:
        """Append a line, recording it as visible if it passes ``state``. Returns its index."""
        idx = len(self.lines)
        self.lines.append(BufferedLine(text=text, captured_at=datetime.now().strftime("%H:%M:%S")))  # noqa: DTZ005
        if state.check_line(text):
            self.visible.append(idx)
        return idx

    def ingest(self, event: SourceEvent, state: FilterState) -> None:
        """Consume one event from the log source."""
        if isinstance(event, LineEvent):
            self.add_line(event.text, state)
        elif isinstance(event, SourceErrorEvent):
            self.status_message = f"Source error: {event.message}"

    def rebuild(self, state: FilterState) -> None:
        """Recompute visible indices after the filter state changed."""
        self.visible = [i for i, line in enumerate(self.lines) if state.check_line(line.text)]

    def clear(self) -> None:
        self.lines.clear()
        self.visible.clear()
        self.status_message = "Cleared"

    def visible_lines(self) -> list[BufferedLine]:
        return [self.lines[i] for i in self.visible]
