"""Models shared by the filter and highlighting core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel

HEURISTIC_PRIORITY = 10
STRUCTURE_PRIORITY = 50
HIGHLIGHT_PRIORITY = 100


class Category(StrEnum):
    """Semantic class of a highlighted text range."""

    NONE = "none"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"
    BRACKET = "bracket"
    TIMESTAMP = "timestamp"
    CUSTOM_FILTER_HIGHLIGHT = "custom-filter-highlight"
    JSON_KEY = "json-key"
    JSON_STRING = "json-string"
    JSON_NUMBER = "json-number"
    JSON_BOOL = "json-bool"
    JSON_NULL = "json-null"


@dataclass(frozen=True, slots=True)
class MatchRange:
    """A half-open ``[start, end)`` character range tagged with a category.

    ``priority`` only decides which category wins where ranges overlap.
    """

    start: int
    end: int
    category: Category
    priority: int


@dataclass(frozen=True, slots=True)
class StyledRun:
    """A contiguous slice of a line with exactly one category."""

    text: str
    category: Category


class ViewerSettings(BaseModel):
    """Query strings and toggles persisted between viewer sessions."""

    hide_query: str = ""
    filter_query: str = ""
    highlight_query: str = ""
    wrap_lines: bool = True
    heuristic_enabled: bool = True
    json_enabled: bool = True


class LineEvent(BaseModel):
    """A complete, newline-stripped line delivered by a log source."""

    text: str


class SourceErrorEvent(BaseModel):
    """A failure reported by a log source."""

    message: str


SourceEvent = LineEvent | SourceErrorEvent
