"""Composition of the highlight sources into styled runs for one line."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from logtint.query import parse_optional_query
from logtint.rules import find_heuristic_ranges
from logtint.spans import build_runs
from logtint.structure import find_structure_ranges

if TYPE_CHECKING:
    from logtint.models import MatchRange, StyledRun, ViewerSettings
    from logtint.query import FilterExpr


class RangeSource(StrEnum):
    """Producers of highlight ranges, in the order their ranges are merged."""

    HIGHLIGHT = "highlight"
    STRUCTURE = "structure"
    HEURISTIC = "heuristic"


def collect_ranges(
    line: str,
    highlight_expr: FilterExpr | None = None,
    *,
    heuristic: bool = True,
    structured: bool = True,
) -> list[MatchRange]:
    """Gather ranges from every enabled source: highlight query, then JSON, then heuristics."""
    ranges: list[MatchRange] = []
    for source in RangeSource:
        if source is RangeSource.HIGHLIGHT and highlight_expr is not None:
            ranges.extend(highlight_expr.highlight_ranges(line))
        elif source is RangeSource.STRUCTURE and structured:
            ranges.extend(find_structure_ranges(line))
        elif source is RangeSource.HEURISTIC and heuristic:
            ranges.extend(find_heuristic_ranges(line))
    return ranges


@dataclass(frozen=True, slots=True)
class Highlighter:
    """Highlight configuration for rendering; rebuilt whenever a setting changes."""

    highlight_expr: FilterExpr | None = None
    heuristic_enabled: bool = True
    json_enabled: bool = True

    @classmethod
    def from_settings(cls, settings: ViewerSettings) -> Highlighter:
        """Build from persisted settings. Raises QueryParseError for a bad highlight query."""
        return cls(
            highlight_expr=parse_optional_query(settings.highlight_query),
            heuristic_enabled=settings.heuristic_enabled,
            json_enabled=settings.json_enabled,
        )

    def ranges(self, line: str) -> list[MatchRange]:
        return collect_ranges(
            line,
            self.highlight_expr,
            heuristic=self.heuristic_enabled,
            structured=self.json_enabled,
        )

    def compute_runs(self, line: str) -> list[StyledRun]:
        """Styled runs covering the whole line."""
        return build_runs(line, self.ranges(line))
