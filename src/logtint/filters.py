"""Filter state: the hide pattern plus the filter and highlight queries."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from logtint.query import FilterExpr, QueryParseError, parse_optional_query

if TYPE_CHECKING:
    from collections.abc import Sequence

    from logtint.models import ViewerSettings

logger = logging.getLogger(__name__)


class FilterState:
    """The active hide pattern, filter expression and highlight expression.

    Each setter builds the new object completely before swapping it in, so a
    reader never sees a half-built expression. A setter that fails keeps the
    previous value and records the error message for the edit box.
    """

    def __init__(self) -> None:
        self.hide_pattern: re.Pattern[str] | None = None
        self.filter_expr: FilterExpr | None = None
        self.highlight_expr: FilterExpr | None = None
        self.hide_error: str | None = None
        self.filter_error: str | None = None
        self.highlight_error: str | None = None

    @classmethod
    def from_settings(cls, settings: ViewerSettings) -> FilterState:
        """Build state from persisted settings; invalid entries are left unset with their error recorded."""
        state = cls()
        state.set_hide(settings.hide_query)
        state.set_filter(settings.filter_query)
        state.set_highlight(settings.highlight_query)
        return state

    @property
    def errors(self) -> list[str]:
        """All current error messages, labelled by box."""
        labelled = (("hide", self.hide_error), ("filter", self.filter_error), ("highlight", self.highlight_error))
        return [f"{label}: {error}" for label, error in labelled if error is not None]

    def set_hide(self, text: str) -> str | None:
        """Set the hide regex. Returns the error message, or None on success."""
        if not text.strip():
            self.hide_pattern = None
            self.hide_error = None
            return None
        try:
            pattern = re.compile(text)
        except re.error as e:
            self.hide_error = f"invalid regex: {e}"
            logger.warning("Keeping previous hide pattern: %s", self.hide_error)
            return self.hide_error
        self.hide_pattern = pattern
        self.hide_error = None
        return None

    def set_filter(self, text: str) -> str | None:
        """Set the filter query. Returns the error message, or None on success."""
        try:
            expr = parse_optional_query(text)
        except QueryParseError as e:
            self.filter_error = str(e)
            logger.warning("Keeping previous filter: %s", self.filter_error)
            return self.filter_error
        self.filter_expr = expr
        self.filter_error = None
        return None

    def set_highlight(self, text: str) -> str | None:
        """Set the highlight query. Returns the error message, or None on success."""
        try:
            expr = parse_optional_query(text)
        except QueryParseError as e:
            self.highlight_error = str(e)
            logger.warning("Keeping previous highlight: %s", self.highlight_error)
            return self.highlight_error
        self.highlight_expr = expr
        self.highlight_error = None
        return None

    def check_line(self, text: str) -> bool:
        """Check if a single line is visible: not hidden and passing the filter query."""
        if self.hide_pattern is not None and self.hide_pattern.search(text):
            return False
        return self.filter_expr is None or self.filter_expr.matches(text)


def apply_filters(lines: Sequence[str], state: FilterState) -> list[int]:
    """Apply the filter state to lines, returning indices of visible lines."""
    if state.hide_pattern is None and state.filter_expr is None:
        return list(range(len(lines)))
    return [i for i, text in enumerate(lines) if state.check_line(text)]
