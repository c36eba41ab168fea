"""Category color table and conversion of styled runs to Rich text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.style import Style
from rich.text import Text

from logtint.models import Category

if TYPE_CHECKING:
    from collections.abc import Iterable

    from logtint.models import StyledRun

CATEGORY_STYLES: dict[Category, Style] = {
    Category.NONE: Style(),
    Category.ERROR: Style(color="red", bold=True),
    Category.WARNING: Style(color="yellow", bold=True),
    Category.INFO: Style(color="green", bold=True),
    Category.DEBUG: Style(color="cyan"),
    Category.BRACKET: Style(color="blue"),
    Category.TIMESTAMP: Style(color="magenta"),
    Category.CUSTOM_FILTER_HIGHLIGHT: Style(color="black", bgcolor="yellow", bold=True),
    Category.JSON_KEY: Style(color="#9cdcfe"),
    Category.JSON_STRING: Style(color="#ce9178"),
    Category.JSON_NUMBER: Style(color="#b5cea8"),
    Category.JSON_BOOL: Style(color="#569cd6"),
    Category.JSON_NULL: Style(color="#569cd6", italic=True),
}


def render_runs(runs: Iterable[StyledRun]) -> Text:
    """Assemble runs into a single Rich ``Text`` using the category table."""
    text = Text()
    for run in runs:
        text.append(run.text, style=CATEGORY_STYLES[run.category])
    return text
