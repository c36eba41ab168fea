"""Built-in heuristic highlighting rules for common log tokens."""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass

from logtint.models import HEURISTIC_PRIORITY, Category, MatchRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HeuristicRule:
    """A fixed pattern and the category its matches receive."""

    name: str
    pattern: re.Pattern[str]
    category: Category


@functools.cache
def heuristic_rules() -> tuple[HeuristicRule, ...]:
    """Return the rule table, compiling it on first use.

    Order matters: among equal priorities the later rule wins, so a bracketed
    ``[ERROR]`` ends up as a bracket token rather than an error word.
    """
    rules = (
        HeuristicRule("error", re.compile(r"\b(?:error|err|fatal|fail(?:ed)?|panic)\b", re.IGNORECASE), Category.ERROR),
        HeuristicRule("warning", re.compile(r"\bwarn(?:ing)?\b", re.IGNORECASE), Category.WARNING),
        HeuristicRule("info", re.compile(r"\binfo\b", re.IGNORECASE), Category.INFO),
        HeuristicRule("debug", re.compile(r"\b(?:debug|trace)\b", re.IGNORECASE), Category.DEBUG),
        HeuristicRule("bracket", re.compile(r"\[[^\]]+\]"), Category.BRACKET),
        HeuristicRule("datetime", re.compile(r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}"), Category.TIMESTAMP),
        HeuristicRule("time", re.compile(r"\d{2}:\d{2}:\d{2}"), Category.TIMESTAMP),
    )
    logger.debug("Compiled %d heuristic rules", len(rules))
    return rules


def find_heuristic_ranges(line: str) -> list[MatchRange]:
    """Collect every match of every rule, in rule-table order."""
    return [
        MatchRange(m.start(), m.end(), rule.category, HEURISTIC_PRIORITY)
        for rule in heuristic_rules()
        for m in rule.pattern.finditer(line)
    ]
