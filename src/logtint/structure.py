"""Detection and token tagging of JSON values embedded in log lines.

Tokens are re-located by searching the region's text for the first occurrence
of each key, string or scalar literal. A repeated key name, a duplicated
string value, or a number that also appears inside another token can
therefore be attributed to the wrong occurrence. This is a known
approximation: exact source positions are not tracked.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from logtint.models import STRUCTURE_PRIORITY, Category, MatchRange

logger = logging.getLogger(__name__)

_OPENERS_RE = re.compile(r"[{\[]")
_KEY_SEPARATOR_RE = re.compile(r"[ \t\n\r]*:")


def _reject_constant(name: str) -> Any:
    msg = f"{name} is not valid JSON"
    raise ValueError(msg)


_decoder = json.JSONDecoder(parse_constant=_reject_constant)


@dataclass(frozen=True, slots=True)
class StructuredValue:
    """A JSON object or array parsed from ``line[start:end]``."""

    start: int
    end: int
    value: Any

    @property
    def length(self) -> int:
        return self.end - self.start


def find_structured_values(line: str) -> list[StructuredValue]:
    """Scan left to right for JSON objects and arrays.

    Each ``{`` or ``[`` gets one parse attempt. On success scanning resumes
    after the consumed text, otherwise at the next character.
    """
    found: list[StructuredValue] = []
    pos = 0
    while (m := _OPENERS_RE.search(line, pos)) is not None:
        start = m.start()
        try:
            value, end = _decoder.raw_decode(line, start)
        except (ValueError, RecursionError):
            pos = start + 1
            continue
        if end - start <= 1:
            pos = start + 1
            continue
        logger.debug("Found structured value at %d-%d", start, end)
        found.append(StructuredValue(start, end, value))
        pos = end
    return found


def _scalar_literal(value: Any) -> tuple[str, Category] | None:
    """Canonical JSON spelling and category of a non-container value."""
    if value is None:
        return "null", Category.JSON_NULL
    if isinstance(value, bool):
        return ("true" if value else "false"), Category.JSON_BOOL
    if isinstance(value, int):
        return str(value), Category.JSON_NUMBER
    if isinstance(value, float):
        return repr(value), Category.JSON_NUMBER
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False), Category.JSON_STRING
    return None


def _key_position(region: str, quoted: str) -> int:
    """Offset of the first ``quoted`` that is followed by a colon, or -1."""
    idx = region.find(quoted)
    while idx != -1:
        if _KEY_SEPARATOR_RE.match(region, idx + len(quoted)) is not None:
            return idx
        idx = region.find(quoted, idx + 1)
    return -1


def _tag_value(value: Any, region: str, offset: int, out: list[MatchRange]) -> None:
    """Tag every token of ``value`` in document order.

    Walks with an explicit stack, so nesting depth is bounded only by what the
    decoder accepted.
    """
    stack: list[tuple[bool, Any]] = [(False, value)]
    while stack:
        is_key, item = stack.pop()
        if is_key:
            quoted = json.dumps(item, ensure_ascii=False)
            idx = _key_position(region, quoted)
            if idx != -1:
                out.append(MatchRange(offset + idx, offset + idx + len(quoted), Category.JSON_KEY, STRUCTURE_PRIORITY))
        elif isinstance(item, dict):
            for key, child in reversed(item.items()):
                stack.append((False, child))
                stack.append((True, key))
        elif isinstance(item, list):
            stack.extend((False, child) for child in reversed(item))
        elif (literal := _scalar_literal(item)) is not None:
            text, category = literal
            idx = region.find(text)
            if idx != -1:
                out.append(MatchRange(offset + idx, offset + idx + len(text), category, STRUCTURE_PRIORITY))


def find_structure_ranges(line: str) -> list[MatchRange]:
    """Tag keys, strings, numbers, booleans and nulls of every embedded JSON value."""
    ranges: list[MatchRange] = []
    for found in find_structured_values(line):
        _tag_value(found.value, line[found.start : found.end], found.start, ranges)
    return ranges
