"""Merging of overlapping highlight ranges into display runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from logtint.models import Category, MatchRange, StyledRun

if TYPE_CHECKING:
    from collections.abc import Iterable


def build_runs(line: str, ranges: Iterable[MatchRange]) -> list[StyledRun]:
    """Partition ``line`` into runs, one category per run.

    Each character takes the category of the highest-priority range covering
    it; on equal priority the range supplied later wins. Offsets outside the
    line are clamped. Concatenating the run texts always yields ``line``.
    """
    length = len(line)
    if length == 0:
        return [StyledRun("", Category.NONE)]

    categories = [Category.NONE] * length
    priorities = [0] * length
    for rng in ranges:
        start = min(max(rng.start, 0), length)
        end = min(max(rng.end, start), length)
        for i in range(start, end):
            if rng.priority >= priorities[i]:
                categories[i] = rng.category
                priorities[i] = rng.priority

    runs: list[StyledRun] = []
    run_start = 0
    for i in range(1, length + 1):
        if i == length or categories[i] != categories[run_start]:
            runs.append(StyledRun(line[run_start:i], categories[run_start]))
            run_start = i
    return runs
