"""Inline citation marker parsing and validation.

Answers cite sources with bracketed 1-based positions: ``[1]``, ``[2]``,
or grouped as ``[1, 3]``.  A marker is only meaningful relative to the
exact source list the answer was generated from, so anything outside
``1..N`` is a hallucinated reference and is stripped.
"""

from __future__ import annotations

import re

import structlog

logger = structlog.get_logger(logger_name=__name__)

# [1]  [2,3]  [1, 2 , 4].  A bracket run glued to a word (``arr[0]``,
# ``grid[1][2]``) is an index expression and matches the first branch,
# which is never rewritten.
_MARKER_RE = re.compile(
    r"(?P<subscript>\w(?:\[[^\[\]\n]*\])+)"
    r"|(?:(?<=\S)(?P<lead> ))?\[(?P<numbers>\d+(?:\s*,\s*\d+)*)\]"
)


def _numbers(group: str) -> list[int]:
    return [int(part) for part in group.split(",")]


def find_citations(text: str) -> list[int]:
    """Return every cited index in *text*, in order of first appearance."""
    seen: list[int] = []
    for match in _MARKER_RE.finditer(text):
        if match.group("numbers") is None:
            continue
        for number in _numbers(match.group("numbers")):
            if number not in seen:
                seen.append(number)
    return seen


def strip_invalid_citations(text: str, source_count: int) -> tuple[str, list[int]]:
    """Remove citation numbers outside ``1..source_count`` from *text*.

    Grouped markers keep their valid members (``[2, 9]`` becomes ``[2]``
    when there are fewer than nine sources); a marker with no valid member
    is removed entirely, together with the single space before it.  Text
    outside the markers is returned unchanged.

    Returns
    -------
    tuple[str, list[int]]
        The cleaned text and the distinct invalid numbers that were dropped.
    """
    dropped: list[int] = []

    def _replace(match: re.Match[str]) -> str:
        if match.group("numbers") is None:
            return match.group(0)
        numbers = _numbers(match.group("numbers"))
        valid = [n for n in numbers if 1 <= n <= source_count]
        for n in numbers:
            if n not in valid and n not in dropped:
                dropped.append(n)
        if not valid:
            return ""
        if len(valid) == len(numbers):
            return match.group(0)
        return (match.group("lead") or "") + "[" + ", ".join(str(n) for n in valid) + "]"

    cleaned = _MARKER_RE.sub(_replace, text)
    if dropped:
        logger.warning(
            "invalid_citations_removed",
            dropped=dropped,
            source_count=source_count,
        )
    return cleaned, dropped
