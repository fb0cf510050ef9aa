"""Step counting shared by the episode and outline gates."""

from __future__ import annotations

import re

MIN_STEP_LINE_LENGTH = 10

# Each marker style is counted independently and the largest count wins, so a
# line matching two styles can be counted twice.
_STEP_MARKERS = (
    re.compile(r"\b\d+\."),
    re.compile(r"\bstep\s+\d+\b", re.IGNORECASE),
    re.compile(r"^\s*[-*•]\s", re.MULTILINE),
    re.compile(r"\b[a-zA-Z]\)"),
    re.compile(r"\b[A-Z]\."),
)


def count_steps(text: str) -> int:
    """Estimate how many discrete steps ``text`` describes."""
    if not text:
        return 0
    count = max(len(pattern.findall(text)) for pattern in _STEP_MARKERS)
    if count:
        return count
    return sum(1 for line in text.splitlines() if len(line.strip()) > MIN_STEP_LINE_LENGTH)


__all__ = ["count_steps"]
