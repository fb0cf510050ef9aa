"""Heuristic lookup of the line range that best matches a search term."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from ..models import LineRange

BLOCK_SCAN_LIMIT = 50
FALLBACK_SPAN = 20
SUBSTRING_SPAN = 5

# Declaration shapes, tried per line; the first line matching any of them wins.
_DECLARATION_TEMPLATES = (
    r"^\s*(?:function|const|let|var)\s+{term}{boundary}",
    r"^\s*(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+{term}{boundary}",
    r"^\s*(?:export\s+)?(?:async\s+)?function\s*\*?\s*{term}{boundary}",
    r"^\s*(?:async\s+)?def\s+{term}{boundary}",
    r"^\s*{term}\s*[:=]",
)
_IDENT_BOUNDARY = r"(?![A-Za-z0-9_$])"


def find_line_range(content: str, term: str) -> Optional[LineRange]:
    """Return the 1-indexed line range for ``term`` inside ``content``.

    Declarations take precedence over plain mentions. A declaration's range
    runs to its matching closing brace; when no brace closes within
    ``BLOCK_SCAN_LIMIT`` lines a fixed ``FALLBACK_SPAN`` is used instead. A
    plain substring hit yields a ``SUBSTRING_SPAN`` line window.
    """
    if not term or not content:
        return None

    lines = split_lines(content)
    patterns = _declaration_patterns(term)

    for index, line in enumerate(lines):
        if any(pattern.search(line) for pattern in patterns):
            return LineRange(start=index + 1, end=_find_block_end(lines, index))

    for index, line in enumerate(lines):
        if term in line:
            start = index + 1
            return LineRange(start=start, end=min(start + SUBSTRING_SPAN - 1, len(lines)))

    return None


def split_lines(content: str) -> List[str]:
    """Split on ``\\n`` only, the way the hosting service numbers lines.

    Form feeds and Unicode line separators stay inside their line. A trailing
    ``\\r`` is dropped from each line and a final newline does not open an
    extra empty line.
    """
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class LineRangeResolver:
    """Object wrapper so the resolver can be swapped for a syntax-aware one."""

    def resolve(self, content: str, term: str) -> Optional[LineRange]:
        return find_line_range(content, term)


def _declaration_patterns(term: str) -> List[re.Pattern[str]]:
    escaped = re.escape(term)
    return [
        re.compile(template.format(term=escaped, boundary=_IDENT_BOUNDARY))
        for template in _DECLARATION_TEMPLATES
    ]


def _find_block_end(lines: Sequence[str], start_index: int) -> int:
    depth = 0
    opened = False
    last_index = min(start_index + BLOCK_SCAN_LIMIT, len(lines))
    for index in range(start_index, last_index):
        for char in lines[index]:
            if char == "{":
                depth += 1
                opened = True
            elif char == "}" and opened:
                depth -= 1
                if depth == 0:
                    return index + 1
    return min(start_index + FALLBACK_SPAN, len(lines))


__all__ = [
    "BLOCK_SCAN_LIMIT",
    "FALLBACK_SPAN",
    "LineRangeResolver",
    "SUBSTRING_SPAN",
    "find_line_range",
    "split_lines",
]
