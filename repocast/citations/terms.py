"""Extract identifier-shaped search terms from narrative answer text."""

from __future__ import annotations

import re
from typing import Iterable, List

MAX_SEARCH_TERMS = 10
MIN_TERM_LENGTH = 4

_LOWER_CAMEL = re.compile(r"\b[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)+\b")
_UPPER_CAMEL = re.compile(r"\b[A-Z][a-z0-9]+(?:[A-Z][a-z0-9]*)+\b")
_SNAKE_CASE = re.compile(r"\b_*[a-z][a-z0-9]*(?:_[a-z0-9]+)+\b")
_LOWER_WORD = re.compile(r"\b[a-z][a-z0-9]*\b")
_CAPITALISED_WORD = re.compile(r"\b[A-Z][a-z0-9]+\b")

# Multi-segment shapes first; single words such as ``main`` or ``handler``
# only fill the slots those leave.
_PATTERNS = (_LOWER_CAMEL, _UPPER_CAMEL, _SNAKE_CASE, _LOWER_WORD, _CAPITALISED_WORD)

_STOPWORDS = {
    "about",
    "also",
    "file",
    "files",
    "from",
    "github",
    "have",
    "into",
    "javascript",
    "that",
    "their",
    "there",
    "these",
    "they",
    "this",
    "typescript",
    "when",
    "where",
    "which",
    "with",
    "youtube",
}


def extract_search_terms(texts: Iterable[str], *, limit: int = MAX_SEARCH_TERMS) -> List[str]:
    """Return up to ``limit`` distinct identifiers in first-seen order per shape.

    Lower camel-case tokens come first, then upper camel-case, then
    snake_case, then plain single words of at least ``MIN_TERM_LENGTH``
    characters (lowercase before capitalised).
    """
    text = "\n".join(texts)
    terms: List[str] = []
    seen = set()
    for pattern in _PATTERNS:
        for match in pattern.finditer(text):
            token = match.group(0)
            if len(token) < MIN_TERM_LENGTH or token.lower() in _STOPWORDS:
                continue
            if token in seen:
                continue
            seen.add(token)
            terms.append(token)
            if len(terms) >= limit:
                return terms
    return terms


__all__ = ["MAX_SEARCH_TERMS", "extract_search_terms"]
