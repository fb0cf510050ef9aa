"""Render citations for transcripts and prompts."""

from __future__ import annotations

from typing import Sequence

from ..models import Citation


def format_citation(citation: Citation) -> str:
    """Return ``path`` or ``path:L<start>-L<end>`` when a range is known."""
    if citation.line_start is not None and citation.line_end is not None:
        return f"{citation.filepath}:L{citation.line_start}-L{citation.line_end}"
    return citation.filepath


def format_citations_for_transcript(citations: Sequence[Citation]) -> str:
    lines = []
    for number, citation in enumerate(citations, start=1):
        suffix = f" ({citation.label})" if citation.label else ""
        lines.append(f"{number}. {format_citation(citation)}{suffix}")
    return "\n".join(lines)


__all__ = ["format_citation", "format_citations_for_transcript"]
