"""Citation extraction, verification and enrichment."""

from .enricher import CitationEnricher, is_binary_path
from .formatting import format_citation, format_citations_for_transcript
from .pipeline import CitationPipeline, collect_mentioned_paths
from .resolver import LineRangeResolver, find_line_range
from .terms import extract_search_terms

__all__ = [
    "CitationEnricher",
    "CitationPipeline",
    "LineRangeResolver",
    "collect_mentioned_paths",
    "extract_search_terms",
    "find_line_range",
    "format_citation",
    "format_citations_for_transcript",
    "is_binary_path",
]
