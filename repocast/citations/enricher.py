"""Turn a verified repository path into a citation with a best-effort range."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional, Sequence

from ..errors import ContentFetchError
from ..hosting.base import ContentHost
from ..logging import get_logger
from ..models import Citation, RepositoryRef
from .resolver import LineRangeResolver

MAX_CONTENT_SIZE = 1024 * 1024

NOTE_BINARY = "binary file"
NOTE_UNFETCHABLE = "unfetchable"
NOTE_TOO_LARGE = "too large for line lookup"

BINARY_EXTENSIONS = frozenset(
    {
        ".7z",
        ".bin",
        ".bmp",
        ".bz2",
        ".class",
        ".dll",
        ".dylib",
        ".eot",
        ".exe",
        ".gif",
        ".gz",
        ".ico",
        ".jar",
        ".jpeg",
        ".jpg",
        ".mov",
        ".mp3",
        ".mp4",
        ".ogg",
        ".otf",
        ".pdf",
        ".png",
        ".pyc",
        ".rar",
        ".so",
        ".tar",
        ".ttf",
        ".wav",
        ".webm",
        ".webp",
        ".woff",
        ".woff2",
        ".xz",
        ".zip",
    }
)


def is_binary_path(filepath: str) -> bool:
    return PurePosixPath(filepath).suffix.lower() in BINARY_EXTENSIONS


class CitationEnricher:
    """Fetches a file and resolves the first search term that locates code in it.

    Enrichment never fails the caller: fetch errors and unsuitable files come
    back as citations carrying a ``note`` instead of a line range.
    """

    def __init__(
        self,
        host: ContentHost,
        *,
        resolver: Optional[LineRangeResolver] = None,
        max_content_size: int = MAX_CONTENT_SIZE,
    ) -> None:
        self.host = host
        self.resolver = resolver or LineRangeResolver()
        self.max_content_size = max_content_size
        self.logger = get_logger("citations.enricher")

    def enrich(
        self, ref: RepositoryRef, filepath: str, search_terms: Sequence[str]
    ) -> Citation:
        if is_binary_path(filepath):
            self.logger.debug("Skipping line lookup for binary file %s", filepath)
            return Citation(filepath=filepath, note=NOTE_BINARY)

        try:
            content = self.host.fetch_file(ref, filepath)
        except ContentFetchError as exc:
            self.logger.warning("Unable to fetch %s: %s", filepath, exc)
            return Citation(filepath=filepath, note=NOTE_UNFETCHABLE)

        if len(content) > self.max_content_size:
            self.logger.debug("Skipping line lookup for large file %s", filepath)
            return Citation(filepath=filepath, note=NOTE_TOO_LARGE)

        for term in search_terms:
            found = self.resolver.resolve(content, term)
            if found is not None:
                return Citation(
                    filepath=filepath,
                    line_start=found.start,
                    line_end=found.end,
                    label=term,
                )
        return Citation(filepath=filepath)


__all__ = [
    "BINARY_EXTENSIONS",
    "CitationEnricher",
    "MAX_CONTENT_SIZE",
    "NOTE_BINARY",
    "NOTE_TOO_LARGE",
    "NOTE_UNFETCHABLE",
    "is_binary_path",
]
