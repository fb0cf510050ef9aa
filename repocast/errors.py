"""Exception taxonomy for repocast pipelines."""

from __future__ import annotations

from typing import Sequence


class RepocastError(RuntimeError):
    """Base class for every failure raised by repocast."""


class ConfigError(RepocastError):
    """Raised when the configuration file cannot be parsed."""


class InvalidRepositoryUrl(RepocastError):
    """Raised when a repository URL cannot be parsed into owner/name."""


class ContentFetchError(RepocastError):
    """Raised when the hosting service cannot return a file."""


class FileNotFoundInRepository(ContentFetchError):
    """Raised when the hosting service reports the path does not exist."""


class AnalysisServiceError(RepocastError):
    """Raised when a call to the code-analysis service fails."""


class IndexingFailed(RepocastError):
    """Raised when the analysis service could not index the repository."""


class IndexingTimeout(RepocastError):
    """Raised when indexing does not complete within the caller's budget."""


class QueryFailed(RepocastError):
    """Raised when a knowledge-gathering question could not be answered."""


class InsufficientCitations(RepocastError):
    """Raised when too few repository files could be verified."""

    def __init__(self, message: str, *, found: int) -> None:
        super().__init__(message)
        self.found = found


class ValidationFailed(RepocastError):
    """Raised when episode data or an outline violates structural policy."""

    def __init__(self, message: str, errors: Sequence[str]) -> None:
        super().__init__(message)
        self.errors = list(errors)


class NarrativeError(RepocastError):
    """Raised when the text-generation service returns unusable output."""


__all__ = [
    "AnalysisServiceError",
    "ConfigError",
    "ContentFetchError",
    "FileNotFoundInRepository",
    "IndexingFailed",
    "IndexingTimeout",
    "InsufficientCitations",
    "InvalidRepositoryUrl",
    "NarrativeError",
    "QueryFailed",
    "RepocastError",
    "ValidationFailed",
]
