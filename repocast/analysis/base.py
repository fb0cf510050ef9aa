"""Contracts consumed from the code-analysis service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Tuple

from ..models import IndexState, RepositoryRef


class QualityMode(str, Enum):
    """Answer fidelity requested from the analysis service."""

    STANDARD = "standard"
    HIGH = "high"


@dataclass(frozen=True)
class AnalysisAnswer:
    """Answer text and the ordered source paths backing it."""

    text: str
    source_paths: Tuple[str, ...] = ()


class AnalysisService(Protocol):
    """Operations the pipeline needs from the analysis service."""

    def submit_for_indexing(self, ref: RepositoryRef) -> None:
        """Ask the service to (re)index the repository."""

    def get_index_status(self, ref: RepositoryRef) -> IndexState:
        """Return the current indexing state; unknown repositories map to UNKNOWN."""

    def ask(
        self,
        ref: RepositoryRef,
        question: str,
        *,
        session_id: str,
        quality_mode: QualityMode = QualityMode.STANDARD,
    ) -> AnalysisAnswer:
        """Answer a natural-language question about the indexed repository."""
