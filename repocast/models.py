"""Core data models shared across repocast components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class RepositoryRef:
    """Identifies a hosted repository and the branch every call targets."""

    owner: str
    name: str
    branch: str = "main"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def key(self) -> str:
        return f"{self.owner}/{self.name}@{self.branch}"


class QuestionTopic(str, Enum):
    """Fixed question slots asked of the analysis service, in order."""

    PURPOSE = "purpose"
    ENTRYPOINTS = "entrypoints"
    HOTSPOTS = "hotspots"
    PATTERNS = "patterns"
    MICRO_TASK = "micro_task"


@dataclass(frozen=True)
class RawAnswer:
    """Answer text plus the source paths the analysis service attached to it."""

    topic: QuestionTopic
    text: str
    mentioned_paths: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LineRange:
    """Inclusive, 1-indexed span of lines inside a file."""

    start: int
    end: int


@dataclass(frozen=True)
class Citation:
    """Pointer from a narrative claim to a confirmed repository file."""

    filepath: str
    line_start: Optional[int] = None
    line_end: Optional[int] = None
    label: Optional[str] = None
    note: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.filepath:
            raise ValueError("Citation requires a filepath")
        if (self.line_start is None) != (self.line_end is None):
            raise ValueError("line_start and line_end must be provided together")
        if self.line_start is not None and self.line_end is not None:
            if self.line_start < 1 or self.line_end < self.line_start:
                raise ValueError(
                    f"Invalid line range {self.line_start}-{self.line_end} for {self.filepath}"
                )

    @property
    def has_lines(self) -> bool:
        return self.line_start is not None

    @property
    def is_bare(self) -> bool:
        return not self.has_lines and self.note is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"filepath": self.filepath}
        for key in ("line_start", "line_end", "label", "note"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Citation":
        return cls(
            filepath=str(payload["filepath"]),
            line_start=payload.get("line_start"),
            line_end=payload.get("line_end"),
            label=payload.get("label"),
            note=payload.get("note"),
        )


MAX_CITATIONS = 10
MIN_CITATIONS = 3


@dataclass(frozen=True)
class EpisodeData:
    """Validated facts and citations handed to the narrative stage."""

    purpose: str
    entrypoints: str
    hotspots: str
    patterns: str
    micro_task: str
    citations: Tuple[Citation, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence from callers but store an immutable tuple.
        object.__setattr__(self, "citations", tuple(self.citations))
        if len(self.citations) > MAX_CITATIONS:
            raise ValueError(
                f"EpisodeData holds at most {MAX_CITATIONS} citations, got {len(self.citations)}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "purpose": self.purpose,
            "entrypoints": self.entrypoints,
            "hotspots": self.hotspots,
            "patterns": self.patterns,
            "micro_task": self.micro_task,
            "citations": [citation.to_dict() for citation in self.citations],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "EpisodeData":
        return cls(
            purpose=str(payload.get("purpose", "")),
            entrypoints=str(payload.get("entrypoints", "")),
            hotspots=str(payload.get("hotspots", "")),
            patterns=str(payload.get("patterns", "")),
            micro_task=str(payload.get("micro_task", "")),
            citations=tuple(Citation.from_dict(item) for item in payload.get("citations", [])),
        )


class IndexStatus(str, Enum):
    """Lifecycle states reported by the analysis service."""

    UNKNOWN = "unknown"
    SUBMITTED = "submitted"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (IndexStatus.COMPLETED, IndexStatus.FAILED)


@dataclass(frozen=True)
class IndexState:
    """Snapshot of the analysis service's indexing progress."""

    status: IndexStatus
    files_processed: Optional[int] = None


__all__ = [
    "Citation",
    "EpisodeData",
    "IndexState",
    "IndexStatus",
    "LineRange",
    "MAX_CITATIONS",
    "MIN_CITATIONS",
    "QuestionTopic",
    "RawAnswer",
    "RepositoryRef",
]
