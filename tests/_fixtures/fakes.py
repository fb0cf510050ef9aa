"""Test doubles for the external collaborators repocast depends on."""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from repocast.analysis.base import AnalysisAnswer, QualityMode
from repocast.analysis.gatherer import QUESTIONS
from repocast.errors import AnalysisServiceError, ContentFetchError, FileNotFoundInRepository
from repocast.models import IndexState, IndexStatus, QuestionTopic, RepositoryRef

_TOPIC_BY_PROMPT = {question.prompt: question.topic for question in QUESTIONS}

LONG_PURPOSE = (
    "This repository implements a URL shortener. The parseUrl helper normalises input "
    "and the LinkStore class persists mappings."
)
LONG_PATTERNS = (
    "Errors are wrapped by handle_error and logged through createLogger before being "
    "returned to the caller as JSON."
)
FIVE_STEP_TASK = (
    "1. Open src/store.ts\n2. Add a ttl option\n3. Update parseUrl\n"
    "4. Write a test\n5. Update the README"
)


class FakeAnalysisService:
    """Scripted analysis service recording every call it receives."""

    def __init__(
        self,
        *,
        statuses: Sequence[IndexState] | None = None,
        answers: Mapping[QuestionTopic, AnalysisAnswer] | None = None,
        failing_topics: Iterable[QuestionTopic] = (),
    ) -> None:
        self._statuses = list(statuses or [IndexState(status=IndexStatus.COMPLETED)])
        self._answers = dict(answers or {})
        self._failing = set(failing_topics)
        self.status_calls = 0
        self.submissions: List[RepositoryRef] = []
        self.questions: List[Dict[str, object]] = []

    def submit_for_indexing(self, ref: RepositoryRef) -> None:
        self.submissions.append(ref)

    def get_index_status(self, ref: RepositoryRef) -> IndexState:
        self.status_calls += 1
        if len(self._statuses) > 1:
            return self._statuses.pop(0)
        return self._statuses[0]

    def ask(
        self,
        ref: RepositoryRef,
        question: str,
        *,
        session_id: str,
        quality_mode: QualityMode = QualityMode.STANDARD,
    ) -> AnalysisAnswer:
        topic = _TOPIC_BY_PROMPT[question]
        self.questions.append(
            {"topic": topic, "session_id": session_id, "quality_mode": quality_mode}
        )
        if topic in self._failing:
            raise AnalysisServiceError(f"{topic.value} failed")
        return self._answers.get(topic, AnalysisAnswer(text=f"{topic.value} answer"))


class FakeContentHost:
    """In-memory hosting service with fetch and existence-check counters."""

    def __init__(
        self,
        files: Mapping[str, str] | None = None,
        *,
        unfetchable: Iterable[str] = (),
        broken_exists: Iterable[str] = (),
    ) -> None:
        self.files = dict(files or {})
        self.unfetchable = set(unfetchable)
        self.broken_exists = set(broken_exists)
        self.fetch_calls: List[str] = []
        self.exists_calls: List[str] = []
        self._lock = threading.Lock()

    def fetch_file(self, ref: RepositoryRef, path: str) -> str:
        with self._lock:
            self.fetch_calls.append(path)
        if path in self.unfetchable:
            raise ContentFetchError(f"boom fetching {path}")
        if path not in self.files:
            raise FileNotFoundInRepository(path)
        return self.files[path]

    def exists(self, ref: RepositoryRef, path: str) -> bool:
        with self._lock:
            self.exists_calls.append(path)
        if path in self.broken_exists:
            raise ContentFetchError(f"boom checking {path}")
        return path in self.files or path in self.unfetchable


class FakeClock:
    """Monotonic clock whose ``sleep`` advances time instantly."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def answers_with_paths(
    paths_by_topic: Mapping[QuestionTopic, Sequence[str]],
    texts: Optional[Mapping[QuestionTopic, str]] = None,
) -> Dict[QuestionTopic, AnalysisAnswer]:
    """Build one answer per topic using realistic default texts."""
    defaults = {
        QuestionTopic.PURPOSE: LONG_PURPOSE,
        QuestionTopic.ENTRYPOINTS: "The server starts in src/index.ts via startServer.",
        QuestionTopic.HOTSPOTS: "LinkStore and parseUrl are the most imported symbols.",
        QuestionTopic.PATTERNS: LONG_PATTERNS,
        QuestionTopic.MICRO_TASK: FIVE_STEP_TASK,
    }
    if texts:
        defaults.update(texts)
    return {
        topic: AnalysisAnswer(text=defaults[topic], source_paths=tuple(paths_by_topic.get(topic, ())))
        for topic in QuestionTopic
    }


__all__ = [
    "FIVE_STEP_TASK",
    "FakeAnalysisService",
    "FakeClock",
    "FakeContentHost",
    "LONG_PATTERNS",
    "LONG_PURPOSE",
    "answers_with_paths",
]
