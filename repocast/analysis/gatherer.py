"""Ask the fixed episode questions against an indexed repository."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..errors import AnalysisServiceError, QueryFailed
from ..logging import get_logger
from ..models import QuestionTopic, RawAnswer, RepositoryRef
from .base import AnalysisService, QualityMode

StepCallback = Callable[[int, str], None]


@dataclass(frozen=True)
class Question:
    topic: QuestionTopic
    prompt: str
    quality_mode: QualityMode
    progress_message: str


QUESTIONS: Tuple[Question, ...] = (
    Question(
        topic=QuestionTopic.PURPOSE,
        prompt="What is this repo's purpose and tech stack? List the main files with their paths.",
        quality_mode=QualityMode.STANDARD,
        progress_message="Analyzing repository purpose and stack",
    ),
    Question(
        topic=QuestionTopic.ENTRYPOINTS,
        prompt="What are the entrypoints (main/index/server bootstrap files)? Give exact file paths.",
        quality_mode=QualityMode.STANDARD,
        progress_message="Finding entrypoints and main files",
    ),
    Question(
        topic=QuestionTopic.HOTSPOTS,
        prompt=(
            "Find 3 central files by import usage or architectural importance. "
            "Explain why each matters and give file paths."
        ),
        quality_mode=QualityMode.STANDARD,
        progress_message="Identifying central files and hotspots",
    ),
    Question(
        topic=QuestionTopic.PATTERNS,
        prompt=(
            "Show error handling, logging, or testing patterns. "
            "Give code examples with exact file paths."
        ),
        quality_mode=QualityMode.HIGH,
        progress_message="Analyzing code patterns",
    ),
    Question(
        topic=QuestionTopic.MICRO_TASK,
        prompt=(
            "Suggest a 30-90 minute micro-task for a first-time contributor with 5 concrete "
            "steps. Include file paths for changes."
        ),
        quality_mode=QualityMode.HIGH,
        progress_message="Generating micro-task for contributors",
    ),
)


class KnowledgeGatherer:
    """Collects the five raw answers an episode is built from."""

    def __init__(
        self,
        service: AnalysisService,
        *,
        on_step: Optional[StepCallback] = None,
        session_factory: Callable[[], str] | None = None,
    ) -> None:
        self.service = service
        self.on_step = on_step
        self._session_factory = session_factory or _new_session_id
        self.logger = get_logger("analysis.gatherer")

    def gather(self, ref: RepositoryRef) -> Tuple[RawAnswer, ...]:
        """Ask every question in order within one conversational session."""
        session_id = self._session_factory()
        answers: List[RawAnswer] = []
        for step, question in enumerate(QUESTIONS, start=1):
            self.logger.info("[%d/%d] %s", step, len(QUESTIONS), question.progress_message)
            if self.on_step is not None:
                self.on_step(step, question.progress_message)
            try:
                answer = self.service.ask(
                    ref,
                    question.prompt,
                    session_id=session_id,
                    quality_mode=question.quality_mode,
                )
            except AnalysisServiceError as exc:
                raise QueryFailed(
                    f"Question about {question.topic.value} failed for {ref.key}: {exc}"
                ) from exc
            paths = tuple(path for path in answer.source_paths if path and path.strip())
            self.logger.debug(
                "%s answer mentions %d path(s)", question.topic.value, len(paths)
            )
            answers.append(RawAnswer(topic=question.topic, text=answer.text, mentioned_paths=paths))
        return tuple(answers)


def _new_session_id() -> str:
    return f"episode-{uuid.uuid4().hex}"


__all__ = ["KnowledgeGatherer", "QUESTIONS", "Question", "StepCallback"]
