"""Turn episode facts into a structured podcast outline."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, List, Protocol, Tuple

from ..citations.formatting import format_citations_for_transcript
from ..errors import NarrativeError
from ..logging import get_logger
from ..models import MIN_CITATIONS, Citation, EpisodeData
from ..validators.base import ValidationResult
from ..validators.episode import MIN_MICRO_TASK_STEPS
from ..validators.steps import count_steps
from .prompts import OUTLINE_SYSTEM_PROMPT, OUTLINE_USER_TEMPLATE

MIN_HOTSPOTS = 3

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)

logger = get_logger("narrative.outline")


class TextGenerator(Protocol):
    def run(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        ...


@dataclass(frozen=True)
class EpisodeOutline:
    """Structured outline the script writer works from."""

    purpose: str
    stack: str
    hotspots: Tuple[str, ...]
    patterns: str
    micro_task_title: str
    micro_task_steps: Tuple[str, ...]
    jokes: Tuple[str, ...] = ()
    citations: Tuple[Citation, ...] = field(default_factory=tuple)


def generate_outline(episode: EpisodeData, runner: TextGenerator) -> EpisodeOutline:
    """Ask the text-generation service for an outline grounded in ``episode``."""
    prompt = OUTLINE_USER_TEMPLATE.format(
        purpose=episode.purpose,
        entrypoints=episode.entrypoints,
        hotspots=episode.hotspots,
        patterns=episode.patterns,
        micro_task=episode.micro_task,
        citations=format_citations_for_transcript(episode.citations),
    )
    reply = runner.run(prompt, system=OUTLINE_SYSTEM_PROMPT, temperature=0.7, max_tokens=1500)
    payload = extract_json_object(reply)
    outline = _outline_from_payload(payload, episode.citations)
    logger.debug(
        "Outline generated with %d hotspot(s) and %d step(s)",
        len(outline.hotspots),
        len(outline.micro_task_steps),
    )
    return outline


def validate_outline(outline: EpisodeOutline) -> ValidationResult:
    """Gate a generated outline before script generation proceeds."""
    result = ValidationResult()
    if len(outline.citations) < MIN_CITATIONS:
        result.errors.append(
            f"Outline has only {len(outline.citations)} citations (need at least {MIN_CITATIONS})"
        )
    steps = count_steps(render_steps(outline.micro_task_steps))
    if steps < MIN_MICRO_TASK_STEPS:
        result.errors.append(f"Micro-task has {steps} steps (need {MIN_MICRO_TASK_STEPS})")
    if len(outline.hotspots) < MIN_HOTSPOTS:
        result.errors.append(
            f"Only {len(outline.hotspots)} hotspots identified (need {MIN_HOTSPOTS})"
        )
    return result


def render_steps(steps: Tuple[str, ...]) -> str:
    """Render outline steps as the numbered list the micro-task text uses."""
    return "\n".join(f"{number}. {step}" for number, step in enumerate(steps, start=1))


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first JSON object in ``text``, fenced or bare."""
    fenced = _FENCED_JSON.search(text)
    candidates: List[str] = []
    if fenced:
        candidates.append(fenced.group(1))
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])
    for candidate in candidates:
        try:
            loaded = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(loaded, dict):
            return loaded
    raise NarrativeError("Outline response did not contain a JSON object")


def _outline_from_payload(payload: dict[str, Any], citations: Tuple[Citation, ...]) -> EpisodeOutline:
    micro_task = payload.get("microTask") or payload.get("micro_task") or {}
    if not isinstance(micro_task, dict):
        micro_task = {}
    return EpisodeOutline(
        purpose=_as_text(payload.get("purpose")),
        stack=_as_text(payload.get("stack")),
        hotspots=_as_text_tuple(payload.get("hotspots")),
        patterns=_as_text(payload.get("patterns")),
        micro_task_title=_as_text(micro_task.get("title")),
        micro_task_steps=_as_text_tuple(micro_task.get("steps")),
        jokes=_as_text_tuple(payload.get("jokes")),
        citations=tuple(citations),
    )


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_text_tuple(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    if isinstance(value, list):
        return tuple(str(item).strip() for item in value if str(item).strip())
    return ()


__all__ = [
    "EpisodeOutline",
    "TextGenerator",
    "extract_json_object",
    "generate_outline",
    "render_steps",
    "validate_outline",
]
