"""Validation gate applied to gathered episode data."""

from __future__ import annotations

from ..models import MIN_CITATIONS, EpisodeData
from .base import ValidationResult
from .steps import count_steps

MIN_SECTION_LENGTH = 50
MIN_MICRO_TASK_STEPS = 5


def validate_episode_data(data: EpisodeData) -> ValidationResult:
    """Check evidence and structure rules; never raises."""
    result = ValidationResult()

    if len(data.citations) < MIN_CITATIONS:
        result.errors.append(
            f"Only {len(data.citations)} citations (need at least {MIN_CITATIONS})"
        )

    steps = count_steps(data.micro_task)
    if steps < MIN_MICRO_TASK_STEPS:
        result.errors.append(
            f"Micro-task has {steps} steps (need {MIN_MICRO_TASK_STEPS})"
        )

    if len(data.purpose or "") < MIN_SECTION_LENGTH:
        result.errors.append("Purpose section too short or missing")

    if len(data.patterns or "") < MIN_SECTION_LENGTH:
        result.errors.append("Patterns section too short or missing")

    return result


__all__ = ["MIN_MICRO_TASK_STEPS", "MIN_SECTION_LENGTH", "validate_episode_data"]
