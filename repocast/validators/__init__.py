"""Structural validation gates for episode data and generated outlines."""

from .base import ValidationResult
from .episode import (
    MIN_MICRO_TASK_STEPS,
    MIN_SECTION_LENGTH,
    validate_episode_data,
)
from .steps import count_steps

__all__ = [
    "MIN_MICRO_TASK_STEPS",
    "MIN_SECTION_LENGTH",
    "ValidationResult",
    "count_steps",
    "validate_episode_data",
]
