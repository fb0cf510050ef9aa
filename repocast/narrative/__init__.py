"""Narrative stage: outline and script generation from episode data."""

from .outline import EpisodeOutline, generate_outline, validate_outline
from .script import DialogueTurn, EpisodeScript, generate_script, parse_dialogue

__all__ = [
    "DialogueTurn",
    "EpisodeOutline",
    "EpisodeScript",
    "generate_outline",
    "generate_script",
    "parse_dialogue",
    "validate_outline",
]
