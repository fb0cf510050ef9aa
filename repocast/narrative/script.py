"""Turn an outline into two-speaker podcast dialogue."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Tuple

from ..citations.formatting import format_citations_for_transcript
from ..errors import NarrativeError
from ..logging import get_logger
from .outline import EpisodeOutline, TextGenerator
from .prompts import GUEST_SPEAKER, HOST_SPEAKER, SCRIPT_SYSTEM_PROMPT, SCRIPT_USER_TEMPLATE

WORDS_PER_MINUTE = 150

_TURN_PATTERN = re.compile(
    rf"^\s*\**\s*({HOST_SPEAKER}|{GUEST_SPEAKER})\s*\**\s*:\s*(.+)$", re.IGNORECASE
)

logger = get_logger("narrative.script")


@dataclass(frozen=True)
class DialogueTurn:
    speaker: str
    text: str


@dataclass(frozen=True)
class EpisodeScript:
    """Parsed dialogue plus length estimates."""

    dialogue: Tuple[DialogueTurn, ...]
    word_count: int
    estimated_duration: int


def generate_script(outline: EpisodeOutline, runner: TextGenerator) -> EpisodeScript:
    prompt = SCRIPT_USER_TEMPLATE.format(
        purpose=outline.purpose,
        stack=outline.stack,
        hotspots=", ".join(outline.hotspots),
        patterns=outline.patterns,
        micro_task_title=outline.micro_task_title,
        micro_task_steps="; ".join(outline.micro_task_steps),
        jokes="; ".join(outline.jokes),
        citations=format_citations_for_transcript(outline.citations),
    )
    reply = runner.run(prompt, system=SCRIPT_SYSTEM_PROMPT, temperature=0.8, max_tokens=2000)
    dialogue = parse_dialogue(reply)
    if not dialogue:
        raise NarrativeError("Script response contained no speaker turns")
    word_count = sum(len(turn.text.split()) for turn in dialogue)
    duration = math.ceil(word_count / WORDS_PER_MINUTE * 60)
    logger.info("Script generated: %d turns, %d words", len(dialogue), word_count)
    return EpisodeScript(dialogue=dialogue, word_count=word_count, estimated_duration=duration)


def parse_dialogue(text: str) -> Tuple[DialogueTurn, ...]:
    """Keep lines that start with a known speaker label."""
    turns: List[DialogueTurn] = []
    for line in text.splitlines():
        match = _TURN_PATTERN.match(line)
        if not match:
            continue
        spoken = match.group(2).strip()
        if spoken:
            turns.append(DialogueTurn(speaker=match.group(1).upper(), text=spoken))
    return tuple(turns)


__all__ = ["DialogueTurn", "EpisodeScript", "WORDS_PER_MINUTE", "generate_script", "parse_dialogue"]
