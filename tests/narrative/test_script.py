"""Tests for script generation."""

from __future__ import annotations

import pytest

from repocast.errors import NarrativeError
from repocast.models import Citation
from repocast.narrative import EpisodeOutline, generate_script
from repocast.narrative.script import DialogueTurn, parse_dialogue

OUTLINE = EpisodeOutline(
    purpose="A link shortener.",
    stack="TypeScript",
    hotspots=("src/url.ts", "src/store.ts", "src/index.ts"),
    patterns="Errors bubble up.",
    micro_task_title="Add TTLs",
    micro_task_steps=("Open", "Edit", "Test", "Doc", "Ship"),
    jokes=("The store stores.",),
    citations=(Citation(filepath="src/url.ts", line_start=1, line_end=3),),
)


class StaticRunner:
    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.prompts = []

    def run(self, prompt, *, system=None, temperature=None, max_tokens=None):
        self.prompts.append(prompt)
        return self.reply


def test_parse_dialogue_keeps_speaker_lines() -> None:
    text = "Cold open\nHOST: Welcome.\n**Guest**: Thanks for having me.\n\nHOST:   \nnarrator: ignored"

    assert parse_dialogue(text) == (
        DialogueTurn(speaker="HOST", text="Welcome."),
        DialogueTurn(speaker="GUEST", text="Thanks for having me."),
    )


def test_generate_script_estimates_duration() -> None:
    words = " ".join(["word"] * 149)
    runner = StaticRunner(f"HOST: {words}\nGUEST: Indeed.")

    script = generate_script(OUTLINE, runner)

    assert script.word_count == 150
    assert script.estimated_duration == 60
    assert "src/url.ts:L1-L3" in runner.prompts[0]


def test_generate_script_without_turns_raises() -> None:
    with pytest.raises(NarrativeError):
        generate_script(OUTLINE, StaticRunner("No dialogue here."))
