"""Tests for repocast.citations.pipeline."""

from __future__ import annotations

import time
from pathlib import Path

import pytest

from repocast.citations.enricher import NOTE_BINARY
from repocast.citations.pipeline import CitationPipeline, collect_mentioned_paths
from repocast.errors import InsufficientCitations, InvalidRepositoryUrl
from repocast.models import Citation, QuestionTopic, RawAnswer, RepositoryRef
from repocast.stores import EpisodeCache
from tests._fixtures.fakes import (
    FakeAnalysisService,
    FakeContentHost,
    LONG_PURPOSE,
    answers_with_paths,
)

FILES = {
    "src/url.ts": "export function parseUrl(s) {\n  return s.trim();\n}\n",
    "src/index.ts": "startServer();\n",
    "src/store.ts": (
        "import x from 'y';\n\nexport class LinkStore {\n  get(k) {\n    return k;\n  }\n}\n"
    ),
    "logo.png": "binary",
}


def _service() -> FakeAnalysisService:
    return FakeAnalysisService(
        answers=answers_with_paths(
            {
                QuestionTopic.PURPOSE: ["src/url.ts", "logo.png"],
                QuestionTopic.ENTRYPOINTS: ["/src/index.ts", "docs/missing.md"],
                QuestionTopic.HOTSPOTS: ["src/store.ts", "src/url.ts"],
            }
        )
    )


def test_pipeline_builds_verified_episode() -> None:
    service = _service()
    host = FakeContentHost(FILES)

    episode = CitationPipeline(service, host).build_episode_data(
        "https://github.com/acme/shortener"
    )

    assert episode.purpose == LONG_PURPOSE
    assert episode.citations == (
        Citation(filepath="src/url.ts", line_start=1, line_end=3, label="parseUrl"),
        Citation(filepath="logo.png", note=NOTE_BINARY),
        Citation(filepath="src/index.ts", line_start=1, line_end=1, label="startServer"),
        Citation(filepath="src/store.ts", line_start=3, line_end=7, label="LinkStore"),
    )
    assert "docs/missing.md" in host.exists_calls
    assert "docs/missing.md" not in host.fetch_calls
    assert len({question["session_id"] for question in service.questions}) == 1


def test_pipeline_skips_paths_whose_existence_check_fails() -> None:
    host = FakeContentHost(FILES, broken_exists=["src/index.ts"])

    episode = CitationPipeline(_service(), host).build_episode_data("github.com/acme/shortener")

    assert [citation.filepath for citation in episode.citations] == [
        "src/url.ts",
        "logo.png",
        "src/store.ts",
    ]


def test_pipeline_caps_citations_and_fetches() -> None:
    paths = [f"src/module_{n}.ts" for n in range(15)]
    files = {path: "export const value = 1;\n" for path in paths}
    service = FakeAnalysisService(answers=answers_with_paths({QuestionTopic.PURPOSE: paths}))
    host = FakeContentHost(files)

    episode = CitationPipeline(service, host, max_concurrency=5).build_episode_data(
        "https://github.com/acme/shortener"
    )

    assert len(episode.citations) == 10
    assert [citation.filepath for citation in episode.citations] == paths[:10]
    assert len(host.exists_calls) == 10
    assert len(host.fetch_calls) == 10


def test_pipeline_raises_when_too_few_files_verify() -> None:
    service = FakeAnalysisService(
        answers=answers_with_paths(
            {QuestionTopic.PURPOSE: ["src/url.ts", "src/index.ts", "nope.ts", "gone.ts"]}
        )
    )
    host = FakeContentHost(FILES)

    with pytest.raises(InsufficientCitations) as excinfo:
        CitationPipeline(service, host).build_episode_data("https://github.com/acme/shortener")

    assert excinfo.value.found == 2


def test_invalid_url_makes_no_service_calls() -> None:
    service = _service()
    host = FakeContentHost(FILES)

    with pytest.raises(InvalidRepositoryUrl):
        CitationPipeline(service, host).build_episode_data("https://gitlab.com/acme/shortener")

    assert service.status_calls == 0
    assert service.questions == []
    assert host.exists_calls == []


def test_citation_order_ignores_completion_order() -> None:
    paths = [f"src/file_{n}.ts" for n in range(6)]

    class SlowHost(FakeContentHost):
        def exists(self, ref: RepositoryRef, path: str) -> bool:
            # Earlier paths finish last.
            time.sleep(0.005 * (len(paths) - paths.index(path)))
            return super().exists(ref, path)

    service = FakeAnalysisService(answers=answers_with_paths({QuestionTopic.HOTSPOTS: paths}))
    host = SlowHost({path: "x\n" for path in paths})

    episode = CitationPipeline(service, host, max_concurrency=3).build_episode_data(
        "https://github.com/acme/shortener"
    )

    assert [citation.filepath for citation in episode.citations] == paths


def test_cached_episode_skips_remote_calls(tmp_path: Path) -> None:
    cache_path = tmp_path / "episodes.json"
    CitationPipeline(
        _service(), FakeContentHost(FILES), cache=EpisodeCache(cache_path)
    ).build_episode_data("https://github.com/acme/shortener")

    service = _service()
    host = FakeContentHost(FILES)
    episode = CitationPipeline(
        service, host, cache=EpisodeCache(cache_path)
    ).build_episode_data("https://github.com/acme/shortener")

    assert len(episode.citations) == 4
    assert service.status_calls == 0
    assert host.exists_calls == []


def test_invalid_concurrency_is_rejected() -> None:
    with pytest.raises(ValueError):
        CitationPipeline(_service(), FakeContentHost(), max_concurrency=0)


def test_collect_mentioned_paths_deduplicates_in_order() -> None:
    answers = [
        RawAnswer(QuestionTopic.PURPOSE, "a", ("src/a.ts", "/src/b.ts")),
        RawAnswer(QuestionTopic.ENTRYPOINTS, "b", ("src/b.ts", " ", "src/c.ts")),
    ]

    assert collect_mentioned_paths(answers) == ("src/a.ts", "src/b.ts", "src/c.ts")
