"""Tests for the HTTP analysis client."""

from __future__ import annotations

import pytest

from repocast.analysis import GreptileClient, QualityMode
from repocast.errors import AnalysisServiceError
from repocast.models import IndexStatus, RepositoryRef
from tests._fixtures.http import install

BASE = "https://api.example.test/v2"
STATUS_URL = f"{BASE}/repositories/github%3Amain%3Aacme%2Fshortener"


def _client() -> GreptileClient:
    return GreptileClient(api_key="secret", base_url=BASE + "/", github_token="gh-token")


def test_status_is_mapped_from_service_vocabulary(monkeypatch, ref: RepositoryRef) -> None:
    install(monkeypatch, {f"GET {STATUS_URL}": {"status": "cloning", "filesProcessed": 12}})

    state = _client().get_index_status(ref)

    assert state.status is IndexStatus.PROCESSING
    assert state.files_processed == 12


def test_unknown_repository_maps_404_to_unknown(monkeypatch, ref: RepositoryRef) -> None:
    install(monkeypatch, {f"GET {STATUS_URL}": 404})

    assert _client().get_index_status(ref).status is IndexStatus.UNKNOWN


def test_server_error_raises(monkeypatch, ref: RepositoryRef) -> None:
    install(monkeypatch, {f"GET {STATUS_URL}": 500})

    with pytest.raises(AnalysisServiceError):
        _client().get_index_status(ref)


def test_submit_posts_repository_with_credentials(monkeypatch, ref: RepositoryRef) -> None:
    fake = install(monkeypatch, {f"POST {BASE}/repositories": {"response": "started"}})

    _client().submit_for_indexing(ref)

    request = fake.requests[0]
    assert request["payload"] == {
        "remote": "github",
        "repository": "acme/shortener",
        "branch": "main",
    }
    assert request["headers"]["authorization"] == "Bearer secret"
    assert request["headers"]["x-github-token"] == "gh-token"


def test_ask_sends_session_and_parses_sources(monkeypatch, ref: RepositoryRef) -> None:
    fake = install(
        monkeypatch,
        {
            f"POST {BASE}/query": {
                "message": "It shortens links.",
                "sources": [
                    {"filepath": "src/url.ts", "linestart": 1},
                    {"filepath": "  "},
                    {"repository": "acme/shortener"},
                    {"filepath": " src/store.ts "},
                ],
            }
        },
    )

    answer = _client().ask(
        ref, "What is this?", session_id="episode-1", quality_mode=QualityMode.HIGH
    )

    assert answer.text == "It shortens links."
    assert answer.source_paths == ("src/url.ts", "src/store.ts")
    payload = fake.requests[0]["payload"]
    assert payload["sessionId"] == "episode-1"
    assert payload["genius"] is True
    assert payload["stream"] is False
    assert payload["messages"] == [{"role": "user", "content": "What is this?"}]


def test_ask_without_message_raises(monkeypatch, ref: RepositoryRef) -> None:
    install(monkeypatch, {f"POST {BASE}/query": {"sources": []}})

    with pytest.raises(AnalysisServiceError):
        _client().ask(ref, "What is this?", session_id="episode-1")


def test_api_key_is_read_from_environment(monkeypatch) -> None:
    monkeypatch.delenv("REPOCAST_ANALYSIS_API_KEY", raising=False)
    monkeypatch.setenv("GREPTILE_API_KEY", "env-key")

    assert GreptileClient().api_key == "env-key"
