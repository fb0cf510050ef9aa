"""HTTP client for a Greptile-style code question-answering API."""

from __future__ import annotations

import os
from typing import Dict, List, Optional, Sequence
from urllib.parse import quote

from ..errors import AnalysisServiceError
from ..http import HttpError, send_request
from ..logging import get_logger
from ..models import IndexState, IndexStatus, RepositoryRef
from .base import AnalysisAnswer, QualityMode

_STATUS_MAP = {
    "completed": IndexStatus.COMPLETED,
    "failed": IndexStatus.FAILED,
    "submitted": IndexStatus.SUBMITTED,
    "queued": IndexStatus.SUBMITTED,
    "cloning": IndexStatus.PROCESSING,
    "processing": IndexStatus.PROCESSING,
}


class GreptileClient:
    """Indexes repositories and answers questions against them."""

    DEFAULT_BASE_URL = "https://api.greptile.com/v2"
    REMOTE = "github"
    ENV_API_KEY_KEYS = ("REPOCAST_ANALYSIS_API_KEY", "GREPTILE_API_KEY")
    ENV_GITHUB_TOKEN_KEYS = ("REPOCAST_GITHUB_TOKEN", "GITHUB_TOKEN")

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        github_token: Optional[str] = None,
        request_timeout: Optional[float] = 60.0,
    ) -> None:
        self.api_key = api_key or _first_env_value(self.ENV_API_KEY_KEYS)
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.github_token = github_token or _first_env_value(self.ENV_GITHUB_TOKEN_KEYS)
        self.request_timeout = request_timeout
        self.logger = get_logger("analysis.client")

    def submit_for_indexing(self, ref: RepositoryRef) -> None:
        self.logger.debug("Submitting %s for indexing", ref.key)
        self._post("/repositories", self._repository_payload(ref))

    def get_index_status(self, ref: RepositoryRef) -> IndexState:
        repo_id = quote(f"{self.REMOTE}:{ref.branch}:{ref.full_name}", safe="")
        try:
            response = send_request(
                "GET",
                f"{self.base_url}/repositories/{repo_id}",
                headers=self._headers(),
                timeout=self.request_timeout,
            )
            payload = response.json()
        except HttpError as exc:
            if exc.status == 404:
                return IndexState(status=IndexStatus.UNKNOWN)
            raise AnalysisServiceError(f"Failed to check index status: {exc}") from exc

        if not isinstance(payload, dict):
            raise AnalysisServiceError("Index status response is not an object")
        raw_status = str(payload.get("status") or "").strip().lower()
        status = _STATUS_MAP.get(raw_status)
        if status is None:
            self.logger.debug("Unrecognised index status %r; treating as processing", raw_status)
            status = IndexStatus.PROCESSING
        files_processed = payload.get("filesProcessed")
        return IndexState(
            status=status,
            files_processed=files_processed if isinstance(files_processed, int) else None,
        )

    def ask(
        self,
        ref: RepositoryRef,
        question: str,
        *,
        session_id: str,
        quality_mode: QualityMode = QualityMode.STANDARD,
    ) -> AnalysisAnswer:
        payload = {
            "messages": [{"role": "user", "content": question}],
            "repositories": [self._repository_payload(ref)],
            "sessionId": session_id,
            "stream": False,
            "genius": quality_mode is QualityMode.HIGH,
        }
        data = self._post("/query", payload)
        if not isinstance(data, dict):
            raise AnalysisServiceError("Query response is not an object")
        message = data.get("message")
        if not isinstance(message, str):
            raise AnalysisServiceError("Query response is missing an answer message")
        return AnalysisAnswer(text=message, source_paths=_source_paths(data.get("sources")))

    def _post(self, path: str, payload: Dict[str, object]) -> object:
        try:
            response = send_request(
                "POST",
                f"{self.base_url}{path}",
                headers=self._headers(),
                payload=payload,
                timeout=self.request_timeout,
            )
            if not response.body:
                return {}
            return response.json()
        except HttpError as exc:
            raise AnalysisServiceError(f"Analysis service request to {path} failed: {exc}") from exc

    def _repository_payload(self, ref: RepositoryRef) -> Dict[str, object]:
        return {"remote": self.REMOTE, "repository": ref.full_name, "branch": ref.branch}

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if self.github_token:
            headers["X-Github-Token"] = self.github_token
        return headers


def _source_paths(sources: object) -> tuple[str, ...]:
    if not isinstance(sources, list):
        return ()
    paths: List[str] = []
    for source in sources:
        if not isinstance(source, dict):
            continue
        filepath = source.get("filepath")
        if isinstance(filepath, str) and filepath.strip():
            paths.append(filepath.strip())
    return tuple(paths)


def _first_env_value(keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = os.getenv(key)
        if value:
            return value
    return None


__all__ = ["GreptileClient"]
