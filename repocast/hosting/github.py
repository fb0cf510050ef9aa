"""GitHub REST client used to verify and fetch cited files."""

from __future__ import annotations

import base64
import binascii
import os
from typing import Dict, Optional
from urllib.parse import quote

from ..errors import ContentFetchError, FileNotFoundInRepository
from ..http import HttpError, send_request
from ..logging import get_logger
from ..models import RepositoryRef


class GitHubContentFetcher:
    """Reads file contents through the GitHub contents API."""

    DEFAULT_API_URL = "https://api.github.com"
    ENV_TOKEN_KEYS = ("REPOCAST_GITHUB_TOKEN", "GITHUB_TOKEN")

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        request_timeout: Optional[float] = 30.0,
    ) -> None:
        self.token = token or self._token_from_env()
        self.api_url = (api_url or self.DEFAULT_API_URL).rstrip("/")
        self.request_timeout = request_timeout
        self.logger = get_logger("hosting.github")

    def fetch_file(self, ref: RepositoryRef, path: str) -> str:
        """Return the UTF-8 text of ``path`` on ``ref.branch``."""
        url = self._contents_url(ref, path)
        try:
            response = send_request(
                "GET", url, headers=self._headers(), timeout=self.request_timeout
            )
            payload = response.json()
        except HttpError as exc:
            if exc.status == 404:
                raise FileNotFoundInRepository(
                    f"{path} not found in {ref.key}"
                ) from exc
            raise ContentFetchError(f"Failed to fetch {path}: {exc}") from exc

        if not isinstance(payload, dict):
            # Directory listings come back as arrays.
            raise ContentFetchError(f"{path} is not a file in {ref.key}")
        return self._decode_payload(path, payload)

    def exists(self, ref: RepositoryRef, path: str) -> bool:
        """Return whether ``path`` names a file; directories count as missing."""
        url = self._contents_url(ref, path)
        try:
            response = send_request(
                "GET", url, headers=self._headers(), timeout=self.request_timeout
            )
            payload = response.json()
        except HttpError as exc:
            if exc.status == 404:
                return False
            raise ContentFetchError(f"Failed to check {path}: {exc}") from exc
        if not isinstance(payload, dict):
            self.logger.debug("%s is a directory in %s", path, ref.key)
            return False
        return payload.get("type", "file") == "file"

    def _decode_payload(self, path: str, payload: Dict[str, object]) -> str:
        content = payload.get("content")
        encoding = payload.get("encoding")
        if isinstance(content, str) and content and encoding == "base64":
            try:
                raw = base64.b64decode(content)
            except (binascii.Error, ValueError) as exc:
                raise ContentFetchError(f"Invalid base64 payload for {path}") from exc
            return raw.decode("utf-8", errors="replace")

        # Files above the contents API inline limit only expose a download URL.
        download_url = payload.get("download_url")
        if isinstance(download_url, str) and download_url:
            self.logger.debug("Fetching %s via download_url", path)
            try:
                response = send_request(
                    "GET", download_url, headers=self._headers(), timeout=self.request_timeout
                )
            except HttpError as exc:
                raise ContentFetchError(f"Failed to download {path}: {exc}") from exc
            return response.text()

        if content == "" and payload.get("size") == 0:
            return ""
        raise ContentFetchError(f"GitHub returned no content for {path}")

    def _contents_url(self, ref: RepositoryRef, path: str) -> str:
        owner = quote(ref.owner, safe="")
        name = quote(ref.name, safe="")
        encoded_path = quote(path.lstrip("/"), safe="/")
        branch = quote(ref.branch, safe="")
        return f"{self.api_url}/repos/{owner}/{name}/contents/{encoded_path}?ref={branch}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json", "User-Agent": "repocast"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @classmethod
    def _token_from_env(cls) -> Optional[str]:
        for key in cls.ENV_TOKEN_KEYS:
            value = os.getenv(key)
            if value:
                return value
        return None


__all__ = ["GitHubContentFetcher"]
