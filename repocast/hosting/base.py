"""Protocol implemented by content-hosting clients."""

from __future__ import annotations

from typing import Protocol

from ..models import RepositoryRef


class ContentHost(Protocol):
    """Read-only view of repository files on a hosting service."""

    def fetch_file(self, ref: RepositoryRef, path: str) -> str:
        """Return the decoded text of ``path`` or raise ``ContentFetchError``."""

    def exists(self, ref: RepositoryRef, path: str) -> bool:
        """Return whether ``path`` names a file on the referenced branch."""
