"""Parse user-supplied repository URLs into repository references."""

from __future__ import annotations

from urllib.parse import unquote, urlparse

from .errors import InvalidRepositoryUrl
from .models import RepositoryRef

DEFAULT_BRANCH = "main"
_GITHUB_HOSTS = {"github.com", "www.github.com"}


def parse_repository_url(url: str, *, default_branch: str = DEFAULT_BRANCH) -> RepositoryRef:
    """Return the owner, name and branch encoded in a GitHub URL.

    Accepts ``https://github.com/OWNER/REPO``, ``github.com/OWNER/REPO``, an
    optional ``.git`` suffix, and ``/tree/BRANCH`` links. Anything else raises
    :class:`InvalidRepositoryUrl` without touching the network.
    """
    raw = (url or "").strip()
    if not raw:
        raise InvalidRepositoryUrl("Repository URL is empty")

    if "://" not in raw:
        raw = f"https://{raw}"
    parsed = urlparse(raw)
    if parsed.scheme not in {"http", "https"}:
        raise InvalidRepositoryUrl(f"Unsupported URL scheme in {url!r}")
    host = (parsed.hostname or "").lower()
    if host not in _GITHUB_HOSTS:
        raise InvalidRepositoryUrl(
            f"Only github.com repositories are supported, got {url!r}"
        )

    parts = [unquote(part) for part in parsed.path.split("/") if part]
    if len(parts) < 2:
        raise InvalidRepositoryUrl(
            "Repository URL must look like https://github.com/OWNER/REPO"
        )

    owner, name = parts[0], parts[1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not owner or not name:
        raise InvalidRepositoryUrl(f"Repository URL is missing owner or name: {url!r}")

    branch = default_branch
    if len(parts) >= 4 and parts[2] == "tree":
        branch = parts[3]

    return RepositoryRef(owner=owner, name=name, branch=branch)


__all__ = ["DEFAULT_BRANCH", "parse_repository_url"]
