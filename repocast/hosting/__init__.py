"""Content-hosting service clients."""

from .base import ContentHost
from .github import GitHubContentFetcher

__all__ = ["ContentHost", "GitHubContentFetcher"]
