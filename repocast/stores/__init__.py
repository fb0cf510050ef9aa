"""Optional persistence helpers."""

from .episode_cache import EpisodeCache

__all__ = ["EpisodeCache"]
