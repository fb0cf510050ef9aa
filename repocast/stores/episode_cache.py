"""Persistent cache for previously built episode data."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Dict, Optional

from ..models import EpisodeData

_CACHE_VERSION = 1


class EpisodeCache:
    """Stores episode data keyed by repository reference.

    The cache is an optional optimisation; callers must behave identically
    when it is absent or empty.
    """

    def __init__(
        self,
        path: Path | None,
        *,
        max_age: Optional[float] = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._path = path
        self._max_age = max_age
        self._now = now or (lambda: datetime.now(UTC))
        self._entries: Dict[str, Dict[str, object]] = {}
        self._dirty = False
        if self._path is not None:
            self._load(self._path)

    def get(self, key: str) -> Optional[EpisodeData]:
        entry = self._entries.get(key)
        if not entry:
            return None
        if self._is_expired(entry):
            return None
        payload = entry.get("episode")
        if not isinstance(payload, dict):
            return None
        try:
            return EpisodeData.from_dict(payload)
        except (KeyError, TypeError, ValueError):
            return None

    def store(self, key: str, episode: EpisodeData) -> None:
        self._entries[key] = {
            "episode": episode.to_dict(),
            "updated_at": self._now().isoformat().replace("+00:00", "Z"),
        }
        self._dirty = True

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        payload = {
            "version": _CACHE_VERSION,
            "entries": self._entries,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
        )
        self._dirty = False

    def clear(self) -> None:
        self._entries.clear()
        self._dirty = True

    # ------------------------------------------------------------------
    # Internal helpers

    def _is_expired(self, entry: Dict[str, object]) -> bool:
        if self._max_age is None:
            return False
        stamp = entry.get("updated_at")
        if not isinstance(stamp, str):
            return True
        try:
            updated = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
        except ValueError:
            return True
        return (self._now() - updated).total_seconds() > self._max_age

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        valid_entries: Dict[str, Dict[str, object]] = {}
        for key, raw in entries.items():
            if not isinstance(key, str) or not isinstance(raw, dict):
                continue
            if "episode" not in raw or "updated_at" not in raw:
                continue
            valid_entries[key] = raw
        self._entries = valid_entries
        self._dirty = False


__all__ = ["EpisodeCache"]
