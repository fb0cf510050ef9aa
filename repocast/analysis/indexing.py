"""Drive the analysis service until a repository is ready to query."""

from __future__ import annotations

import time
from typing import Callable, Optional

from ..errors import AnalysisServiceError, IndexingFailed, IndexingTimeout
from ..logging import get_logger
from ..models import IndexState, IndexStatus, RepositoryRef
from .base import AnalysisService

ProgressCallback = Callable[[IndexState], None]


class IndexingCoordinator:
    """Submits repositories for indexing and polls until they are ready.

    The coordinator is agnostic to deployment mode: ``max_wait`` is supplied
    per call, so a request/response handler can pass a short budget while a
    background worker passes a long one.
    """

    DEFAULT_POLL_INTERVAL = 3.0

    def __init__(
        self,
        service: AnalysisService,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        on_progress: Optional[ProgressCallback] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.service = service
        self.poll_interval = poll_interval
        self.on_progress = on_progress
        self._clock = clock
        self._sleep = sleep
        self.logger = get_logger("analysis.indexing")

    def ensure_indexed(self, ref: RepositoryRef, max_wait: float) -> None:
        """Block until ``ref`` is indexed, raising on failure or timeout."""
        started = self._clock()
        state = self._status(ref)
        if state.status is IndexStatus.COMPLETED:
            self.logger.info("%s already indexed", ref.key)
            return

        if state.status in (IndexStatus.UNKNOWN, IndexStatus.FAILED):
            action = "Resubmitting" if state.status is IndexStatus.FAILED else "Submitting"
            self.logger.info("%s %s for indexing", action, ref.key)
            try:
                self.service.submit_for_indexing(ref)
            except AnalysisServiceError as exc:
                raise IndexingFailed(f"Could not submit {ref.key} for indexing: {exc}") from exc

        while True:
            remaining = max_wait - (self._clock() - started)
            if remaining <= 0:
                raise IndexingTimeout(
                    f"Indexing {ref.key} did not complete within {max_wait:g} seconds"
                )
            self._sleep(min(self.poll_interval, remaining))
            state = self._status(ref)
            if state.status is IndexStatus.COMPLETED:
                self.logger.info("Indexing completed for %s", ref.key)
                return
            if state.status is IndexStatus.FAILED:
                raise IndexingFailed(f"Analysis service failed to index {ref.key}")

    def _status(self, ref: RepositoryRef) -> IndexState:
        try:
            state = self.service.get_index_status(ref)
        except AnalysisServiceError as exc:
            raise IndexingFailed(f"Could not read indexing status for {ref.key}: {exc}") from exc
        self.logger.debug(
            "Index status for %s: %s (files processed: %s)",
            ref.key,
            state.status.value,
            state.files_processed if state.files_processed is not None else "?",
        )
        if self.on_progress is not None:
            self.on_progress(state)
        return state


__all__ = ["IndexingCoordinator", "ProgressCallback"]
