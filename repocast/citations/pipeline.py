"""Orchestrate indexing, knowledge gathering and citation enrichment."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

from ..analysis.base import AnalysisService
from ..analysis.gatherer import KnowledgeGatherer, StepCallback
from ..analysis.indexing import IndexingCoordinator
from ..errors import ContentFetchError, InsufficientCitations
from ..hosting.base import ContentHost
from ..locator import parse_repository_url
from ..logging import get_logger
from ..models import (
    MAX_CITATIONS,
    MIN_CITATIONS,
    Citation,
    EpisodeData,
    QuestionTopic,
    RawAnswer,
    RepositoryRef,
)
from ..stores.episode_cache import EpisodeCache
from .enricher import CitationEnricher
from .terms import extract_search_terms

DEFAULT_MAX_WAIT = 180.0
DEFAULT_MAX_CONCURRENCY = 5

_TERM_SOURCE_TOPICS = (
    QuestionTopic.PURPOSE,
    QuestionTopic.ENTRYPOINTS,
    QuestionTopic.HOTSPOTS,
    QuestionTopic.PATTERNS,
)


class CitationPipeline:
    """Builds validated :class:`EpisodeData` for a repository URL."""

    def __init__(
        self,
        service: AnalysisService,
        host: ContentHost,
        *,
        coordinator: Optional[IndexingCoordinator] = None,
        gatherer: Optional[KnowledgeGatherer] = None,
        enricher: Optional[CitationEnricher] = None,
        cache: Optional[EpisodeCache] = None,
        max_wait: float = DEFAULT_MAX_WAIT,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        on_step: Optional[StepCallback] = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.host = host
        self.coordinator = coordinator or IndexingCoordinator(service)
        self.gatherer = gatherer or KnowledgeGatherer(service, on_step=on_step)
        self.enricher = enricher or CitationEnricher(host)
        self.cache = cache
        self.max_wait = max_wait
        self.max_concurrency = max_concurrency
        self.logger = get_logger("citations.pipeline")

    def build_episode_data(
        self, repo_url: str, *, max_wait: Optional[float] = None
    ) -> EpisodeData:
        ref = parse_repository_url(repo_url)
        return self.build_for_ref(ref, max_wait=max_wait)

    def build_for_ref(
        self, ref: RepositoryRef, *, max_wait: Optional[float] = None
    ) -> EpisodeData:
        if self.cache is not None:
            cached = self.cache.get(ref.key)
            if cached is not None:
                self.logger.info("Using cached episode data for %s", ref.key)
                return cached

        budget = self.max_wait if max_wait is None else max_wait
        self.logger.info("Preparing %s (indexing budget %ss)", ref.key, f"{budget:g}")
        self.coordinator.ensure_indexed(ref, budget)

        answers = self.gatherer.gather(ref)
        by_topic: Dict[QuestionTopic, RawAnswer] = {answer.topic: answer for answer in answers}

        candidate_paths = collect_mentioned_paths(answers)
        search_terms = extract_search_terms(
            by_topic[topic].text for topic in _TERM_SOURCE_TOPICS if topic in by_topic
        )
        self.logger.info(
            "Found %d file reference(s); validating with %d search term(s)",
            len(candidate_paths),
            len(search_terms),
        )

        citations = self._collect_citations(ref, candidate_paths, search_terms)
        if len(citations) < MIN_CITATIONS:
            raise InsufficientCitations(
                f"Insufficient citations: found {len(citations)}, need at least {MIN_CITATIONS}. "
                "Try a different repository with more code files.",
                found=len(citations),
            )
        self.logger.info("%d citation(s) validated and enriched", len(citations))

        episode = EpisodeData(
            purpose=_text(by_topic, QuestionTopic.PURPOSE),
            entrypoints=_text(by_topic, QuestionTopic.ENTRYPOINTS),
            hotspots=_text(by_topic, QuestionTopic.HOTSPOTS),
            patterns=_text(by_topic, QuestionTopic.PATTERNS),
            micro_task=_text(by_topic, QuestionTopic.MICRO_TASK),
            citations=tuple(citations),
        )
        if self.cache is not None:
            self.cache.store(ref.key, episode)
            self.cache.persist()
        return episode

    def _collect_citations(
        self, ref: RepositoryRef, paths: Sequence[str], search_terms: Sequence[str]
    ) -> List[Citation]:
        citations: List[Citation] = []
        index = 0
        with ThreadPoolExecutor(max_workers=self.max_concurrency) as executor:
            while index < len(paths) and len(citations) < MAX_CITATIONS:
                # Never fetch more paths than there are citation slots left.
                batch_size = min(self.max_concurrency, MAX_CITATIONS - len(citations))
                batch = paths[index : index + batch_size]
                index += len(batch)
                results = executor.map(
                    lambda path: self._verify_and_enrich(ref, path, search_terms), batch
                )
                for citation in results:
                    if citation is None:
                        continue
                    citations.append(citation)
                    if len(citations) >= MAX_CITATIONS:
                        break
        return citations

    def _verify_and_enrich(
        self, ref: RepositoryRef, path: str, search_terms: Sequence[str]
    ) -> Optional[Citation]:
        try:
            exists = self.host.exists(ref, path)
        except ContentFetchError as exc:
            self.logger.warning("Skipping %s; existence check failed: %s", path, exc)
            return None
        if not exists:
            self.logger.warning("Skipping invalid path: %s", path)
            return None
        return self.enricher.enrich(ref, path, search_terms)


def collect_mentioned_paths(answers: Sequence[RawAnswer]) -> Tuple[str, ...]:
    """Union every answer's mentioned paths, keeping first-seen order."""
    seen: Dict[str, None] = {}
    for answer in answers:
        for path in answer.mentioned_paths:
            normalised = path.strip().lstrip("/")
            if normalised:
                seen.setdefault(normalised, None)
    return tuple(seen)


def _text(answers: Dict[QuestionTopic, RawAnswer], topic: QuestionTopic) -> str:
    answer = answers.get(topic)
    return answer.text if answer is not None else ""


__all__ = [
    "CitationPipeline",
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_MAX_WAIT",
    "collect_mentioned_paths",
]
