"""End-to-end episode generation: citations, validation and narrative."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .analysis.base import AnalysisService
from .analysis.client import GreptileClient
from .analysis.gatherer import KnowledgeGatherer
from .analysis.indexing import IndexingCoordinator
from .citations.formatting import format_citation
from .citations.pipeline import CitationPipeline
from .config import RepocastConfig, load_config
from .hosting.base import ContentHost
from .hosting.github import GitHubContentFetcher
from .llm.runner import LLMRunner
from .locator import parse_repository_url
from .logging import get_logger
from .models import EpisodeData, IndexState, RepositoryRef
from .narrative.outline import EpisodeOutline, TextGenerator, generate_outline, validate_outline
from .narrative.script import EpisodeScript, generate_script
from .stores.episode_cache import EpisodeCache
from .validators.episode import validate_episode_data


@dataclass
class EpisodeOutcome:
    """Result of a generation request."""

    ref: RepositoryRef
    episode: EpisodeData
    outline: Optional[EpisodeOutline] = None
    script: Optional[EpisodeScript] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "repository": self.ref.full_name,
            "branch": self.ref.branch,
            **self.episode.to_dict(),
            "citation_count": len(self.episode.citations),
            "formatted_citations": [format_citation(c) for c in self.episode.citations],
        }
        if self.outline is not None:
            data["outline"] = {
                "purpose": self.outline.purpose,
                "stack": self.outline.stack,
                "hotspots": list(self.outline.hotspots),
                "patterns": self.outline.patterns,
                "micro_task": {
                    "title": self.outline.micro_task_title,
                    "steps": list(self.outline.micro_task_steps),
                },
                "jokes": list(self.outline.jokes),
            }
        if self.script is not None:
            data["script"] = {
                "dialogue": [
                    {"speaker": turn.speaker, "text": turn.text} for turn in self.script.dialogue
                ],
                "word_count": self.script.word_count,
                "estimated_duration": self.script.estimated_duration,
            }
        return data


class Orchestrator:
    """Coordinates the generation flow for one repository URL per call.

    Each call owns its repository reference, index state and episode data, so
    one orchestrator may serve concurrent requests.
    """

    def __init__(
        self,
        config: RepocastConfig | None = None,
        *,
        analysis_service: AnalysisService | None = None,
        content_host: ContentHost | None = None,
        pipeline: CitationPipeline | None = None,
        llm_runner: TextGenerator | None = None,
    ) -> None:
        self.config = config or load_config()
        self.logger = get_logger("orchestrator")
        self.pipeline = pipeline or self._build_pipeline(analysis_service, content_host)
        self._llm_runner = llm_runner

    def run(
        self,
        repo_url: str,
        *,
        max_wait: Optional[float] = None,
        include_script: bool = False,
    ) -> EpisodeOutcome:
        ref = parse_repository_url(repo_url)
        self.logger.info("Starting episode generation for %s", ref.key)
        episode = self.pipeline.build_for_ref(ref, max_wait=max_wait)

        validate_episode_data(episode).raise_for_errors("Episode validation failed")
        outcome = EpisodeOutcome(ref=ref, episode=episode)
        if not include_script:
            return outcome

        runner = self._resolve_llm_runner()
        outline = generate_outline(episode, runner)
        validate_outline(outline).raise_for_errors("Outline validation failed")
        outcome.outline = outline
        outcome.script = generate_script(outline, runner)
        return outcome

    def _build_pipeline(
        self,
        analysis_service: AnalysisService | None,
        content_host: ContentHost | None,
    ) -> CitationPipeline:
        config = self.config
        service = analysis_service or GreptileClient(
            api_key=config.analysis.api_key,
            base_url=config.analysis.base_url,
            github_token=config.github.token,
            request_timeout=config.analysis.request_timeout,
        )
        host = content_host or GitHubContentFetcher(
            token=config.github.token,
            api_url=config.github.api_url,
            request_timeout=config.github.request_timeout,
        )
        cache = None
        if config.pipeline.cache_path is not None:
            cache = EpisodeCache(config.pipeline.cache_path, max_age=config.pipeline.cache_max_age)
        return CitationPipeline(
            service,
            host,
            coordinator=IndexingCoordinator(
                service,
                poll_interval=config.analysis.poll_interval,
                on_progress=self._log_index_progress,
            ),
            gatherer=KnowledgeGatherer(service),
            cache=cache,
            max_wait=config.analysis.max_wait,
            max_concurrency=config.pipeline.max_concurrency,
        )

    def _resolve_llm_runner(self) -> TextGenerator:
        if self._llm_runner is not None:
            return self._llm_runner
        llm_cfg = self.config.llm
        if llm_cfg is None:
            self._llm_runner = LLMRunner()
        else:
            kwargs: Dict[str, Any] = {}
            if llm_cfg.temperature is not None:
                kwargs["temperature"] = llm_cfg.temperature
            if llm_cfg.max_tokens is not None:
                kwargs["max_tokens"] = llm_cfg.max_tokens
            if llm_cfg.request_timeout is not None:
                kwargs["request_timeout"] = llm_cfg.request_timeout
            if llm_cfg.api_key is not None:
                kwargs["api_key"] = llm_cfg.api_key
            self._llm_runner = LLMRunner(llm_cfg.model, base_url=llm_cfg.base_url, **kwargs)
        return self._llm_runner

    def _log_index_progress(self, state: IndexState) -> None:
        if state.files_processed is not None:
            self.logger.info(
                "Index status: %s (%d files processed)", state.status.value, state.files_processed
            )
        else:
            self.logger.info("Index status: %s", state.status.value)


__all__ = ["EpisodeOutcome", "Orchestrator"]
