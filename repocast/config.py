"""Configuration loading for repocast (.repocast.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".repocast.yml"


@dataclass
class GitHubConfig:
    """Content-hosting service settings."""

    api_url: str = "https://api.github.com"
    token: Optional[str] = None
    request_timeout: float = 30.0


@dataclass
class AnalysisConfig:
    """Code-analysis service settings and indexing budget."""

    base_url: str = "https://api.greptile.com/v2"
    api_key: Optional[str] = None
    poll_interval: float = 3.0
    max_wait: float = 180.0
    request_timeout: float = 60.0


@dataclass
class PipelineConfig:
    """Citation pipeline tuning."""

    max_concurrency: int = 5
    cache_path: Optional[Path] = None
    cache_max_age: Optional[float] = None


@dataclass
class LLMConfig:
    """Text-generation runtime settings."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None


@dataclass
class RepocastConfig:
    """Represents the settings defined in .repocast.yml plus environment secrets."""

    root: Path
    github: GitHubConfig = field(default_factory=GitHubConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    llm: Optional[LLMConfig] = None


def load_config(config_path: Path | None = None) -> RepocastConfig:
    """Load configuration from disk, falling back to defaults and environment."""
    config_file = _resolve_config_path(config_path or Path.cwd())
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    github_data = _as_dict(data.get("github"))
    github = GitHubConfig(
        api_url=_as_str(github_data.get("api_url")) or GitHubConfig.api_url,
        token=_as_str(github_data.get("token")) or _env("REPOCAST_GITHUB_TOKEN", "GITHUB_TOKEN"),
        request_timeout=_as_float(github_data.get("request_timeout")) or GitHubConfig.request_timeout,
    )

    analysis_data = _as_dict(data.get("analysis"))
    analysis = AnalysisConfig(
        base_url=_as_str(analysis_data.get("base_url")) or AnalysisConfig.base_url,
        api_key=_as_str(analysis_data.get("api_key"))
        or _env("REPOCAST_ANALYSIS_API_KEY", "GREPTILE_API_KEY"),
        poll_interval=_as_float(analysis_data.get("poll_interval")) or AnalysisConfig.poll_interval,
        max_wait=_as_float(analysis_data.get("max_wait")) or AnalysisConfig.max_wait,
        request_timeout=_as_float(analysis_data.get("request_timeout"))
        or AnalysisConfig.request_timeout,
    )

    pipeline_data = _as_dict(data.get("pipeline"))
    cache_path_str = _as_str(pipeline_data.get("cache_path"))
    pipeline = PipelineConfig(
        max_concurrency=_as_int(pipeline_data.get("max_concurrency")) or PipelineConfig.max_concurrency,
        cache_path=root / cache_path_str if cache_path_str else None,
        cache_max_age=_as_float(pipeline_data.get("cache_max_age")),
    )
    if pipeline.max_concurrency < 1:
        raise ConfigError("pipeline.max_concurrency must be at least 1")

    llm_data = _as_dict(data.get("llm"))
    llm = None
    if llm_data:
        llm = LLMConfig(
            model=_as_str(llm_data.get("model")),
            base_url=_as_str(llm_data.get("base_url")),
            api_key=_as_str(llm_data.get("api_key")),
            temperature=_as_float(llm_data.get("temperature")),
            max_tokens=_as_int(llm_data.get("max_tokens")),
            request_timeout=_as_float(llm_data.get("request_timeout")),
        )
        if not any(
            (
                llm.model,
                llm.base_url,
                llm.api_key,
                llm.temperature,
                llm.max_tokens,
                llm.request_timeout,
            )
        ):
            llm = None

    return RepocastConfig(root=root, github=github, analysis=analysis, pipeline=pipeline, llm=llm)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _env(*keys: str) -> Optional[str]:
    return _first_env_value(keys)


def _first_env_value(keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = os.getenv(key)
        if value:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "GitHubConfig",
    "LLMConfig",
    "PipelineConfig",
    "RepocastConfig",
    "load_config",
]
