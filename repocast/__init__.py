"""Citation-grounded podcast episodes from public source repositories."""

from .citations.pipeline import CitationPipeline
from .locator import parse_repository_url
from .models import Citation, EpisodeData, RepositoryRef
from .validators import validate_episode_data

__version__ = "0.1.0"

__all__ = [
    "Citation",
    "CitationPipeline",
    "EpisodeData",
    "RepositoryRef",
    "parse_repository_url",
    "validate_episode_data",
    "__version__",
]
