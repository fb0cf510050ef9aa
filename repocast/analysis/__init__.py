"""Code-analysis service integration: indexing and question answering."""

from .base import AnalysisAnswer, AnalysisService, QualityMode
from .client import GreptileClient
from .gatherer import KnowledgeGatherer, QUESTIONS
from .indexing import IndexingCoordinator

__all__ = [
    "AnalysisAnswer",
    "AnalysisService",
    "GreptileClient",
    "IndexingCoordinator",
    "KnowledgeGatherer",
    "QUESTIONS",
    "QualityMode",
]
