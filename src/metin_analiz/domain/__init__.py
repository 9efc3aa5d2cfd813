"""Domain models, errors, and ports for text analysis."""

from metin_analiz.domain.errors import (
    AnalysisServiceError,
    ClientInputError,
    ConfigurationError,
    NotFoundError,
    ProviderError,
    SchemaViolationError,
)
from metin_analiz.domain.models import (
    SENTIMENT_LABELS,
    AnalysisPayload,
    AnalysisRecord,
    AnalysisSummary,
    Sentiment,
)
from metin_analiz.domain.ports import AnalysisProvider, AnalysisRequesterPort, AnalysisStorePort

__all__ = [
    "SENTIMENT_LABELS",
    "AnalysisPayload",
    "AnalysisProvider",
    "AnalysisRecord",
    "AnalysisRequesterPort",
    "AnalysisServiceError",
    "AnalysisStorePort",
    "AnalysisSummary",
    "ClientInputError",
    "ConfigurationError",
    "NotFoundError",
    "ProviderError",
    "SchemaViolationError",
    "Sentiment",
]
