"""Public API surface for HTTP serving and the Python client."""

from metin_analiz.api.app import create_app
from metin_analiz.api.contracts import (
    AnalysisListResponse,
    AnalysisPayloadResponse,
    AnalysisRecordResponse,
    ErrorResponse,
)
from metin_analiz.api.python_interface import AnalysisApiClient, AnalysisApiError

__all__ = [
    "AnalysisApiClient",
    "AnalysisApiError",
    "AnalysisListResponse",
    "AnalysisPayloadResponse",
    "AnalysisRecordResponse",
    "ErrorResponse",
    "create_app",
]
