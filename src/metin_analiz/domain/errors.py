"""Error taxonomy shared by the requester, service, and HTTP layer."""

from __future__ import annotations


class AnalysisServiceError(RuntimeError):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientInputError(AnalysisServiceError):
    """Missing or empty required request field."""

    status_code = 400


class NotFoundError(AnalysisServiceError):
    """Identifier does not resolve to a stored record."""

    status_code = 404

    def __init__(self, analysis_id: str) -> None:
        super().__init__(f"Analysis with id {analysis_id} not found.")
        self.analysis_id = analysis_id


class ConfigurationError(AnalysisServiceError):
    """Provider credential or setting is absent."""


class ProviderError(AnalysisServiceError):
    """Provider call failed or returned an unusable reply."""


class SchemaViolationError(ProviderError):
    """Provider reply could not be parsed into the analysis shape."""
