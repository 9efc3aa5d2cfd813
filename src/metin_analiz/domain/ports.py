"""Ports for the provider, requester, and record persistence."""

from __future__ import annotations

from typing import Any, Protocol

from metin_analiz.domain.models import AnalysisPayload, AnalysisRecord, AnalysisSummary


class AnalysisProvider(Protocol):
    """Submits a prompt plus response schema and returns the raw reply text."""

    name: str

    async def generate(self, *, prompt: str, response_schema: dict[str, Any]) -> str: ...


class AnalysisRequesterPort(Protocol):
    """Turns input text into a validated analysis payload."""

    async def request(self, text: str) -> AnalysisPayload: ...


class AnalysisStorePort(Protocol):
    """Identifier-keyed record storage used by the analysis service."""

    def insert(self, record: AnalysisRecord) -> None: ...

    def get(self, analysis_id: str) -> AnalysisRecord | None: ...

    def list_summaries(self) -> list[AnalysisSummary]: ...

    def replace(
        self, *, analysis_id: str, analysis: AnalysisPayload, timestamp: str
    ) -> AnalysisRecord | None: ...

    def delete(self, analysis_id: str) -> bool: ...

    def contains(self, analysis_id: str) -> bool: ...
