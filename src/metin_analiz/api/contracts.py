"""Typed contracts shared by API handlers and the Python client."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from metin_analiz.domain.models import AnalysisPayload, AnalysisRecord, AnalysisSummary, Sentiment


class ContractModel(BaseModel):
    """Base model config used by all API contracts."""

    model_config = ConfigDict(extra="forbid")


class RequestModel(ContractModel):
    """Request bodies tolerate unknown keys sent by web clients."""

    model_config = ConfigDict(extra="ignore")


class AnalysisCreateRequest(RequestModel):
    """POST body. Emptiness is checked by the service so it maps to 400."""

    text: str | None = None


class AnalysisUpdateRequest(RequestModel):
    id: str | None = None
    text: str | None = None


class AnalysisDeleteRequest(RequestModel):
    id: str | None = None


class AnalysisPayloadResponse(ContractModel):
    """Four-field analysis payload, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: str
    key_ideas: list[str] = Field(min_length=1)
    sentiment: Sentiment
    rewritten_text: str

    @classmethod
    def from_domain(cls, payload: AnalysisPayload) -> AnalysisPayloadResponse:
        return cls(
            summary=payload.summary,
            key_ideas=list(payload.key_ideas),
            sentiment=payload.sentiment,
            rewritten_text=payload.rewritten_text,
        )


class AnalysisRecordResponse(ContractModel):
    id: str
    timestamp: str
    analysis: AnalysisPayloadResponse

    @classmethod
    def from_domain(cls, record: AnalysisRecord) -> AnalysisRecordResponse:
        return cls(
            id=record.analysis_id,
            timestamp=record.timestamp,
            analysis=AnalysisPayloadResponse.from_domain(record.analysis),
        )


class AnalysisSummaryResponse(ContractModel):
    id: str
    timestamp: str

    @classmethod
    def from_domain(cls, summary: AnalysisSummary) -> AnalysisSummaryResponse:
        return cls(id=summary.analysis_id, timestamp=summary.timestamp)


class AnalysisListResponse(ContractModel):
    analyses: list[AnalysisSummaryResponse] = Field(default_factory=list)


class ErrorResponse(ContractModel):
    """Structured error body; `error` carries optional detail."""

    message: str
    error: str | None = None


class HealthResponse(ContractModel):
    ok: bool = True
