"""Core analysis domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal

Sentiment = Literal["Positive", "Negative", "Neutral"]

SENTIMENT_LABELS: Final[tuple[Sentiment, ...]] = ("Positive", "Negative", "Neutral")


@dataclass(frozen=True)
class AnalysisPayload:
    """Provider-generated analysis of one input text."""

    summary: str
    key_ideas: tuple[str, ...]
    sentiment: Sentiment
    rewritten_text: str


@dataclass(frozen=True)
class AnalysisRecord:
    """Stored unit of state: identifier, timestamp, and payload."""

    analysis_id: str
    timestamp: str
    analysis: AnalysisPayload


@dataclass(frozen=True)
class AnalysisSummary:
    """List-view projection of a stored record."""

    analysis_id: str
    timestamp: str
