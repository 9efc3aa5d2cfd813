"""Process-lifetime, in-memory analysis record store."""

from __future__ import annotations

import dataclasses
import threading

from metin_analiz.domain.models import AnalysisPayload, AnalysisRecord, AnalysisSummary


class InMemoryAnalysisStore:
    """Insertion-ordered mapping from analysis id to record.

    Every lookup and mutation holds one lock, so concurrent request
    threads never observe a half-applied replace.
    """

    def __init__(self) -> None:
        self._records: dict[str, AnalysisRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def contains(self, analysis_id: str) -> bool:
        with self._lock:
            return analysis_id in self._records

    def insert(self, record: AnalysisRecord) -> None:
        with self._lock:
            if record.analysis_id in self._records:
                raise KeyError(f"Analysis id already exists: {record.analysis_id}")
            self._records[record.analysis_id] = record

    def get(self, analysis_id: str) -> AnalysisRecord | None:
        with self._lock:
            return self._records.get(analysis_id)

    def list_summaries(self) -> list[AnalysisSummary]:
        with self._lock:
            return [
                AnalysisSummary(analysis_id=record.analysis_id, timestamp=record.timestamp)
                for record in self._records.values()
            ]

    def replace(
        self, *, analysis_id: str, analysis: AnalysisPayload, timestamp: str
    ) -> AnalysisRecord | None:
        with self._lock:
            current = self._records.get(analysis_id)
            if current is None:
                return None
            updated = dataclasses.replace(current, analysis=analysis, timestamp=timestamp)
            self._records[analysis_id] = updated
            return updated

    def delete(self, analysis_id: str) -> bool:
        with self._lock:
            return self._records.pop(analysis_id, None) is not None
