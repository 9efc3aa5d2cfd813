"""Create/read/update/delete lifecycle for stored analysis records."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from metin_analiz.core.analysis_requester import require_text
from metin_analiz.domain.errors import ClientInputError, NotFoundError
from metin_analiz.domain.models import AnalysisRecord, AnalysisSummary
from metin_analiz.domain.ports import AnalysisRequesterPort, AnalysisStorePort

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _new_analysis_id() -> str:
    return str(uuid.uuid4())


def require_id(analysis_id: str | None, *, message: str) -> str:
    if analysis_id is None or not str(analysis_id).strip():
        raise ClientInputError(message)
    return str(analysis_id).strip()


class AnalysisService:
    """Resource operations over an injected store and requester.

    Inputs are validated before the store or the provider is touched, and
    records are only written after the requester succeeds.
    """

    def __init__(
        self,
        *,
        store: AnalysisStorePort,
        requester: AnalysisRequesterPort,
        clock: Callable[[], str] = _utc_now_iso,
        id_factory: Callable[[], str] = _new_analysis_id,
    ) -> None:
        self._store = store
        self._requester = requester
        self._clock = clock
        self._id_factory = id_factory

    async def create(self, text: str | None) -> AnalysisRecord:
        validated = require_text(text)
        analysis = await self._requester.request(validated)
        analysis_id = self._id_factory()
        while self._store.contains(analysis_id):
            analysis_id = self._id_factory()
        record = AnalysisRecord(analysis_id=analysis_id, timestamp=self._clock(), analysis=analysis)
        self._store.insert(record)
        logger.info("analysis.created id=%s", analysis_id)
        return record

    def read(self, analysis_id: str | None) -> AnalysisRecord:
        validated_id = require_id(analysis_id, message='"id" parameter is required.')
        record = self._store.get(validated_id)
        if record is None:
            raise NotFoundError(validated_id)
        return record

    def list_summaries(self) -> list[AnalysisSummary]:
        return self._store.list_summaries()

    async def update(self, analysis_id: str | None, text: str | None) -> AnalysisRecord:
        validated_id = require_id(analysis_id, message='"id" field is required.')
        validated = require_text(text)
        if not self._store.contains(validated_id):
            raise NotFoundError(validated_id)
        analysis = await self._requester.request(validated)
        updated = self._store.replace(
            analysis_id=validated_id, analysis=analysis, timestamp=self._clock()
        )
        if updated is None:
            # Deleted while the provider call was in flight.
            raise NotFoundError(validated_id)
        logger.info("analysis.updated id=%s", validated_id)
        return updated

    def delete(self, analysis_id: str | None) -> None:
        validated_id = require_id(
            analysis_id, message='"id" parameter or body field is required.'
        )
        if not self._store.delete(validated_id):
            raise NotFoundError(validated_id)
        logger.info("analysis.deleted id=%s", validated_id)
