"""FastAPI application exposing the `/api/analyze` resource."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Body, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from metin_analiz.adapters.memory_analysis_store import InMemoryAnalysisStore
from metin_analiz.adapters.provider_factory import create_analysis_provider
from metin_analiz.adapters.runtime_env import csv_env
from metin_analiz.api.contracts import (
    AnalysisCreateRequest,
    AnalysisDeleteRequest,
    AnalysisListResponse,
    AnalysisRecordResponse,
    AnalysisSummaryResponse,
    AnalysisUpdateRequest,
    ErrorResponse,
    HealthResponse,
)
from metin_analiz.core.analysis_requester import AnalysisRequester
from metin_analiz.core.analysis_service import AnalysisService
from metin_analiz.domain.errors import (
    AnalysisServiceError,
    ConfigurationError,
    ProviderError,
)
from metin_analiz.domain.ports import AnalysisRequesterPort, AnalysisStorePort

ANALYZE_PATH = "/api/analyze"

logger = logging.getLogger(__name__)

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Missing or empty required field"},
    404: {"model": ErrorResponse, "description": "Analysis id not found"},
    500: {"model": ErrorResponse, "description": "Configuration or provider failure"},
}


def _cors_origins() -> list[str]:
    configured = csv_env("METIN_ANALIZ_CORS_ORIGINS")
    if configured:
        return configured
    return [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ]


def _error_json(
    status_code: int,
    message: str,
    *,
    error: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(message=message, error=error).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _provider_failure(message: str, exc: ProviderError) -> JSONResponse:
    logger.warning("analysis.provider_failure type=%s error=%s", type(exc).__name__, exc.message)
    return _error_json(500, message, error=exc.message)


def create_app(
    *,
    store: AnalysisStorePort | None = None,
    requester: AnalysisRequesterPort | None = None,
) -> FastAPI:
    """Create the API application around an explicitly owned store."""
    effective_store = store if store is not None else InMemoryAnalysisStore()
    effective_requester = (
        requester if requester is not None else AnalysisRequester(create_analysis_provider())
    )
    service = AnalysisService(store=effective_store, requester=effective_requester)

    app = FastAPI(
        title="metin_analiz API",
        version="0.1.0",
        description=(
            "Turkish text analysis: summary, key ideas, sentiment, and a fluent rewrite, "
            "produced by a hosted language model and kept in process memory."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=[
            {"name": "system", "description": "Service health."},
            {"name": "analysis", "description": "Analysis record create/read/update/delete."},
        ],
    )
    app.state.analysis_store = effective_store
    app.state.analysis_service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "http.request method=%s path=%s status=%s duration_ms=%.1f",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000.0,
        )
        return response

    @app.exception_handler(AnalysisServiceError)
    async def handle_service_error(_: Request, exc: AnalysisServiceError) -> JSONResponse:
        if isinstance(exc, ConfigurationError):
            logger.error("analysis.configuration_error message=%s", exc.message)
        return _error_json(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in exc.errors()
        )
        return _error_json(400, "Invalid request body.", error=details or None)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_json(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "http.unhandled method=%s path=%s", request.method, request.url.path, exc_info=exc
        )
        return _error_json(500, "Internal Server Error.")

    @app.get("/api/health", response_model=HealthResponse, tags=["system"])
    def health() -> HealthResponse:
        return HealthResponse()

    @app.get(
        ANALYZE_PATH,
        response_model=AnalysisRecordResponse | AnalysisListResponse,
        tags=["analysis"],
        responses={404: _ERROR_RESPONSES[404]},
    )
    def read_analysis(
        analysis_id: str | None = Query(
            default=None, alias="id", description="Analysis id to fetch."
        ),
    ) -> AnalysisRecordResponse | AnalysisListResponse:
        lookup = (analysis_id or "").strip()
        if lookup:
            return AnalysisRecordResponse.from_domain(service.read(lookup))
        return AnalysisListResponse(
            analyses=[
                AnalysisSummaryResponse.from_domain(summary)
                for summary in service.list_summaries()
            ]
        )

    @app.post(
        ANALYZE_PATH,
        response_model=AnalysisRecordResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["analysis"],
        responses={400: _ERROR_RESPONSES[400], 500: _ERROR_RESPONSES[500]},
    )
    async def create_analysis(
        response: Response,
        payload: AnalysisCreateRequest | None = Body(default=None),
    ) -> AnalysisRecordResponse | JSONResponse:
        text = payload.text if payload is not None else None
        try:
            record = await service.create(text)
        except ProviderError as exc:
            return _provider_failure("Failed to analyze text.", exc)
        response.headers["Location"] = f"{ANALYZE_PATH}?id={record.analysis_id}"
        return AnalysisRecordResponse.from_domain(record)

    @app.put(
        ANALYZE_PATH,
        response_model=AnalysisRecordResponse,
        tags=["analysis"],
        responses=_ERROR_RESPONSES,
    )
    async def update_analysis(
        payload: AnalysisUpdateRequest | None = Body(default=None),
    ) -> AnalysisRecordResponse | JSONResponse:
        request_body = payload if payload is not None else AnalysisUpdateRequest()
        try:
            record = await service.update(request_body.id, request_body.text)
        except ProviderError as exc:
            return _provider_failure("Failed to update analysis.", exc)
        return AnalysisRecordResponse.from_domain(record)

    @app.delete(
        ANALYZE_PATH,
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        tags=["analysis"],
        responses={400: _ERROR_RESPONSES[400], 404: _ERROR_RESPONSES[404]},
    )
    def delete_analysis(
        analysis_id: str | None = Query(
            default=None, alias="id", description="Analysis id to delete."
        ),
        payload: AnalysisDeleteRequest | None = Body(default=None),
    ) -> Response:
        target = analysis_id or (payload.id if payload is not None else None)
        service.delete(target)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    logger.info(
        "api.start store=%s requester=%s",
        type(effective_store).__name__,
        type(effective_requester).__name__,
    )
    return app


app = create_app()
