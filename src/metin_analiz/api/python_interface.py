"""Python-first client for the analysis API."""

from __future__ import annotations

from typing import Any

import httpx

from metin_analiz.api.contracts import (
    AnalysisCreateRequest,
    AnalysisListResponse,
    AnalysisRecordResponse,
    AnalysisUpdateRequest,
)

DEFAULT_API_URL = "http://127.0.0.1:5000"
ERROR_PREFIX = "Metin analizi sırasında bir hata oluştu"


class AnalysisApiError(RuntimeError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _raise_for_error(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        body = response.json()
    except ValueError:
        body = None
    server_message = body.get("message") if isinstance(body, dict) else None
    detail = server_message or f"API isteği durumu: {response.status_code}"
    raise AnalysisApiError(f"{ERROR_PREFIX}: {detail}", status_code=response.status_code)


class AnalysisApiClient:
    """Tiny typed API client for Python users.

    Transport failures and non-success answers both surface as
    `AnalysisApiError`, so callers handle one exception type.
    """

    def __init__(self, api_base_url: str = DEFAULT_API_URL, timeout: float = 90.0) -> None:
        self._api_base_url = api_base_url.rstrip("/")
        self._timeout = timeout

    @property
    def api_base_url(self) -> str:
        return self._api_base_url

    @property
    def _endpoint(self) -> str:
        return f"{self._api_base_url}/api/analyze"

    def _send(self, method: str, **kwargs: Any) -> httpx.Response:
        senders = {
            "GET": httpx.get,
            "POST": httpx.post,
            "PUT": httpx.put,
            "DELETE": httpx.delete,
        }
        try:
            response = senders[method](self._endpoint, timeout=self._timeout, **kwargs)
        except httpx.HTTPError as exc:
            raise AnalysisApiError(f"{ERROR_PREFIX}: {exc}") from exc
        _raise_for_error(response)
        return response

    def create_analysis(self, text: str) -> AnalysisRecordResponse:
        """Submit text for analysis and return the stored record."""
        request = AnalysisCreateRequest(text=text)
        response = self._send("POST", json=request.model_dump(mode="json"))
        return AnalysisRecordResponse.model_validate(response.json())

    def get_analysis(self, analysis_id: str) -> AnalysisRecordResponse:
        response = self._send("GET", params={"id": analysis_id})
        return AnalysisRecordResponse.model_validate(response.json())

    def list_analyses(self) -> AnalysisListResponse:
        response = self._send("GET")
        return AnalysisListResponse.model_validate(response.json())

    def update_analysis(self, analysis_id: str, text: str) -> AnalysisRecordResponse:
        """Re-analyze new text under an existing id."""
        request = AnalysisUpdateRequest(id=analysis_id, text=text)
        response = self._send("PUT", json=request.model_dump(mode="json"))
        return AnalysisRecordResponse.model_validate(response.json())

    def delete_analysis(self, analysis_id: str) -> None:
        self._send("DELETE", params={"id": analysis_id})
