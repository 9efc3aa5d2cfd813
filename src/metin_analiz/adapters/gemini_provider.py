"""Gemini generateContent adapter with structured JSON output."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from metin_analiz.adapters.runtime_env import env_str, int_env, service_env
from metin_analiz.domain.errors import ConfigurationError, ProviderError

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT_SECONDS = 60
API_KEY_MISSING_MESSAGE = "Internal Server Error: API key not configured."

logger = logging.getLogger(__name__)


def _reply_text(data: dict[str, Any]) -> str:
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        feedback = data.get("promptFeedback")
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        raise ProviderError(f"Provider returned no candidates (block_reason={reason}).")
    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise ProviderError(
            f"Provider returned no content (finish_reason={first.get('finishReason')})."
        )
    text = "".join(
        str(part.get("text", "")) for part in parts if isinstance(part, dict)
    )
    if not text.strip():
        raise ProviderError("Provider returned an empty reply.")
    return text


class GeminiAnalysisProvider:
    """Calls the hosted model with a prompt and a response schema."""

    name = "gemini"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model or service_env("GEMINI_MODEL", DEFAULT_MODEL)
        self._base_url = (base_url or service_env("GEMINI_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self._timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else float(
                int_env(
                    "METIN_ANALIZ_PROVIDER_TIMEOUT_SECONDS",
                    DEFAULT_TIMEOUT_SECONDS,
                    minimum=1,
                    maximum=600,
                )
            )
        )
        self._transport = transport

    @property
    def model(self) -> str:
        return self._model

    def _resolve_api_key(self) -> str:
        api_key = self._api_key if self._api_key is not None else env_str("GEMINI_API_KEY")
        if not api_key:
            logger.error("provider.config_missing provider=%s key=GEMINI_API_KEY", self.name)
            raise ConfigurationError(API_KEY_MISSING_MESSAGE)
        return api_key

    async def generate(self, *, prompt: str, response_schema: dict[str, Any]) -> str:
        api_key = self._resolve_api_key()
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            },
        }
        url = f"{self._base_url}/models/{self._model}:generateContent"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    json=body,
                    headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
                )
        except httpx.TimeoutException as exc:
            logger.warning("provider.timeout provider=%s model=%s", self.name, self._model)
            raise ProviderError(
                f"Provider call timed out after {self._timeout_seconds:g} seconds."
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("provider.transport_error provider=%s error=%s", self.name, exc)
            raise ProviderError(f"Provider is unreachable: {type(exc).__name__}.") from exc

        if response.status_code >= 400:
            logger.warning(
                "provider.http_error provider=%s status=%s body=%s",
                self.name,
                response.status_code,
                response.text[:500],
            )
            raise ProviderError(f"Provider responded with HTTP {response.status_code}.")
        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError("Provider response envelope is not JSON.") from exc
        if not isinstance(data, dict):
            raise ProviderError("Provider response envelope is not a JSON object.")
        return _reply_text(data)
