"""Prompt, response schema, and reply validation for provider-backed analysis."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Final

from metin_analiz.domain.errors import ClientInputError, SchemaViolationError
from metin_analiz.domain.models import SENTIMENT_LABELS, AnalysisPayload, Sentiment
from metin_analiz.domain.ports import AnalysisProvider

MIN_KEY_IDEAS: Final[int] = 3
MAX_KEY_IDEAS: Final[int] = 5
EMPTY_TEXT_MESSAGE: Final[str] = '"text" field is required and cannot be empty.'

_PROMPT_TEMPLATE: Final[str] = (
    "Lütfen aşağıdaki Türkçe metni analiz et. Metni özetle, temel fikirleri maddeler "
    "halinde belirt, genel duygu tonunu değerlendir ve metni daha akıcı bir Türkçeyle "
    "yeniden yaz. Duygu tonu için yalnızca {labels} etiketlerinden birini kullan."
    '\n\nMETİN:\n"""\n{text}\n"""'
)

_SENTIMENT_ALIASES: Final[dict[str, Sentiment]] = {
    "positive": "Positive",
    "negative": "Negative",
    "neutral": "Neutral",
    "olumlu": "Positive",
    "olumsuz": "Negative",
    "nötr": "Neutral",
    "notr": "Neutral",
}
_JSON_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

logger = logging.getLogger(__name__)


def analysis_response_schema() -> dict[str, Any]:
    """Structured-output schema requiring exactly the four analysis fields."""
    return {
        "type": "OBJECT",
        "properties": {
            "summary": {
                "type": "STRING",
                "description": "Metnin 2-3 cümlelik kısa ve anlamlı bir özeti.",
            },
            "keyIdeas": {
                "type": "ARRAY",
                "description": "Metindeki en önemli 3-5 ana fikri listeleyen maddeler.",
                "items": {"type": "STRING"},
            },
            "sentiment": {
                "type": "STRING",
                "description": "Metnin genel duygu tonu.",
                "enum": list(SENTIMENT_LABELS),
            },
            "rewrittenText": {
                "type": "STRING",
                "description": (
                    "Metnin dilbilgisi ve anlam bütünlüğü korunarak daha akıcı ve akademik "
                    "bir Türkçe ile yeniden yazılmış hali."
                ),
            },
        },
        "required": ["summary", "keyIdeas", "sentiment", "rewrittenText"],
        "propertyOrdering": ["summary", "keyIdeas", "sentiment", "rewrittenText"],
    }


def build_analysis_prompt(text: str) -> str:
    return _PROMPT_TEMPLATE.format(labels=", ".join(SENTIMENT_LABELS), text=text)


def require_text(text: object) -> str:
    """Return text unchanged when it has non-whitespace content, else reject."""
    if not isinstance(text, str) or not text.strip():
        raise ClientInputError(EMPTY_TEXT_MESSAGE)
    return text


def normalize_sentiment(value: object) -> Sentiment:
    if not isinstance(value, str):
        raise SchemaViolationError("Field 'sentiment' must be a string.")
    label = _SENTIMENT_ALIASES.get(value.strip().lower())
    if label is None:
        raise SchemaViolationError(
            f"Field 'sentiment' must be one of {', '.join(SENTIMENT_LABELS)}; got {value!r}."
        )
    return label


def _require_string(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise SchemaViolationError(f"Field '{key}' must be a non-empty string.")
    return value.strip()


def _require_key_ideas(payload: dict[str, Any]) -> tuple[str, ...]:
    value = payload.get("keyIdeas")
    if not isinstance(value, list):
        raise SchemaViolationError("Field 'keyIdeas' must be a list of strings.")
    ideas: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise SchemaViolationError("Field 'keyIdeas' must contain only non-empty strings.")
        ideas.append(item.strip())
    if not MIN_KEY_IDEAS <= len(ideas) <= MAX_KEY_IDEAS:
        raise SchemaViolationError(
            f"Field 'keyIdeas' must hold {MIN_KEY_IDEAS}-{MAX_KEY_IDEAS} items; got {len(ideas)}."
        )
    return tuple(ideas)


def parse_analysis_reply(raw_text: str) -> AnalysisPayload:
    """Parse provider reply text into a validated payload."""
    candidate = raw_text.strip()
    fenced = _JSON_FENCE.match(candidate)
    if fenced:
        candidate = fenced.group(1)
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise SchemaViolationError(f"Provider reply is not valid JSON: {exc.msg}.") from exc
    if not isinstance(payload, dict):
        raise SchemaViolationError("Provider reply must be a JSON object.")
    missing = [
        key for key in ("summary", "keyIdeas", "sentiment", "rewrittenText") if key not in payload
    ]
    if missing:
        raise SchemaViolationError(f"Provider reply is missing fields: {', '.join(missing)}.")
    return AnalysisPayload(
        summary=_require_string(payload, "summary"),
        key_ideas=_require_key_ideas(payload),
        sentiment=normalize_sentiment(payload.get("sentiment")),
        rewritten_text=_require_string(payload, "rewrittenText"),
    )


class AnalysisRequester:
    """Builds the outbound request, invokes the provider, and validates the reply."""

    def __init__(self, provider: AnalysisProvider) -> None:
        self._provider = provider

    @property
    def provider_name(self) -> str:
        return self._provider.name

    async def request(self, text: str) -> AnalysisPayload:
        """Analyze non-empty text; rejects blank input before any provider call."""
        require_text(text)
        raw = await self._provider.generate(
            prompt=build_analysis_prompt(text),
            response_schema=analysis_response_schema(),
        )
        try:
            return parse_analysis_reply(raw)
        except SchemaViolationError as exc:
            logger.warning(
                "analysis.schema_violation provider=%s reason=%s", self._provider.name, exc
            )
            raise
