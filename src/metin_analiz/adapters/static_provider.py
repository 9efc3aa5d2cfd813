"""Deterministic offline provider for demos and local runs."""

from __future__ import annotations

import json
from typing import Any

_STATIC_REPLY: dict[str, object] = {
    "summary": (
        "Metin tek bir ana düşünce etrafında şekilleniyor. "
        "Yazar konuyu sade bir dille aktarıyor."
    ),
    "keyIdeas": [
        "Metnin ana konusu açıkça belirtiliyor.",
        "Yazar düşüncelerini kısa cümlelerle aktarıyor.",
        "Metin okuyucuya tarafsız bir bakış sunuyor.",
    ],
    "sentiment": "Neutral",
    "rewrittenText": (
        "Bu metin, ana düşüncesini sade ve akıcı bir Türkçe ile ifade etmektedir."
    ),
}


class StaticAnalysisProvider:
    name = "static.v1"

    async def generate(self, *, prompt: str, response_schema: dict[str, Any]) -> str:
        del prompt, response_schema
        return json.dumps(_STATIC_REPLY, ensure_ascii=False)
