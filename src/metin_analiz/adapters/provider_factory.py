"""Factory for selecting the analysis provider backend."""

from __future__ import annotations

from metin_analiz.adapters.gemini_provider import GeminiAnalysisProvider
from metin_analiz.adapters.runtime_env import service_env
from metin_analiz.adapters.static_provider import StaticAnalysisProvider
from metin_analiz.domain.ports import AnalysisProvider


def create_analysis_provider() -> AnalysisProvider:
    """Build the configured provider; credentials are checked per call, not here."""
    backend = service_env("PROVIDER", "gemini").lower()
    if backend in {"", "gemini"}:
        return GeminiAnalysisProvider()
    if backend == "static":
        return StaticAnalysisProvider()
    raise RuntimeError("Unsupported METIN_ANALIZ_PROVIDER value. Expected gemini or static.")
