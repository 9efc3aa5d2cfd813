"""Process-environment readers shared by adapters, API, and CLIs."""

from __future__ import annotations

import os

ENV_PREFIX = "METIN_ANALIZ_"


def env_str(name: str, default: str = "") -> str:
    """Stripped value of a variable; blank values fall back to the default."""
    return os.environ.get(name, "").strip() or default


def int_env(name: str, default: int, *, minimum: int, maximum: int) -> int:
    """Integer variable clamped to bounds; unparsable values use the default."""
    raw = env_str(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))


def csv_env(name: str) -> list[str]:
    return [item.strip() for item in env_str(name).split(",") if item.strip()]


def service_env(suffix: str, default: str = "") -> str:
    """Read a `METIN_ANALIZ_*` variable by its suffix."""
    return env_str(f"{ENV_PREFIX}{suffix}", default)
