"""Logging setup for the API process.

Service loggers (`metin_analiz.*`) follow `METIN_ANALIZ_LOG_LEVEL`; the
provider adapter and the outbound HTTP client get their own levels so the
Gemini traffic can be traced without turning the whole process to DEBUG.
A log path of `-` keeps output on the console only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

from metin_analiz.adapters.runtime_env import int_env, service_env

SERVICE_LOGGER = "metin_analiz"
PROVIDER_LOGGER = "metin_analiz.adapters.gemini_provider"
CONSOLE_ONLY = "-"

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_CONFIGURED: LoggingSettings | None = None


@dataclass(frozen=True)
class LoggingSettings:
    """Resolved logging knobs for one process."""

    level: int
    provider_level: int
    http_client_level: int
    access_level: int
    log_path: Path | None
    max_bytes: int
    backup_count: int


def _level(suffix: str, default: str) -> int:
    name = service_env(suffix, default).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.getLevelName(default)


def load_logging_settings() -> LoggingSettings:
    raw_path = service_env("LOG_PATH", "work/logs/metin_analiz.log")
    level = _level("LOG_LEVEL", "INFO")
    return LoggingSettings(
        level=level,
        provider_level=_level("PROVIDER_LOG_LEVEL", logging.getLevelName(level)),
        http_client_level=_level("HTTP_CLIENT_LOG_LEVEL", "WARNING"),
        access_level=_level("ACCESS_LOG_LEVEL", "WARNING"),
        log_path=None if raw_path == CONSOLE_ONLY else Path(raw_path),
        max_bytes=int_env(
            "METIN_ANALIZ_LOG_MAX_BYTES",
            2 * 1024 * 1024,
            minimum=64 * 1024,
            maximum=100 * 1024 * 1024,
        ),
        backup_count=int_env("METIN_ANALIZ_LOG_BACKUP_COUNT", 5, minimum=1, maximum=50),
    )


def _handlers(settings: LoggingSettings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_path is not None:
        settings.log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=settings.log_path,
                maxBytes=settings.max_bytes,
                backupCount=settings.backup_count,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_runtime_logging(settings: LoggingSettings | None = None) -> LoggingSettings:
    """Attach handlers to the service logger once and set per-logger levels."""
    global _CONFIGURED
    if _CONFIGURED is not None:
        return _CONFIGURED
    resolved = settings if settings is not None else load_logging_settings()

    service = logging.getLogger(SERVICE_LOGGER)
    for handler in list(service.handlers):
        service.removeHandler(handler)
        handler.close()
    for handler in _handlers(resolved):
        service.addHandler(handler)
    service.setLevel(resolved.level)
    service.propagate = False

    logging.getLogger(PROVIDER_LOGGER).setLevel(resolved.provider_level)
    logging.getLogger("httpx").setLevel(resolved.http_client_level)
    logging.getLogger("uvicorn.access").setLevel(resolved.access_level)

    service.info(
        "logging.configured level=%s file=%s",
        logging.getLevelName(resolved.level),
        resolved.log_path if resolved.log_path is not None else CONSOLE_ONLY,
    )
    _CONFIGURED = resolved
    return resolved
