"""CLI entrypoint for serving the metin_analiz HTTP API."""

from __future__ import annotations

import argparse
import os

import uvicorn

from metin_analiz.adapters.observability import configure_runtime_logging
from metin_analiz.adapters.runtime_env import int_env


def build_arg_parser() -> argparse.ArgumentParser:
    """Create CLI args for the API server process."""
    parser = argparse.ArgumentParser(description="Serve metin_analiz API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument(
        "--port", type=int, default=int_env("PORT", 5000, minimum=1, maximum=65535)
    )
    parser.add_argument("--reload", action="store_true")
    parser.add_argument(
        "--provider",
        default="",
        choices=["", "gemini", "static"],
        help="Analysis provider backend (default: METIN_ANALIZ_PROVIDER or gemini).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI flags and start uvicorn with the app import path."""
    configure_runtime_logging()
    parser = build_arg_parser()
    parsed = parser.parse_args(argv)
    provider = str(parsed.provider).strip()
    if provider:
        os.environ["METIN_ANALIZ_PROVIDER"] = provider
    uvicorn.run(
        "metin_analiz.api.app:app",
        host=str(parsed.host),
        port=int(parsed.port),
        reload=bool(parsed.reload),
    )


if __name__ == "__main__":
    main()
