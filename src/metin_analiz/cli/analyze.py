"""CLI for submitting text to a running metin_analiz API."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from metin_analiz.adapters.runtime_env import service_env
from metin_analiz.api.python_interface import (
    DEFAULT_API_URL,
    AnalysisApiClient,
    AnalysisApiError,
)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze Turkish text via the metin_analiz API.")
    parser.add_argument(
        "--api-url",
        default=service_env("API_URL", DEFAULT_API_URL),
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--text", default=None, help="Text to analyze.")
    source.add_argument("--file", type=Path, default=None, help="UTF-8 file to analyze.")
    parser.add_argument("--update-id", default=None, help="Re-analyze into an existing id.")
    return parser


def _read_text(parsed: argparse.Namespace) -> str:
    if parsed.text is not None:
        return str(parsed.text)
    if parsed.file is not None:
        return Path(parsed.file).read_text(encoding="utf-8")
    return sys.stdin.read()


def main(argv: list[str] | None = None) -> int:
    """Submit text and print the stored record as JSON."""
    parsed = build_arg_parser().parse_args(argv)
    client = AnalysisApiClient(api_base_url=str(parsed.api_url))
    text = _read_text(parsed)
    try:
        if parsed.update_id:
            record = client.update_analysis(str(parsed.update_id), text)
        else:
            record = client.create_analysis(text)
    except AnalysisApiError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(json.dumps(record.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
