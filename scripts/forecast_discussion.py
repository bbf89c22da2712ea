"""Fetch the latest NWS Area Forecast Discussion and read it aloud.

Each of the three sections (overview, short term, long term) is synthesized
with Google Text-to-Speech and written to ``afd-1.opus`` .. ``afd-3.opus``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import httpx

from scripts._common import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_OK,
    EXIT_RUNTIME_ERROR,
    EXIT_UPSTREAM_ERROR,
    add_common_arguments,
    fail,
    prepare,
)
from wxkit.core.exceptions import ConfigurationError, PayloadError, UpstreamError
from wxkit.dependencies import get_forecast_discussion_service, get_http_client

PROG = "wx-discussion"

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Get the latest area forecast discussion and synthesize speech.",
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--office",
        default=None,
        help="Three letter NWS forecast office (default: forecast.office, PHI).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory receiving the audio files (default: current directory).",
    )
    parser.add_argument(
        "--no-speech",
        action="store_true",
        help="Print the sections instead of synthesizing audio.",
    )
    return parser


def main(
    argv: list[str] | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = prepare(args)
        if not args.no_speech:
            settings.require("speech")
    except ConfigurationError as exc:
        return fail(PROG, exc, EXIT_CONFIGURATION_ERROR)

    office = (args.office or settings.forecast.office).upper()
    logger.info("Running %s for %s", PROG, office)
    try:
        with get_http_client(settings, transport) as http_client:
            service = get_forecast_discussion_service(
                settings, http_client, with_speech=not args.no_speech
            )
            sections = service.fetch_sections(office)
        if args.no_speech:
            for section in sections:
                print(f"== {section.name}")
                print(section.text.strip())
                print()
            return EXIT_OK
        written = service.synthesize(sections, args.output_dir)
    except (UpstreamError, PayloadError) as exc:
        return fail(PROG, exc, EXIT_UPSTREAM_ERROR)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected failure")
        return fail(PROG, f"Unexpected error: {exc}", EXIT_RUNTIME_ERROR)

    for path in written:
        logger.info("Wrote %s", path)
    logger.info("Done %s", PROG)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
