"""Download sun and moon data from timeanddate.com and print it as JSON.

Example usage::

    python -m scripts.astro_report --date 2026-10-17 --place usa/philadelphia \
        --config ~/.config/wxkit/config.yaml > ~/.cache/astro.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

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
from wxkit.dependencies import get_http_client, get_timeanddate_client
from wxkit.services import summarize_astronomy

PROG = "wx-astro"

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Fetch sun and moon stats for a date and place.",
    )
    add_common_arguments(parser)
    parser.add_argument("-d", "--date", required=True, type=_parse_date, help="YYYY-MM-DD")
    parser.add_argument(
        "-p",
        "--place",
        required=True,
        help="timeanddate.com place id, for example usa/philadelphia.",
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
        settings.require("timeanddate")
    except ConfigurationError as exc:
        return fail(PROG, exc, EXIT_CONFIGURATION_ERROR)

    logger.info("Fetching astronomy data for %s on %s", args.place, args.date)
    try:
        with get_http_client(settings, transport) as http_client:
            payload = get_timeanddate_client(settings, http_client).get_astronomy(
                args.place, args.date
            )
        summary = summarize_astronomy(payload)
    except (UpstreamError, PayloadError) as exc:
        return fail(PROG, exc, EXIT_UPSTREAM_ERROR)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected failure")
        return fail(PROG, f"Unexpected error: {exc}", EXIT_RUNTIME_ERROR)

    print(json.dumps(summary.model_dump()))
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
