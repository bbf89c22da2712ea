"""Download the latest Netatmo weather station reading and emit an HTML snippet.

The first run prints an authorization URL and waits for the operator to
paste the code (or the full redirect URL). Later runs refresh the stored
token silently and only prompt again when the refresh token is rejected.

Example usages::

    # Interactive first run, writing the snippet to a file.
    python -m scripts.netatmo_report --config ~/.config/wxkit/config.yaml \
        --output /var/www/wx.html -v

    # Non-interactive authorization with a code obtained elsewhere.
    python -m scripts.netatmo_report --auth-code 5f1e...
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict

import httpx

from scripts._common import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_CREDENTIAL_ERROR,
    EXIT_OK,
    EXIT_RUNTIME_ERROR,
    EXIT_UPSTREAM_ERROR,
    add_common_arguments,
    fail,
    prepare,
)
from wxkit.clients import NetatmoWeatherClient
from wxkit.core.exceptions import (
    AccessTokenRejectedError,
    ConfigurationError,
    CredentialError,
    PayloadError,
    UpstreamError,
)
from wxkit.dependencies import (
    get_credential_lifecycle,
    get_credential_store,
    get_http_client,
    get_weather_client,
)
from wxkit.services import CredentialLifecycle, extract_reading, fixed_code_prompt, render_html
from wxkit.services.authorization import Prompt

PROG = "wx-netatmo"

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Fetch the latest Netatmo station reading and write an HTML snippet.",
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--auth-file",
        type=Path,
        default=None,
        help="Credential file location (default: from configuration).",
    )
    parser.add_argument(
        "--device-id",
        default=None,
        help="Station MAC address (default: netatmo.device_id from configuration).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the HTML snippet to this file instead of stdout.",
    )
    parser.add_argument(
        "--auth-code",
        default=None,
        help="Authorization code to use instead of prompting, if authorization is needed.",
    )
    parser.add_argument(
        "--reauthorize-on-corrupt",
        action="store_true",
        help="Discard an unreadable credential file and authorize again.",
    )
    return parser


def fetch_station_data(
    lifecycle: CredentialLifecycle,
    weather: NetatmoWeatherClient,
    device_id: str | None,
) -> Dict[str, Any]:
    """Fetch station data, reauthorizing once if the API rejects the token."""
    token = lifecycle.get_access_token()
    logger.info("Getting station data")
    try:
        return weather.get_station_data(token, device_id)
    except AccessTokenRejectedError as exc:
        logger.warning("Station API rejected the access token (%s); reauthorizing", exc.status_code)
    token = lifecycle.reauthorize()
    return weather.get_station_data(token, device_id)


def main(
    argv: list[str] | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
    prompt: Prompt | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = prepare(args)
        settings.require("netatmo")
    except ConfigurationError as exc:
        return fail(PROG, exc, EXIT_CONFIGURATION_ERROR)

    logger.info("Running %s", PROG)
    if args.reauthorize_on_corrupt:
        settings.credentials = settings.credentials.model_copy(
            update={"reauthorize_on_corrupt": True}
        )
    if args.auth_code:
        prompt = fixed_code_prompt(args.auth_code)

    try:
        with get_http_client(settings, transport) as http_client:
            lifecycle = get_credential_lifecycle(
                settings,
                http_client,
                store=get_credential_store(settings, args.auth_file),
                prompt=prompt,
            )
            content = fetch_station_data(
                lifecycle, get_weather_client(settings, http_client), args.device_id
            )
        reading = extract_reading(content)
    except CredentialError as exc:
        return fail(PROG, exc, EXIT_CREDENTIAL_ERROR)
    except (UpstreamError, PayloadError) as exc:
        return fail(PROG, exc, EXIT_UPSTREAM_ERROR)
    except httpx.HTTPError as exc:
        return fail(PROG, f"Station data request failed: {exc}", EXIT_UPSTREAM_ERROR)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected failure")
        return fail(PROG, f"Unexpected error: {exc}", EXIT_RUNTIME_ERROR)

    snippet = render_html(reading)
    if args.output:
        logger.info("Writing HTML output to %s", args.output)
        try:
            args.output.write_text(snippet, encoding="utf-8")
        except OSError as exc:
            return fail(PROG, f"Could not write {args.output}: {exc}", EXIT_RUNTIME_ERROR)
    else:
        sys.stdout.write(snippet)

    logger.info("Done %s", PROG)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
