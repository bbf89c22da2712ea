"""Argument handling and exit codes shared by the command-line scripts."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from wxkit.core.config import AppSettings, default_config_path, load_settings
from wxkit.core.logging import configure_logging, level_for_verbosity

EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 2
EXIT_CREDENTIAL_ERROR = 3
EXIT_UPSTREAM_ERROR = 4
EXIT_RUNTIME_ERROR = 5


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help=f"Path to the YAML configuration file (default: {default_config_path()}).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr; repeat for debug output.",
    )


def prepare(args: argparse.Namespace) -> AppSettings:
    """Load settings and configure logging for one run.

    Raises ``ConfigurationError`` when the configuration cannot be loaded.
    """
    config_path: Optional[Path] = args.config
    settings = load_settings(config_path)
    configure_logging(level_for_verbosity(args.verbose, settings.log_level))
    return settings


def fail(prog: str, message: object, exit_code: int) -> int:
    """Report a fatal error on stderr and return the exit code."""
    logging.getLogger(prog).debug("Exiting with status %d", exit_code)
    print(f"{prog}: {message}", file=sys.stderr)
    return exit_code


__all__ = [
    "EXIT_CONFIGURATION_ERROR",
    "EXIT_CREDENTIAL_ERROR",
    "EXIT_OK",
    "EXIT_RUNTIME_ERROR",
    "EXIT_UPSTREAM_ERROR",
    "add_common_arguments",
    "fail",
    "prepare",
]
