"""
Logging utilities for the command-line utilities.

Log records go to stderr so stdout carries only the emitted payload
(HTML, JSON or discussion text).
"""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def level_for_verbosity(verbosity: int, default: str = "WARNING") -> str:
    """Translate repeated ``-v`` flags into a logging level name."""
    if verbosity >= 2:
        return "DEBUG"
    if verbosity == 1:
        return "INFO"
    return default.upper()


def configure_logging(level: str = "WARNING", stream: Optional[TextIO] = None) -> None:
    """Configure root logging with a consistent format."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        stream=stream or sys.stderr,
        force=True,
    )
    # httpx logs every request at INFO, including query strings.
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["LOG_FORMAT", "configure_logging", "level_for_verbosity"]
