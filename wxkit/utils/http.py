"""HTTP utilities: client construction and retry/backoff for idempotent reads."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import httpx

from wxkit import __version__
from wxkit.core.config import HttpSettings

logger = logging.getLogger(__name__)

USER_AGENT = f"wxkit/{__version__}"


class RetryConfig:
    def __init__(self, *, attempts: int = 3, backoff_seconds: float = 1.0) -> None:
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds

    @classmethod
    def from_settings(cls, settings: HttpSettings) -> "RetryConfig":
        return cls(
            attempts=settings.retry_attempts,
            backoff_seconds=settings.retry_backoff_seconds,
        )


def build_http_client(
    settings: HttpSettings,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Return a synchronous client with the configured timeout."""
    return httpx.Client(
        timeout=settings.timeout_seconds,
        headers={"User-Agent": USER_AGENT},
        transport=transport,
    )


def request_with_retry(
    func: Callable[..., httpx.Response],
    *args,
    retry_config: RetryConfig | None = None,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs,
) -> httpx.Response:
    """Call ``func`` until it returns a non-5xx response or attempts run out.

    Transport errors and server errors are retried with linear backoff.
    Client errors (4xx) are returned immediately for the caller to inspect.
    """
    config = retry_config or RetryConfig()
    attempt = 0
    last_exception: Exception | None = None
    response: httpx.Response | None = None

    while attempt < config.attempts:
        try:
            response = func(*args, **kwargs)
        except httpx.TransportError as exc:
            last_exception = exc
            response = None
        else:
            if response.status_code < 500:
                return response
            last_exception = None

        attempt += 1
        if attempt >= config.attempts:
            break
        delay = config.backoff_seconds * attempt
        logger.info("Retrying request in %.1fs (attempt %d/%d)", delay, attempt + 1, config.attempts)
        sleep(delay)

    if response is not None:
        return response
    if last_exception is not None:
        raise last_exception
    raise RuntimeError("Request failed without raising an exception")


__all__ = ["RetryConfig", "USER_AGENT", "build_http_client", "request_with_retry"]
