"""Client for the timeanddate.com astronomy API (api.xmltime.com)."""

from __future__ import annotations

import base64
import hmac
from datetime import date, datetime, timezone
from hashlib import sha1
from typing import Any, Callable, Dict

import httpx

from wxkit.core.config import TimeAndDateSettings
from wxkit.core.exceptions import PayloadError, UpstreamError
from wxkit.utils.http import RetryConfig, request_with_retry

SERVICE_NAME = "timeanddate astronomy"


def sign_request(access_key: str, secret_key: str, service: str, timestamp: str) -> str:
    """Return the base64 HMAC-SHA1 signature the API expects."""
    message = f"{access_key}{service}{timestamp}".encode("utf-8")
    digest = hmac.new(secret_key.encode("utf-8"), message, sha1).digest()
    return base64.b64encode(digest).decode("ascii")


class TimeAndDateClient:
    """Fetch sun and moon data for a place and date."""

    SERVICE = "astronomy"

    def __init__(
        self,
        settings: TimeAndDateSettings,
        http_client: httpx.Client,
        *,
        retry_config: RetryConfig | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._retry = retry_config or RetryConfig()
        self._clock = clock

    def get_astronomy(self, place_id: str, day: date) -> Dict[str, Any]:
        timestamp = self._clock().astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
        params = {
            "version": 3,
            "placeid": place_id,
            "startdt": day.isoformat(),
            "out": "js",
            "lang": "eng",
            "object": "sun,moon",
            "types": "current,setrise,daylength",
            "accesskey": self._settings.access_key,
            "timestamp": timestamp,
            "signature": sign_request(
                self._settings.access_key,
                self._settings.secret_key,
                self.SERVICE,
                timestamp,
            ),
        }
        url = f"{str(self._settings.base_url).rstrip('/')}/{self.SERVICE}"

        try:
            response = request_with_retry(
                self._http.get, url, params=params, retry_config=self._retry
            )
        except httpx.TransportError as exc:
            raise UpstreamError(SERVICE_NAME, None, str(exc)) from exc

        if not response.is_success:
            raise UpstreamError(SERVICE_NAME, response.status_code, response.reason_phrase)

        try:
            payload = response.json()
        except ValueError as exc:
            raise PayloadError("Astronomy API returned a non-JSON body.") from exc
        if isinstance(payload, dict) and payload.get("errors"):
            raise UpstreamError(SERVICE_NAME, response.status_code, "; ".join(map(str, payload["errors"])))
        return payload


__all__ = ["TimeAndDateClient", "sign_request"]
