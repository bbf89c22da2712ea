"""Netatmo weather station API client."""

from __future__ import annotations

from typing import Any, Dict

import httpx

from wxkit.core.config import NetatmoSettings
from wxkit.core.exceptions import AccessTokenRejectedError, PayloadError, UpstreamError

SERVICE_NAME = "Netatmo station data"


class NetatmoWeatherClient:
    """Fetch station readings for a single device."""

    STATIONS_DATA_PATH = "/api/getstationsdata"

    def __init__(self, settings: NetatmoSettings, http_client: httpx.Client) -> None:
        self._settings = settings
        self._http = http_client

    def get_station_data(self, access_token: str, device_id: str | None = None) -> Dict[str, Any]:
        """Return the decoded ``getstationsdata`` document."""
        response = self._http.get(
            f"{self._settings.base_url}{self.STATIONS_DATA_PATH}",
            params={"device_id": device_id or self._settings.device_id},
            headers={"Authorization": f"Bearer {access_token}"},
        )

        if response.status_code in (401, 403):
            raise AccessTokenRejectedError(
                SERVICE_NAME, response.status_code, response.reason_phrase
            )
        if not response.is_success:
            raise UpstreamError(SERVICE_NAME, response.status_code, response.reason_phrase)

        try:
            content = response.json()
        except ValueError as exc:
            raise PayloadError("Netatmo returned a non-JSON station document.") from exc
        if not isinstance(content, dict):
            raise PayloadError("Netatmo returned an unexpected station document.")
        return content


__all__ = ["NetatmoWeatherClient"]
