from __future__ import annotations

import time
from typing import Any, Dict

import pytest

from wxkit.core.exceptions import PayloadError
from wxkit.schemas import StationReading
from wxkit.services import extract_reading, render_html
from wxkit.services.station_report import celsius_to_fahrenheit, millibars_to_inches


def _station_document(**base_overrides: Any) -> Dict[str, Any]:
    base = {"time_utc": 1697544000, "Pressure": 1013.2, "pressure_trend": "stable"}
    base.update(base_overrides)
    return {
        "status": "ok",
        "body": {
            "devices": [
                {
                    "_id": "70:ee:50:1f:3c:48",
                    "dashboard_data": base,
                    "modules": [{"dashboard_data": {"Temperature": 12.3, "Humidity": 81}}],
                }
            ]
        },
    }


def test_extract_reading_converts_units() -> None:
    reading = extract_reading(_station_document(), localtime=time.gmtime)

    assert reading.timestamp.startswith("Tue 17 Oct 2023 12:00:00")
    assert reading.temp_c == 12.3
    assert reading.temp_f == 54.1
    assert reading.pressure_mb == 1013.2
    assert reading.pressure_in == 29.9
    assert reading.pressure_trend == "stable"


def test_extract_reading_tolerates_missing_pressure() -> None:
    document = _station_document()
    del document["body"]["devices"][0]["dashboard_data"]["Pressure"]

    reading = extract_reading(document, localtime=time.gmtime)

    assert reading.pressure_mb is None
    assert reading.pressure_in is None


@pytest.mark.parametrize(
    "document",
    [
        {},
        {"body": {"devices": []}},
        {"body": {"devices": [{"dashboard_data": {"time_utc": 1}, "modules": []}]}},
        {"body": {"devices": [{"modules": [{"dashboard_data": {"Temperature": 1.0}}]}]}},
    ],
)
def test_extract_reading_reports_missing_fields(document: Dict[str, Any]) -> None:
    with pytest.raises(PayloadError):
        extract_reading(document)


@pytest.mark.parametrize(
    ("celsius", "fahrenheit"),
    [(0, 32.0), (-40, -40.0), (100, 212.0), (21.7, 71.1)],
)
def test_celsius_to_fahrenheit(celsius: float, fahrenheit: float) -> None:
    assert celsius_to_fahrenheit(celsius) == fahrenheit


def test_millibars_to_inches() -> None:
    assert millibars_to_inches(1013.2) == 29.9
    assert millibars_to_inches(980) == 28.9


def test_render_html_matches_published_format() -> None:
    reading = StationReading(
        timestamp="Tue 17 Oct 2023 08:00:00 EDT(-0400)",
        temp_c=12.3,
        temp_f=54.1,
    )

    assert render_html(reading) == (
        "<!-- Tue 17 Oct 2023 08:00:00 EDT(-0400) -->\n"
        "Currently 54.1&deg;F / 12.3&deg;C\n"
    )


def test_render_html_keeps_one_decimal_for_whole_fahrenheit() -> None:
    reading = StationReading(timestamp="now", temp_c=0, temp_f=32.0)

    assert "Currently 32.0&deg;F / 0&deg;C" in render_html(reading)


@pytest.mark.parametrize(
    ("field", "value"),
    [("Temperature", None), ("Temperature", "12.3"), ("time_utc", None), ("Pressure", "n/a")],
)
def test_extract_reading_rejects_non_numeric_values(field: str, value: Any) -> None:
    document = _station_document()
    device = document["body"]["devices"][0]
    if field == "Temperature":
        device["modules"][0]["dashboard_data"][field] = value
    else:
        device["dashboard_data"][field] = value

    with pytest.raises(PayloadError, match=field):
        extract_reading(document, localtime=time.gmtime)
