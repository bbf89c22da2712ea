"""Turn a Netatmo station document into the HTML snippet we publish."""

from __future__ import annotations

import html
import time
from typing import Any, Callable, Dict, Optional

from wxkit.core.exceptions import PayloadError
from wxkit.schemas import StationReading

MB_TO_INHG = 0.02953
TIMESTAMP_FORMAT = "%a %d %b %Y %H:%M:%S %Z(%z)"

HTML_TEMPLATE = (
    "<!-- {timestamp} -->\n"
    "Currently {temp_f}&deg;F / {temp_c}&deg;C\n"
)


def celsius_to_fahrenheit(value: float) -> float:
    return round(value * 9 / 5 + 32, 1)


def millibars_to_inches(value: float) -> float:
    return round(value * MB_TO_INHG, 1)


def _dig(document: Dict[str, Any], *path: Any) -> Any:
    current: Any = document
    for key in path:
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError) as exc:
            dotted = ".".join(str(part) for part in path)
            raise PayloadError(f"Station data is missing '{dotted}'.") from exc
    return current


def _number(document: Dict[str, Any], *path: Any) -> float:
    value = _dig(document, *path)
    # bool is an int subclass but never a measurement.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        dotted = ".".join(str(part) for part in path)
        raise PayloadError(f"Station data field '{dotted}' is not a number: {value!r}.")
    return value


def extract_reading(
    content: Dict[str, Any],
    *,
    localtime: Callable[[float], time.struct_time] = time.localtime,
) -> StationReading:
    """Pick the outdoor temperature and indoor pressure from the first device.

    Temperature comes from the first module (the outdoor sensor); pressure is
    only reported by the base station itself.
    """
    device = _dig(content, "body", "devices", 0)
    outdoor = _dig(device, "modules", 0, "dashboard_data")
    base = _dig(device, "dashboard_data")

    epoch = _number(base, "time_utc")
    temp_c = _number(outdoor, "Temperature")
    pressure_mb: Optional[float] = (
        _number(base, "Pressure") if base.get("Pressure") is not None else None
    )

    return StationReading(
        timestamp=time.strftime(TIMESTAMP_FORMAT, localtime(epoch)),
        temp_c=temp_c,
        temp_f=celsius_to_fahrenheit(temp_c),
        pressure_mb=pressure_mb,
        pressure_in=millibars_to_inches(pressure_mb) if pressure_mb is not None else None,
        pressure_trend=base.get("pressure_trend"),
    )


def render_html(reading: StationReading) -> str:
    return HTML_TEMPLATE.format(
        timestamp=html.escape(reading.timestamp),
        temp_f=f"{reading.temp_f:.1f}",
        temp_c=f"{reading.temp_c:g}",
    )


__all__ = [
    "HTML_TEMPLATE",
    "celsius_to_fahrenheit",
    "extract_reading",
    "millibars_to_inches",
    "render_html",
]
