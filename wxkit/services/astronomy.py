"""Condense a timeanddate.com astronomy response into the published summary."""

from __future__ import annotations

from typing import Any, Dict

from wxkit.core.exceptions import PayloadError
from wxkit.schemas import AstronomySummary

MOON_PHASES = {
    "waxingcrescent": "wax. crescent",
    "firstquarter": "first qt.",
    "secondquarter": "second qt.",
    "waxinggibbous": "wax. gibbous",
    "fullmoon": "full moon",
    "waninggibbous": "wan. gibbous",
    "thirdquarter": "third qt.",
    "lastquarter": "last qt.",
    "waningcrescent": "wan. crescent",
    "newmoon": "new moon",
}

_EVENT_TYPES = ("rise", "set")


def format_clock(hour: Any, minute: Any) -> str:
    return f"{int(hour):02d}:{int(minute):02d}"


def _events(day: Dict[str, Any], prefix: str) -> Dict[str, str]:
    times: Dict[str, str] = {}
    for event in day.get("events") or []:
        kind = event.get("type")
        if kind in _EVENT_TYPES:
            times[f"{prefix}{kind}"] = format_clock(event["hour"], event["min"])
    return times


def summarize_astronomy(payload: Dict[str, Any]) -> AstronomySummary:
    try:
        objects = payload["locations"][0]["astronomy"]["objects"]
    except (KeyError, IndexError, TypeError) as exc:
        raise PayloadError("Astronomy response has no location data.") from exc

    values: Dict[str, str] = {}
    for obj in objects:
        days = obj.get("days") or [{}]
        day = days[0]
        if obj.get("name") == "sun":
            values["date"] = day.get("date", "")
            values["daylength"] = day.get("daylength", "")
            values.update(_events(day, "sun"))
        elif obj.get("name") == "moon":
            phase = (obj.get("current") or {}).get("moonphase", "")
            values["moonphase"] = MOON_PHASES.get(phase, phase)
            values.update(_events(day, "moon"))

    return AstronomySummary(**values)


__all__ = ["MOON_PHASES", "format_clock", "summarize_astronomy"]
