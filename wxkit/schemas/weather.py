"""
Pydantic models for the documents the utilities emit.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class StationReading(BaseModel):
    """Latest outdoor temperature and barometric pressure from a station."""

    timestamp: str = Field(..., description="Local time of the measurement.")
    temp_c: float = Field(..., description="Outdoor temperature in Celsius.")
    temp_f: float = Field(..., description="Outdoor temperature in Fahrenheit.")
    pressure_mb: Optional[float] = Field(
        None, description="Sea-level pressure reported by the indoor base station."
    )
    pressure_in: Optional[float] = Field(None, description="Pressure in inches of mercury.")
    pressure_trend: Optional[str] = Field(
        None, description="Netatmo trend label (up, down, stable)."
    )


class AstronomySummary(BaseModel):
    """Sun and moon events for a single day, as emitted by ``wx-astro``."""

    date: str = ""
    sunrise: str = ""
    sunset: str = ""
    daylength: str = ""
    moonrise: str = ""
    moonset: str = ""
    moonphase: str = ""


class DiscussionSection(BaseModel):
    """One spoken section of an Area Forecast Discussion."""

    name: Literal["overview", "short_term", "long_term"]
    text: str = Field(..., min_length=1)


__all__ = ["AstronomySummary", "DiscussionSection", "StationReading"]
