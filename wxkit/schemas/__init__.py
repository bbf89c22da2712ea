"""Public schema exports."""

from .weather import AstronomySummary, DiscussionSection, StationReading

__all__ = [
    "AstronomySummary",
    "DiscussionSection",
    "StationReading",
]
