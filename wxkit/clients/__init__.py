"""Expose constructed client wrappers."""

from .netatmo_auth import NetatmoOAuthClient, OAuthStateEncoder
from .netatmo_weather import NetatmoWeatherClient
from .nws_forecast import ForecastDiscussionClient
from .text_to_speech import SpeechClient
from .timeanddate import TimeAndDateClient

__all__ = [
    "ForecastDiscussionClient",
    "NetatmoOAuthClient",
    "NetatmoWeatherClient",
    "OAuthStateEncoder",
    "SpeechClient",
    "TimeAndDateClient",
]
