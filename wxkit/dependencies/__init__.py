"""Expose factory helpers used by the command-line scripts."""

from .clients import (
    get_credential_lifecycle,
    get_credential_store,
    get_forecast_discussion_service,
    get_http_client,
    get_oauth_state_encoder,
    get_timeanddate_client,
    get_token_cipher_service,
    get_weather_client,
)

__all__ = [
    "get_credential_lifecycle",
    "get_credential_store",
    "get_forecast_discussion_service",
    "get_http_client",
    "get_oauth_state_encoder",
    "get_timeanddate_client",
    "get_token_cipher_service",
    "get_weather_client",
]
