"""
Factory functions wiring settings into shared clients and services.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import httpx

from wxkit.clients import (
    ForecastDiscussionClient,
    NetatmoOAuthClient,
    NetatmoWeatherClient,
    OAuthStateEncoder,
    SpeechClient,
    TimeAndDateClient,
)
from wxkit.core.config import AppSettings, NetatmoSettings
from wxkit.services import (
    AuthorizationFlow,
    CredentialLifecycle,
    CredentialStore,
    ForecastDiscussionService,
    TokenCipherService,
    TokenRefresher,
)
from wxkit.services.authorization import Prompt
from wxkit.utils.http import RetryConfig, build_http_client


def get_http_client(
    settings: AppSettings, transport: Optional[httpx.BaseTransport] = None
) -> httpx.Client:
    """Provide the HTTP client used for every request of one run."""
    return build_http_client(settings.http, transport=transport)


def get_token_cipher_service(settings: AppSettings) -> Optional[TokenCipherService]:
    """Provide an encryption helper when a credential secret is configured."""
    secret = settings.credentials.encryption_secret
    if not secret:
        return None
    return TokenCipherService(secret=secret)


def get_credential_store(
    settings: AppSettings, path: Optional[Path] = None
) -> CredentialStore:
    """Provide the store for the Netatmo credential record."""
    return CredentialStore(
        path or settings.credentials.path,
        cipher=get_token_cipher_service(settings),
        logger=logging.getLogger("wxkit.credentials.store"),
    )


def get_oauth_state_encoder(settings: AppSettings) -> OAuthStateEncoder:
    """Provide an OAuth state encoder keyed by the Netatmo client secret."""
    netatmo: NetatmoSettings = settings.require("netatmo")
    return OAuthStateEncoder(
        secret_key=netatmo.client_secret,
        ttl_seconds=settings.oauth.state_ttl_seconds,
    )


def get_credential_lifecycle(
    settings: AppSettings,
    http_client: httpx.Client,
    *,
    store: Optional[CredentialStore] = None,
    prompt: Optional[Prompt] = None,
) -> CredentialLifecycle:
    """Assemble store, refresh and authorization into the lifecycle manager."""
    netatmo: NetatmoSettings = settings.require("netatmo")
    store = store or get_credential_store(settings)
    oauth_client = NetatmoOAuthClient(netatmo, http_client)
    return CredentialLifecycle(
        store=store,
        refresher=TokenRefresher(
            oauth_client, store, logger=logging.getLogger("wxkit.credentials.refresh")
        ),
        authorization=AuthorizationFlow(
            oauth_client,
            store,
            get_oauth_state_encoder(settings),
            prompt=prompt,
            logger=logging.getLogger("wxkit.credentials.authorization"),
        ),
        reauthorize_on_corrupt=settings.credentials.reauthorize_on_corrupt,
        logger=logging.getLogger("wxkit.credentials.lifecycle"),
    )


def get_weather_client(settings: AppSettings, http_client: httpx.Client) -> NetatmoWeatherClient:
    """Provide the Netatmo station data client."""
    return NetatmoWeatherClient(settings.require("netatmo"), http_client)


def get_timeanddate_client(settings: AppSettings, http_client: httpx.Client) -> TimeAndDateClient:
    """Provide the astronomy API client."""
    return TimeAndDateClient(
        settings.require("timeanddate"),
        http_client,
        retry_config=RetryConfig.from_settings(settings.http),
    )


def get_forecast_discussion_service(
    settings: AppSettings,
    http_client: httpx.Client,
    *,
    with_speech: bool = True,
) -> ForecastDiscussionService:
    """Build the discussion service, with speech only when requested."""
    forecast_client = ForecastDiscussionClient(
        settings.forecast,
        http_client,
        retry_config=RetryConfig.from_settings(settings.http),
    )
    speech_client = SpeechClient(settings.require("speech")) if with_speech else None
    return ForecastDiscussionService(
        forecast_client,
        speech_client,
        logger=logging.getLogger("wxkit.forecast"),
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
