"""Pytest configuration and fakes shared across the suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import parse_qsl

import httpx
import pytest

try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - fallback for rootdir-relative imports
    import _bootstrap  # type: ignore # noqa: F401

from wxkit.clients import NetatmoOAuthClient, OAuthStateEncoder
from wxkit.core.config import AppSettings, NetatmoSettings
from wxkit.services import (
    AuthorizationFlow,
    CredentialLifecycle,
    CredentialStore,
    TokenRefresher,
)

QueuedResponse = Union[httpx.Response, Exception]


class FakeNetatmo:
    """Stand-in for the Netatmo token and station endpoints."""

    def __init__(self) -> None:
        self.token_requests: List[Dict[str, str]] = []
        self.station_requests: List[httpx.Request] = []
        self._token_responses: List[QueuedResponse] = []
        self._station_responses: List[QueuedResponse] = []

    def queue_token(
        self,
        status_code: int = 200,
        json: Optional[Any] = None,
        text: Optional[str] = None,
    ) -> None:
        self._token_responses.append(_response(status_code, json, text))

    def queue_token_error(self, exc: Exception) -> None:
        self._token_responses.append(exc)

    def queue_station(self, status_code: int = 200, json: Optional[Any] = None) -> None:
        self._station_responses.append(_response(status_code, json, None))

    @property
    def grants(self) -> List[str]:
        return [form.get("grant_type", "") for form in self.token_requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        if request.url.path == "/oauth2/token":
            self.token_requests.append(dict(parse_qsl(request.content.decode("utf-8"))))
            return self._next(self._token_responses, request)
        if request.url.path == "/api/getstationsdata":
            self.station_requests.append(request)
            return self._next(self._station_responses, request)
        raise AssertionError(f"Unexpected request to {request.url}")

    @staticmethod
    def _next(queue: List[QueuedResponse], request: httpx.Request) -> httpx.Response:
        if not queue:
            raise AssertionError(f"No response queued for {request.method} {request.url}")
        outcome = queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def _response(status_code: int, json: Optional[Any], text: Optional[str]) -> httpx.Response:
    if json is not None:
        return httpx.Response(status_code, json=json)
    return httpx.Response(status_code, text=text or "")


class RecordingPrompt:
    """Operator stand-in answering the authorization prompt."""

    def __init__(self, answer: Union[str, Callable[[str], str]]) -> None:
        self._answer = answer
        self.urls: List[str] = []

    def __call__(self, authorization_url: str) -> str:
        self.urls.append(authorization_url)
        if callable(self._answer):
            return self._answer(authorization_url)
        return self._answer


@pytest.fixture
def netatmo_settings() -> NetatmoSettings:
    return NetatmoSettings(
        client_id="ABC123",
        client_secret="client-secret",
        redirect_uri="https://example.com/netatmo/callback",
        device_id="70:ee:50:1f:3c:48",
    )


@pytest.fixture
def app_settings(netatmo_settings: NetatmoSettings, tmp_path: Path) -> AppSettings:
    return AppSettings(
        netatmo=netatmo_settings,
        credentials={"path": str(tmp_path / "wxkit" / "netatmo-auth.json")},
    )


@pytest.fixture
def credential_path(tmp_path: Path) -> Path:
    return tmp_path / "wxkit" / "netatmo-auth.json"


@pytest.fixture
def store(credential_path: Path) -> CredentialStore:
    return CredentialStore(credential_path)


@pytest.fixture
def fake_netatmo() -> FakeNetatmo:
    return FakeNetatmo()


@pytest.fixture
def http_client(fake_netatmo: FakeNetatmo):
    with httpx.Client(transport=fake_netatmo.transport) as client:
        yield client


@pytest.fixture
def oauth_client(netatmo_settings: NetatmoSettings, http_client: httpx.Client) -> NetatmoOAuthClient:
    return NetatmoOAuthClient(netatmo_settings, http_client)


@pytest.fixture
def state_encoder(netatmo_settings: NetatmoSettings) -> OAuthStateEncoder:
    return OAuthStateEncoder(netatmo_settings.client_secret)


@pytest.fixture
def build_lifecycle(
    oauth_client: NetatmoOAuthClient,
    store: CredentialStore,
    state_encoder: OAuthStateEncoder,
):
    """Return a factory wiring real components around a prompt."""

    def _build(prompt: RecordingPrompt, *, reauthorize_on_corrupt: bool = False) -> CredentialLifecycle:
        return CredentialLifecycle(
            store=store,
            refresher=TokenRefresher(oauth_client, store),
            authorization=AuthorizationFlow(oauth_client, store, state_encoder, prompt=prompt),
            reauthorize_on_corrupt=reauthorize_on_corrupt,
        )

    return _build
