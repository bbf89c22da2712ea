from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from wxkit.core.exceptions import (
    MissingRefreshTokenError,
    RefreshParseError,
    RefreshRejectedError,
    RefreshTransportError,
)
from wxkit.models import CredentialRecord
from wxkit.services import TokenRefresher


@pytest.fixture
def refresher(oauth_client, store) -> TokenRefresher:
    return TokenRefresher(oauth_client, store)


def test_refresh_persists_new_record_wholesale(refresher, fake_netatmo, store, credential_path: Path) -> None:
    store.write(CredentialRecord(access_token="A0", refresh_token="R0", expires_in=10800))
    fake_netatmo.queue_token(json={"access_token": "A1"})

    refreshed = refresher.refresh(store.read())

    assert refreshed.access_token == "A1"
    # The old refresh token is not merged into the new record.
    assert json.loads(credential_path.read_text()) == {"access_token": "A1"}
    assert fake_netatmo.token_requests[0]["refresh_token"] == "R0"


def test_refresh_without_refresh_token_makes_no_request(refresher, fake_netatmo) -> None:
    with pytest.raises(MissingRefreshTokenError):
        refresher.refresh(CredentialRecord(access_token="A0"))

    assert fake_netatmo.token_requests == []


def test_rejected_refresh_token(refresher, fake_netatmo, store) -> None:
    store.write(CredentialRecord(access_token="A0", refresh_token="R0"))
    fake_netatmo.queue_token(status_code=400, json={"error": "invalid_grant"})

    with pytest.raises(RefreshRejectedError) as excinfo:
        refresher.refresh(store.read())

    assert excinfo.value.status_code == 400
    assert store.read() == CredentialRecord(access_token="A0", refresh_token="R0")


def test_unparseable_refresh_response(refresher, fake_netatmo) -> None:
    fake_netatmo.queue_token(text="not json")

    with pytest.raises(RefreshParseError):
        refresher.refresh(CredentialRecord(access_token="A0", refresh_token="R0"))


def test_transport_failure_during_refresh(refresher, fake_netatmo) -> None:
    fake_netatmo.queue_token_error(httpx.ReadTimeout("timed out"))

    with pytest.raises(RefreshTransportError):
        refresher.refresh(CredentialRecord(access_token="A0", refresh_token="R0"))


def test_request_errors_beyond_transport_are_refresh_failures(refresher, fake_netatmo) -> None:
    fake_netatmo.queue_token_error(httpx.TooManyRedirects("redirect loop"))

    with pytest.raises(RefreshTransportError):
        refresher.refresh(CredentialRecord(access_token="A0", refresh_token="R0"))
