"""
Netatmo OAuth utilities.

These helpers build the consent URL, sign the anti-forgery state and talk
to the token endpoint for both the authorization code and refresh grants.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import json
import time
from hashlib import sha256
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from wxkit.core.config import NetatmoSettings
from wxkit.core.exceptions import AuthStateError
from wxkit.models import CredentialRecord


class OAuthStateEncoder:
    """Encode and decode OAuth state values to guard against tampering."""

    def __init__(
        self,
        secret_key: str,
        *,
        ttl_seconds: int = 900,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret_key = secret_key.encode("utf-8")
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    def encode(self, payload: Dict[str, Any]) -> str:
        body = {**payload, "iat": int(self._clock())}
        serialized = json.dumps(body, separators=(",", ":"), sort_keys=True)
        signature = hmac.new(self._secret_key, serialized.encode("utf-8"), sha256).digest()
        return base64.urlsafe_b64encode(signature + serialized.encode("utf-8")).decode("utf-8")

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            decoded = base64.urlsafe_b64decode(token.encode("utf-8"))
        except (binascii.Error, ValueError) as exc:
            raise AuthStateError("OAuth state is not valid base64.") from exc
        signature, serialized = decoded[:32], decoded[32:]
        expected_signature = hmac.new(self._secret_key, serialized, sha256).digest()
        if not hmac.compare_digest(signature, expected_signature):
            raise AuthStateError("Invalid OAuth state signature.")
        payload = json.loads(serialized)
        issued_at = int(payload.get("iat", 0))
        if self._clock() - issued_at > self._ttl_seconds:
            raise AuthStateError("OAuth state has expired; restart the authorization.")
        return payload


class TokenEndpointError(Exception):
    """Raised when the token endpoint returns a non-success status."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"{status_code} {detail}")
        self.status_code = status_code
        self.detail = detail


class TokenPayloadError(Exception):
    """Raised when the token endpoint body is not a usable token payload."""


class NetatmoOAuthClient:
    """Build Netatmo authorization URLs and call the token endpoint."""

    AUTHORIZE_PATH = "/oauth2/authorize"
    TOKEN_PATH = "/oauth2/token"

    def __init__(self, settings: NetatmoSettings, http_client: httpx.Client) -> None:
        self._settings = settings
        self._http = http_client

    @property
    def token_url(self) -> str:
        return f"{self._settings.base_url}{self.TOKEN_PATH}"

    def build_authorization_url(self, state: str) -> str:
        """Construct the Netatmo consent URL."""
        params = {
            "client_id": self._settings.client_id,
            "redirect_uri": str(self._settings.redirect_uri),
            "response_type": "code",
            "scope": " ".join(self._settings.scopes),
            "state": state,
        }
        query = urlencode(params)
        return f"{self._settings.base_url}{self.AUTHORIZE_PATH}?{query}"

    def exchange_authorization_code(self, code: str) -> CredentialRecord:
        """Exchange an authorization code for a credential record."""
        payload = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "redirect_uri": str(self._settings.redirect_uri),
            "scope": " ".join(self._settings.scopes),
        }
        return self._request_token(payload)

    def refresh_token(self, refresh_token: str) -> CredentialRecord:
        """Mint a new credential record from a stored refresh token."""
        payload = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
        }
        return self._request_token(payload)

    def _request_token(self, payload: Dict[str, str]) -> CredentialRecord:
        response = self._http.post(self.token_url, data=payload)

        if not response.is_success:
            raise TokenEndpointError(response.status_code, _error_detail(response))

        try:
            token_payload = response.json()
        except ValueError as exc:
            raise TokenPayloadError("Token endpoint returned a non-JSON body.") from exc
        if not isinstance(token_payload, dict):
            raise TokenPayloadError("Token endpoint returned an unexpected JSON document.")

        try:
            return CredentialRecord.model_validate(token_payload)
        except ValidationError as exc:
            raise TokenPayloadError("Incomplete token payload returned from Netatmo.") from exc


def _error_detail(response: httpx.Response) -> str:
    """Prefer the OAuth ``error`` field over the raw body."""
    try:
        body: Optional[Any] = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        description = body.get("error_description")
        return f"{body['error']}: {description}" if description else str(body["error"])
    return response.reason_phrase or response.text[:200]


__all__ = [
    "NetatmoOAuthClient",
    "OAuthStateEncoder",
    "TokenEndpointError",
    "TokenPayloadError",
]
