"""Interactive OAuth2 authorization code grant for the Netatmo API."""

from __future__ import annotations

import logging
import secrets
import sys
from typing import Callable, Optional
from urllib.parse import parse_qs, urlsplit

import httpx

from wxkit.clients.netatmo_auth import (
    NetatmoOAuthClient,
    OAuthStateEncoder,
    TokenEndpointError,
    TokenPayloadError,
)
from wxkit.core.exceptions import (
    AuthExchangeError,
    AuthorizationDeniedError,
    AuthorizationError,
    AuthParseError,
    AuthStateError,
    AuthTransportError,
)
from wxkit.models import CredentialRecord
from wxkit.services.credential_store import CredentialStore

# Receives the authorization URL, returns the operator's answer.
Prompt = Callable[[str], str]


def console_prompt(authorization_url: str) -> str:
    """Ask the operator on stderr/stdin to complete consent in a browser."""
    sys.stderr.write(
        "Open the following URL in a browser and approve access:\n\n"
        f"    {authorization_url}\n\n"
        "Paste the authorization code, or the full URL you were redirected to.\n"
        "Authorization code: "
    )
    sys.stderr.flush()
    return sys.stdin.readline()


def fixed_code_prompt(code: str) -> Prompt:
    """Answer the prompt with a code supplied up front (non-interactive runs)."""

    def _prompt(authorization_url: str) -> str:
        return code

    return _prompt


class AuthorizationFlow:
    """Obtain a brand-new credential record through operator consent.

    This is the last-resort path of the credential lifecycle, so every
    failure surfaces as an ``AuthorizationError`` for the caller to report.
    """

    def __init__(
        self,
        oauth_client: NetatmoOAuthClient,
        store: CredentialStore,
        state_encoder: OAuthStateEncoder,
        *,
        prompt: Optional[Prompt] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._oauth = oauth_client
        self._store = store
        self._state = state_encoder
        self._prompt = prompt or console_prompt
        self._log = logger or logging.getLogger(__name__)

    def authorize(self) -> CredentialRecord:
        state = self._state.encode({"nonce": secrets.token_urlsafe(16)})
        authorization_url = self._oauth.build_authorization_url(state)

        self._log.info("Waiting for operator to authorize access")
        answer = self._prompt(authorization_url)
        code = self._extract_code(answer, state)

        self._log.info("Exchanging authorization code for tokens")
        try:
            record = self._oauth.exchange_authorization_code(code)
        except TokenEndpointError as exc:
            raise AuthExchangeError(exc.status_code, exc.detail) from exc
        except TokenPayloadError as exc:
            raise AuthParseError(str(exc)) from exc
        except httpx.RequestError as exc:
            raise AuthTransportError(f"Token endpoint unreachable: {exc}") from exc

        self._store.write(record)
        return record

    def _extract_code(self, answer: Optional[str], issued_state: str) -> str:
        """Accept either a bare code or the redirect URL carrying it."""
        text = (answer or "").strip()
        if not text:
            raise AuthorizationError("No authorization code was provided.")

        if "://" not in text:
            return text

        query = parse_qs(urlsplit(text).query)
        error = _first(query, "error")
        if error:
            raise AuthorizationDeniedError(f"Authorization was not granted: {error}")

        returned_state = _first(query, "state")
        if returned_state is None:
            raise AuthStateError("Redirect URL does not carry the OAuth state.")
        if not secrets.compare_digest(returned_state, issued_state):
            raise AuthStateError("OAuth state does not match the issued request.")
        self._state.decode(returned_state)

        code = _first(query, "code")
        if not code:
            raise AuthorizationError("Redirect URL does not contain an authorization code.")
        return code


def _first(query: dict[str, list[str]], key: str) -> Optional[str]:
    values = query.get(key)
    return values[0] if values else None


__all__ = [
    "AuthorizationFlow",
    "Prompt",
    "console_prompt",
    "fixed_code_prompt",
]
