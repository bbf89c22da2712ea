"""Silent renewal of the Netatmo access token."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from wxkit.clients.netatmo_auth import (
    NetatmoOAuthClient,
    TokenEndpointError,
    TokenPayloadError,
)
from wxkit.core.exceptions import (
    MissingRefreshTokenError,
    RefreshParseError,
    RefreshRejectedError,
    RefreshTransportError,
)
from wxkit.models import CredentialRecord
from wxkit.services.credential_store import CredentialStore


class TokenRefresher:
    """Exchange a stored refresh token for a new credential record."""

    def __init__(
        self,
        oauth_client: NetatmoOAuthClient,
        store: CredentialStore,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._oauth = oauth_client
        self._store = store
        self._log = logger or logging.getLogger(__name__)

    def refresh(self, record: CredentialRecord) -> CredentialRecord:
        """Return and persist a fresh record; the old one is replaced, not merged."""
        if not record.refresh_token:
            raise MissingRefreshTokenError("Stored credentials have no refresh token.")

        self._log.info("Refreshing access token")
        try:
            refreshed = self._oauth.refresh_token(record.refresh_token)
        except TokenEndpointError as exc:
            raise RefreshRejectedError(exc.status_code, exc.detail) from exc
        except TokenPayloadError as exc:
            raise RefreshParseError(str(exc)) from exc
        except httpx.RequestError as exc:
            raise RefreshTransportError(f"Token endpoint unreachable: {exc}") from exc

        self._store.write(refreshed)
        return refreshed


__all__ = ["TokenRefresher"]
