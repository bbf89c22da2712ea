"""
Decide, once per run, how to obtain a usable Netatmo access token.

The stored record is refreshed first because refreshing needs no operator.
Any refresh failure falls back to the interactive authorization flow; only
authorization failures, unusable stored files and write failures reach the
caller.
"""

from __future__ import annotations

import enum
import logging
from typing import List, Optional

from wxkit.core.exceptions import RefreshError, StoreReadError
from wxkit.models import CredentialRecord
from wxkit.services.authorization import AuthorizationFlow
from wxkit.services.credential_store import (
    Absent,
    Corrupt,
    CredentialStore,
    Present,
)
from wxkit.services.token_refresh import TokenRefresher


class LifecycleState(str, enum.Enum):
    START = "start"
    HAVE_RECORD = "have_record"
    NEED_AUTH = "need_auth"
    READY = "ready"
    FAILED = "failed"


class CredentialLifecycle:
    """Single entry point returning a currently valid access token."""

    def __init__(
        self,
        store: CredentialStore,
        refresher: TokenRefresher,
        authorization: AuthorizationFlow,
        *,
        reauthorize_on_corrupt: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._refresher = refresher
        self._authorization = authorization
        self._reauthorize_on_corrupt = reauthorize_on_corrupt
        self._log = logger or logging.getLogger(__name__)
        self.last_transitions: List[LifecycleState] = []

    def get_access_token(self) -> str:
        return self.acquire().access_token

    def acquire(self) -> CredentialRecord:
        """Run the lifecycle and return the persisted record."""
        self.last_transitions = [LifecycleState.START]
        try:
            stored = self._store.load()
            if isinstance(stored, Present):
                self._enter(LifecycleState.HAVE_RECORD)
                record = self._try_refresh(stored.record)
                if record is None:
                    record = self._authorize()
            elif isinstance(stored, Corrupt):
                record = self._handle_corrupt(stored)
            elif isinstance(stored, Absent):
                self._log.info("No stored credentials; authorization required")
                record = self._authorize()
            else:
                raise TypeError(f"Unexpected stored credential result: {stored!r}")
        except Exception:
            self._enter(LifecycleState.FAILED)
            raise

        self._enter(LifecycleState.READY)
        return record

    def reauthorize(self) -> str:
        """Skip refresh and run the authorization flow directly.

        Used when the API rejects a token that was just issued.
        """
        self.last_transitions = [LifecycleState.START]
        try:
            record = self._authorize()
        except Exception:
            self._enter(LifecycleState.FAILED)
            raise
        self._enter(LifecycleState.READY)
        return record.access_token

    def _try_refresh(self, record: CredentialRecord) -> Optional[CredentialRecord]:
        try:
            return self._refresher.refresh(record)
        except RefreshError as exc:
            self._log.warning("Token refresh failed, falling back to authorization: %s", exc)
            return None

    def _handle_corrupt(self, stored: Corrupt) -> CredentialRecord:
        path = str(self._store.path)
        if not self._reauthorize_on_corrupt:
            raise StoreReadError(path, stored.reason)
        self._log.warning(
            "Discarding unreadable credentials at %s (%s)", path, stored.reason
        )
        self._store.clear()
        return self._authorize()

    def _authorize(self) -> CredentialRecord:
        self._enter(LifecycleState.NEED_AUTH)
        return self._authorization.authorize()

    def _enter(self, state: LifecycleState) -> None:
        self._log.debug("Credential lifecycle -> %s", state.value)
        self.last_transitions.append(state)


__all__ = ["CredentialLifecycle", "LifecycleState"]
