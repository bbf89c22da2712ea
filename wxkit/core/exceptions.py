"""Exception hierarchy for the wxkit utilities.

Credential errors are split into the store, authorization and refresh
families so the credential lifecycle can absorb refresh failures while
letting authorization failures terminate the run.
"""

from __future__ import annotations

from typing import Optional


class WxkitError(Exception):
    """Base class for all errors raised by wxkit."""


class ConfigurationError(WxkitError):
    """Raised when the configuration file or environment is unusable."""


class CredentialError(WxkitError):
    """Base class for failures obtaining an access token."""


class StoreError(CredentialError):
    """Raised when the credential file cannot be read or written."""


class StoreReadError(StoreError):
    """Raised when a stored credential exists but cannot be used."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Stored credentials at {path} are unreadable: {reason}")
        self.path = path
        self.reason = reason


class StoreWriteError(StoreError):
    """Raised when the credential file cannot be persisted."""


class AuthorizationError(CredentialError):
    """Raised when the authorization code grant cannot complete."""


class AuthExchangeError(AuthorizationError):
    """The token endpoint rejected the authorization code."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"Authorization code exchange failed: {status_code} {detail}")
        self.status_code = status_code
        self.detail = detail


class AuthParseError(AuthorizationError):
    """The token endpoint answered with a body that is not a token payload."""


class AuthTransportError(AuthorizationError):
    """The token endpoint could not be reached during authorization."""


class AuthStateError(AuthorizationError):
    """The ``state`` returned with the redirect failed verification."""


class AuthorizationDeniedError(AuthorizationError):
    """The operator or the authorization server refused consent."""


class RefreshError(CredentialError):
    """Base class for refresh failures the lifecycle recovers from."""


class MissingRefreshTokenError(RefreshError):
    """The stored record carries no refresh token."""


class RefreshRejectedError(RefreshError):
    """The token endpoint rejected the refresh token."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"Refresh token rejected: {status_code} {detail}")
        self.status_code = status_code
        self.detail = detail


class RefreshParseError(RefreshError):
    """The refresh response could not be decoded into a credential record."""


class RefreshTransportError(RefreshError):
    """The token endpoint could not be reached during refresh."""


class UpstreamError(WxkitError):
    """Raised when a data API answers with an error status."""

    def __init__(
        self, service: str, status_code: Optional[int], detail: str
    ) -> None:
        status = f" {status_code}" if status_code is not None else ""
        super().__init__(f"{service} request failed:{status} {detail}".rstrip())
        self.service = service
        self.status_code = status_code
        self.detail = detail


class AccessTokenRejectedError(UpstreamError):
    """The weather station API refused the access token."""


class PayloadError(WxkitError):
    """Raised when a data API response lacks the fields we depend on."""


__all__ = [
    "AccessTokenRejectedError",
    "AuthExchangeError",
    "AuthParseError",
    "AuthStateError",
    "AuthTransportError",
    "AuthorizationDeniedError",
    "AuthorizationError",
    "ConfigurationError",
    "CredentialError",
    "MissingRefreshTokenError",
    "PayloadError",
    "RefreshError",
    "RefreshParseError",
    "RefreshRejectedError",
    "RefreshTransportError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "UpstreamError",
    "WxkitError",
]
