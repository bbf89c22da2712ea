"""Service layer exports."""

from .astronomy import summarize_astronomy
from .authorization import AuthorizationFlow, console_prompt, fixed_code_prompt
from .credential_lifecycle import CredentialLifecycle, LifecycleState
from .credential_store import Absent, Corrupt, CredentialStore, Present, StoredCredential
from .forecast_discussion import ForecastDiscussionService, split_discussion
from .station_report import extract_reading, render_html
from .token_cipher import TokenCipherService
from .token_refresh import TokenRefresher

__all__ = [
    "Absent",
    "AuthorizationFlow",
    "Corrupt",
    "CredentialLifecycle",
    "CredentialStore",
    "ForecastDiscussionService",
    "LifecycleState",
    "Present",
    "StoredCredential",
    "TokenCipherService",
    "TokenRefresher",
    "console_prompt",
    "extract_reading",
    "fixed_code_prompt",
    "render_html",
    "split_discussion",
    "summarize_astronomy",
]
