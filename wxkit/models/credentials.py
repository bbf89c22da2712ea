"""
Domain model for the persisted OAuth credential record.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CredentialRecord(BaseModel):
    """Token payload issued by the authorization server.

    Fields beyond the two tokens (``expires_in``, ``scope``, ...) are kept
    verbatim so the stored file mirrors what the server returned.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = Field(None, min_length=1)

    @property
    def has_refresh_token(self) -> bool:
        return bool(self.refresh_token)

    def to_payload(self) -> Dict[str, Any]:
        """Serializable form written to the credential store."""
        return self.model_dump(exclude_none=True)


__all__ = ["CredentialRecord"]
