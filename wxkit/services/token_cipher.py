"""Symmetric encryption for credential records stored on disk."""

from __future__ import annotations

import base64
import hashlib
import json
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken


class TokenCipherService:
    """Seal and unseal credential payloads using a derived Fernet key."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        key = base64.urlsafe_b64encode(digest)
        self._fernet = Fernet(key)

    def seal(self, payload: Dict[str, Any]) -> str:
        """Serialize ``payload`` to JSON and return the ciphertext."""
        serialized = json.dumps(payload, separators=(",", ":"), sort_keys=True)
        token = self._fernet.encrypt(serialized.encode("utf-8"))
        return token.decode("ascii")

    def unseal(self, ciphertext: str) -> Any:
        """Decrypt ``ciphertext`` and return the decoded JSON document."""
        try:
            plaintext = self._fernet.decrypt(ciphertext.strip().encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError(
                "Failed to decrypt credentials; wrong secret or tampered file."
            ) from exc
        return json.loads(plaintext.decode("utf-8"))


__all__ = ["TokenCipherService"]
