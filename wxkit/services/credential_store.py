"""File-backed persistence for the single Netatmo credential record."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from wxkit.core.exceptions import StoreReadError, StoreWriteError
from wxkit.models import CredentialRecord
from wxkit.services.token_cipher import TokenCipherService


@dataclass(frozen=True, slots=True)
class Absent:
    """No credential file exists yet."""


@dataclass(frozen=True, slots=True)
class Corrupt:
    """A credential file exists but its content cannot be used."""

    reason: str


@dataclass(frozen=True, slots=True)
class Present:
    """A usable credential record was loaded."""

    record: CredentialRecord


StoredCredential = Union[Absent, Corrupt, Present]


class CredentialStore:
    """Read and atomically replace one credential record at a fixed path.

    The file holds the record as JSON, or as a Fernet token when a cipher
    is supplied. The file is created ``0600`` inside a ``0700`` directory.
    """

    def __init__(
        self,
        path: Path,
        *,
        cipher: Optional[TokenCipherService] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._path = Path(path)
        self._cipher = cipher
        self._log = logger or logging.getLogger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StoredCredential:
        """Return the stored credential as ``Absent``, ``Corrupt`` or ``Present``.

        Raises ``StoreReadError`` only when an existing file cannot be read
        at all (permissions, I/O); unusable content is reported as ``Corrupt``.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            self._log.debug("No stored credentials at %s", self._path)
            return Absent()
        except OSError as exc:
            raise StoreReadError(str(self._path), exc.strerror or str(exc)) from exc

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            return Corrupt("file is not valid UTF-8")

        try:
            document = self._cipher.unseal(text) if self._cipher else json.loads(text)
        except json.JSONDecodeError as exc:
            return Corrupt(f"invalid JSON ({exc.msg} at line {exc.lineno})")
        except ValueError as exc:
            return Corrupt(str(exc))

        if not isinstance(document, dict):
            return Corrupt("expected a JSON object")

        try:
            record = CredentialRecord.model_validate(document)
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
            return Corrupt(f"invalid credential fields: {fields or 'unknown'}")

        self._log.debug("Loaded stored credentials from %s", self._path)
        return Present(record)

    def read(self) -> Optional[CredentialRecord]:
        """Return the stored record, ``None`` when absent.

        Raises ``StoreReadError`` when the file exists but is unusable.
        """
        stored = self.load()
        if isinstance(stored, Corrupt):
            raise StoreReadError(str(self._path), stored.reason)
        if isinstance(stored, Present):
            return stored.record
        return None

    def write(self, record: CredentialRecord) -> None:
        """Replace the stored record. Readers see either the old or new file."""
        payload = record.to_payload()
        if self._cipher:
            content = self._cipher.seal(payload)
        else:
            content = json.dumps(payload, separators=(",", ":"))

        directory = self._path.parent
        try:
            if not directory.exists():
                directory.mkdir(mode=stat.S_IRWXU, parents=True, exist_ok=True)
                os.chmod(directory, stat.S_IRWXU)

            # mkstemp creates the file 0600 in the same filesystem as the target.
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(content)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.chmod(temp_name, stat.S_IRUSR | stat.S_IWUSR)
                os.replace(temp_name, self._path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreWriteError(
                f"Could not write credentials to {self._path}: {exc}"
            ) from exc

        self._log.info("Stored credentials at %s", self._path)

    def clear(self) -> None:
        """Delete the stored record, if any."""
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            raise StoreWriteError(
                f"Could not remove credentials at {self._path}: {exc}"
            ) from exc
        self._log.info("Removed stored credentials at %s", self._path)


__all__ = [
    "Absent",
    "CredentialStore",
    "Corrupt",
    "Present",
    "StoredCredential",
]
