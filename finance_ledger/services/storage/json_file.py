"""
JSON File Storage Implementation

DESIGN DECISION: Users are stored in one JSON document with an explicit,
versioned schema:

    {
      "schema_version": 1,
      "users": [
        {
          "login": "...",
          "credential": {"salt": "...", "digest": "...", "iterations": 200000},
          "ledger": {"entries": [
            {"kind": "income", "category": "food", "amount": "100.50",
             "created_at": "2026-10-18T12:00:00", "comment": "lunch"}
          ]},
          "budgets": {"limits": {"food": "50"}}
        }
      ]
    }

Amounts are decimal strings so no precision is lost. Entries stay in
append order. The format is pure data and does not depend on Python
object layout.

Writes go to a temporary file in the same directory which is then
renamed over the target, so a crash never leaves a half-written file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Mapping, Union

from pydantic import BaseModel, Field, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_ledger.logs import get_logger
from finance_ledger.models.ledger import User
from finance_ledger.services.storage.interface import (
    SchemaVersionError,
    StorageError,
    UserStorageInterface,
)


logger = get_logger(__name__)

SCHEMA_VERSION = 1


class StoredUsers(BaseModel):
    """Top-level document of the data file."""

    schema_version: int = Field(default=SCHEMA_VERSION)
    users: list[User] = Field(default_factory=list)


class JsonFileUserStorage(UserStorageInterface):
    """
    Stores all users in a single JSON file.

    A missing file means "no users yet". A file that exists but cannot
    be parsed is an error; it is never silently replaced on load.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_users(self) -> dict[str, User]:
        if not self._path.exists():
            logger.info("storage_empty", path=str(self._path))
            return {}

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot read {self._path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid JSON in {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Unexpected document in {self._path}")

        version = data.get("schema_version")
        if version != SCHEMA_VERSION:
            raise SchemaVersionError(
                f"Unsupported schema version {version!r} in {self._path} "
                f"(expected {SCHEMA_VERSION})"
            )

        try:
            document = StoredUsers.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Invalid data in {self._path}: {e}") from e

        users: dict[str, User] = {}
        for user in document.users:
            if user.login in users:
                raise StorageError(f"Duplicate login {user.login!r} in {self._path}")
            users[user.login] = user

        logger.info("storage_loaded", path=str(self._path), users=len(users))
        return users

    def save_users(self, users: Mapping[str, User]) -> None:
        document = StoredUsers(
            users=[users[login] for login in sorted(users)],
        )
        payload = document.model_dump_json(indent=2)

        try:
            self._write_atomically(payload)
        except OSError as e:
            logger.error("storage_save_failed", path=str(self._path), error=str(e))
            raise StorageError(f"Cannot write {self._path}: {e}") from e

        logger.info("storage_saved", path=str(self._path), users=len(users))

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomically(self, payload: str) -> None:
        """Write via a temp file + rename. Retries transient OS errors."""
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=directory,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
