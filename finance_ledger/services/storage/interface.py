"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for persisting users.
This allows us to:
1. Swap the JSON file for a real database later
2. Use in-memory storage for testing
3. Keep the ledger core decoupled from any on-disk format

The interface is intentionally small: load everything at startup,
save everything at shutdown.
"""

from abc import ABC, abstractmethod
from typing import Mapping

from finance_ledger.models.ledger import User


class UserStorageInterface(ABC):
    """
    Abstract interface for user persistence.

    Any storage implementation must preserve, for every user, the ledger
    entries in append order with all their fields, and the full budget
    mapping.
    """

    @abstractmethod
    def load_users(self) -> dict[str, User]:
        """
        Load every stored user.

        Returns:
            Mapping of login -> User. Empty if nothing has been saved yet.

        Raises:
            StorageError: If stored data exists but cannot be read
        """
        pass

    @abstractmethod
    def save_users(self, users: Mapping[str, User]) -> None:
        """
        Persist every user, replacing what was stored before.

        Args:
            users: Mapping of login -> User (usually a registry snapshot)

        Raises:
            StorageError: If the data could not be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SchemaVersionError(StorageError):
    """Stored data uses a schema version this build cannot read."""
    pass
