"""
Storage Services Package

Provides the abstract interface and the JSON file implementation for
persisting users, their ledgers and their budgets.
"""

from finance_ledger.services.storage.interface import (
    SchemaVersionError,
    StorageError,
    UserStorageInterface,
)
from finance_ledger.services.storage.json_file import (
    SCHEMA_VERSION,
    JsonFileUserStorage,
    StoredUsers,
)

__all__ = [
    # Interface
    "UserStorageInterface",
    # Exceptions
    "SchemaVersionError",
    "StorageError",
    # JSON file implementation
    "SCHEMA_VERSION",
    "JsonFileUserStorage",
    "StoredUsers",
]
