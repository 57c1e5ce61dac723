"""Services package."""

from finance_ledger.services.auth import AuthService, hash_password, verify_password
from finance_ledger.services.registry import UserRegistry
from finance_ledger.services.storage import (
    JsonFileUserStorage,
    SchemaVersionError,
    StorageError,
    UserStorageInterface,
)

__all__ = [
    # Session
    "AuthService",
    "UserRegistry",
    "hash_password",
    "verify_password",
    # Storage
    "JsonFileUserStorage",
    "SchemaVersionError",
    "StorageError",
    "UserStorageInterface",
]
