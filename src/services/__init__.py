"""Services package."""

from src.services.identity import IdentityProvider, StaticIdentityProvider
from src.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
    JsonFileKeyValueStore,
    KeyValueStore,
    NotFoundError,
    PreferencesStore,
    StorageError,
    TransactionStorageInterface,
)

__all__ = [
    # Identity
    "IdentityProvider",
    "StaticIdentityProvider",
    # Storage services
    "AuditStorageInterface",
    "ConnectionError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStorage",
    "InMemoryAuditStorage",
    "InMemoryTransactionStorage",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "NotFoundError",
    "PreferencesStore",
    "StorageError",
    "TransactionStorageInterface",
]
