"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for a real document database later
2. Use in-memory storage for testing
3. Keep the ledger decoupled from storage implementation

The contract mirrors a document store: a collection of transaction
documents keyed by a generated id, queryable by owner, with create,
update-by-path and delete-by-path. Paths are always scoped to
(user_id, transaction_id) so one user can never touch another's records.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.models.audit import AuditEvent
from src.models.transaction import Transaction


class TransactionStorageInterface(ABC):
    """
    Abstract interface for the remote transaction document store.

    Any storage implementation (Google Sheets, Firestore, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def create(self, document: dict[str, Any]) -> str:
        """
        Store a new transaction document.

        Args:
            document: Flat mapping of transaction fields, without an id

        Returns:
            The id the store assigned to the document

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> list[Transaction]:
        """
        Fetch every transaction owned by a user.

        Documents that cannot be parsed are skipped, not returned.

        Args:
            user_id: Owner to match

        Returns:
            Transactions in store order
        """
        pass

    @abstractmethod
    async def update(
        self,
        user_id: str,
        transaction_id: str,
        fields: dict[str, Any],
    ) -> None:
        """
        Overwrite fields of an existing document.

        Args:
            user_id: Owner of the document
            transaction_id: Document id
            fields: Field values to write

        Raises:
            NotFoundError: If no such document exists for this user
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, transaction_id: str) -> None:
        """
        Remove a document.

        Args:
            user_id: Owner of the document
            transaction_id: Document id

        Raises:
            StorageError: If the delete fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
