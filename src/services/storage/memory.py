"""
In-Memory Storage Implementation

Keeps documents in a dict. Used by the test suite and for offline runs
where no spreadsheet is configured. Behaves like the remote store as far
as the ledger can tell: ids are generated here, reads return fresh
Transaction objects, and failures can be injected per operation.
"""

from typing import Any, Optional
from uuid import uuid4

import structlog
from pydantic import ValidationError

from src.models.audit import AuditEvent
from src.models.transaction import Transaction
from src.services.storage.interface import (
    AuditStorageInterface,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)


class InMemoryTransactionStorage(TransactionStorageInterface):
    """
    Dict-backed transaction store.

    Set ``fail_on`` to a set of operation names ("create", "list",
    "update", "delete") to make those operations raise StorageError.
    """

    def __init__(self, fail_on: Optional[set[str]] = None):
        self._documents: dict[str, dict[str, Any]] = {}
        self.fail_on: set[str] = set(fail_on or ())

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StorageError(f"Simulated {operation} failure")

    def _to_transaction(self, transaction_id: str, document: dict[str, Any]) -> Transaction:
        return Transaction(id=transaction_id, **document)

    @property
    def documents(self) -> dict[str, dict[str, Any]]:
        """Copy of the raw documents keyed by id."""
        return {key: dict(value) for key, value in self._documents.items()}

    def seed(self, transaction_id: str, document: dict[str, Any]) -> None:
        """Insert a raw document directly, bypassing validation."""
        self._documents[transaction_id] = dict(document)

    async def create(self, document: dict[str, Any]) -> str:
        self._check("create")
        transaction_id = uuid4().hex
        self._documents[transaction_id] = dict(document)
        return transaction_id

    async def list_by_user(self, user_id: str) -> list[Transaction]:
        self._check("list")
        transactions = []
        for transaction_id, document in self._documents.items():
            if document.get("user_id") != user_id:
                continue
            try:
                transactions.append(self._to_transaction(transaction_id, document))
            except ValidationError as e:
                logger.warning(
                    "skipping_malformed_document",
                    transaction_id=transaction_id,
                    error=str(e),
                )
        return transactions

    async def update(
        self,
        user_id: str,
        transaction_id: str,
        fields: dict[str, Any],
    ) -> None:
        self._check("update")
        document = self._documents.get(transaction_id)
        if document is None or document.get("user_id") != user_id:
            raise NotFoundError(f"Transaction not found: {transaction_id}")
        document.update(fields)

    async def delete(self, user_id: str, transaction_id: str) -> None:
        self._check("delete")
        document = self._documents.get(transaction_id)
        if document is not None and document.get("user_id") == user_id:
            del self._documents[transaction_id]


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True
