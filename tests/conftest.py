"""
Shared fixtures for Personal Ledger tests.

All tests run against in-memory storage with a fixed clock.
No real API calls in tests.
"""

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from src.audit import AuditLogger
from src.ledger import LedgerStatistics, TransactionLedger
from src.services.identity import StaticIdentityProvider
from src.services.storage import InMemoryAuditStorage, InMemoryTransactionStorage


NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
USER_ID = "user-1"


@pytest.fixture
def storage() -> InMemoryTransactionStorage:
    return InMemoryTransactionStorage()


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def identity() -> StaticIdentityProvider:
    return StaticIdentityProvider(USER_ID)


@pytest.fixture
def ledger(storage, identity, audit_storage) -> TransactionLedger:
    return TransactionLedger(
        storage=storage,
        identity=identity,
        audit_logger=AuditLogger(audit_storage),
        clock=lambda: NOW,
    )


@pytest.fixture
def statistics(ledger) -> LedgerStatistics:
    return LedgerStatistics(ledger)


@pytest.fixture
def seed(storage):
    """
    Insert a raw document into storage and return its id.

    ``when`` defaults to NOW; ``days_ago`` shifts it back.
    """
    ids = count(1)

    def _seed(
        amount,
        category="Food",
        days_ago=0,
        when=None,
        user_id=USER_ID,
        description="",
    ) -> str:
        transaction_id = f"txn_{next(ids):04d}"
        when = when or NOW - timedelta(days=days_ago)
        storage.seed(
            transaction_id,
            {
                "user_id": user_id,
                "amount": str(amount),
                "category": category,
                "description": description,
                "date": when.isoformat(),
                "type": "expense" if float(amount) < 0 else "income",
            },
        )
        return transaction_id

    return _seed
