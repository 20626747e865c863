"""
Data Models Package

This package contains all Pydantic models used in the Personal Ledger system.
All data flowing through the system must conform to these schemas.
"""

from src.models.transaction import (
    CategoryBreakdown,
    DateRange,
    NewTransaction,
    PeriodSummary,
    Transaction,
    TransactionCategory,
    TransactionType,
    TransactionUpdate,
    ensure_utc,
    signed_amount,
)
from src.models.preferences import (
    Currency,
    Language,
    Theme,
    UserPreferences,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "CategoryBreakdown",
    "DateRange",
    "NewTransaction",
    "PeriodSummary",
    "Transaction",
    "TransactionCategory",
    "TransactionType",
    "TransactionUpdate",
    "ensure_utc",
    "signed_amount",
    # Preference models
    "Currency",
    "Language",
    "Theme",
    "UserPreferences",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
