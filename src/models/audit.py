"""
Audit Models for Personal Ledger

Every mutation of the ledger, and every failure talking to the remote
store, is recorded as an audit event. This provides:
1. Traceability of what happened to each transaction
2. Debugging information when local and remote state diverge
3. A record of deletions that still need reconciling

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Snapshot refresh
    TRANSACTIONS_LOADED = "transactions_loaded"
    LOAD_FAILED = "load_failed"

    # Mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    SAVE_FAILED = "save_failed"

    # Divergence between local and remote state
    REMOTE_DELETE_FAILED = "remote_delete_failed"
    DELETION_RECONCILED = "deletion_reconciled"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - whose data, which record
    user_id: Optional[str] = Field(
        default=None,
        description="User the event belongs to"
    )
    transaction_id: Optional[str] = Field(
        default=None,
        description="Transaction the event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "transaction_id": self.transaction_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, user_id,
         transaction_id, description, details_json, error_message]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.user_id or "",
            self.transaction_id or "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(user_id, transaction_id, amount)
        event = AuditEventBuilder.remote_delete_failed(user_id, transaction_id, error)
    """

    @staticmethod
    def transactions_loaded(user_id: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_LOADED,
            severity=AuditSeverity.DEBUG,
            user_id=user_id,
            description=f"Loaded {count} transactions",
            details={"count": count},
        )

    @staticmethod
    def load_failed(user_id: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            description="Could not load transactions; keeping current snapshot",
            error_message=error_message,
        )

    @staticmethod
    def transaction_added(
        user_id: str,
        transaction_id: str,
        amount: str,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            user_id=user_id,
            transaction_id=transaction_id,
            description=f"Transaction added: {amount} ({category})",
            details={"amount": amount, "category": category},
        )

    @staticmethod
    def transaction_updated(
        user_id: str,
        transaction_id: str,
        changed_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            user_id=user_id,
            transaction_id=transaction_id,
            description=f"Transaction updated: {', '.join(changed_fields) or 'no fields'}",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def transaction_deleted(user_id: str, transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            user_id=user_id,
            transaction_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def save_failed(
        user_id: str,
        operation: str,
        error_message: str,
        transaction_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            transaction_id=transaction_id,
            description=f"Remote {operation} failed",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def remote_delete_failed(
        user_id: str,
        transaction_id: str,
        error_message: str,
        pending: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMOTE_DELETE_FAILED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            transaction_id=transaction_id,
            description="Remote delete failed; removed locally and queued for retry",
            details={"pending_deletions": pending},
            error_message=error_message,
        )

    @staticmethod
    def deletion_reconciled(user_id: str, transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETION_RECONCILED,
            user_id=user_id,
            transaction_id=transaction_id,
            description="Queued deletion applied to remote store",
        )
