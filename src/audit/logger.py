"""
Audit Logger

DESIGN DECISION: Every ledger mutation and every remote failure is logged.
This provides:
1. Traceability of each transaction's history
2. Debugging capability when local and remote state diverge
3. A visible record of deletions that still need reconciling

The audit logger:
- Is async so it fits the ledger's call chain
- Gracefully handles failures (doesn't crash the app if logging fails)
- Always writes the structured local log, persistence is optional
"""

import logging
from typing import Optional

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from src.services.storage import AuditStorageInterface


_SEVERITY_LEVELS = {
    AuditSeverity.DEBUG: logging.DEBUG,
    AuditSeverity.INFO: logging.INFO,
    AuditSeverity.WARNING: logging.WARNING,
    AuditSeverity.ERROR: logging.ERROR,
    AuditSeverity.CRITICAL: logging.CRITICAL,
}


def configure_logging(level: str = "INFO") -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(format="%(message)s")
    logging.getLogger().setLevel(level.upper())
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog for local logging
configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        self._logger.log(
            _SEVERITY_LEVELS[event.severity],
            "audit_event",
            **event.to_log_dict(),
        )

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_transactions_loaded(self, user_id: str, count: int) -> None:
        await self.log(AuditEventBuilder.transactions_loaded(user_id, count))

    async def log_load_failed(self, user_id: str, error_message: str) -> None:
        await self.log(AuditEventBuilder.load_failed(user_id, error_message))

    async def log_transaction_added(
        self,
        user_id: str,
        transaction_id: str,
        amount: str,
        category: str,
    ) -> None:
        """Log a successful add."""
        await self.log(
            AuditEventBuilder.transaction_added(
                user_id=user_id,
                transaction_id=transaction_id,
                amount=amount,
                category=category,
            )
        )

    async def log_transaction_updated(
        self,
        user_id: str,
        transaction_id: str,
        changed_fields: list[str],
    ) -> None:
        await self.log(
            AuditEventBuilder.transaction_updated(
                user_id=user_id,
                transaction_id=transaction_id,
                changed_fields=changed_fields,
            )
        )

    async def log_transaction_deleted(self, user_id: str, transaction_id: str) -> None:
        await self.log(AuditEventBuilder.transaction_deleted(user_id, transaction_id))

    async def log_save_failed(
        self,
        user_id: str,
        operation: str,
        error_message: str,
        transaction_id: Optional[str] = None,
    ) -> None:
        """Log a failed remote write the caller will see as an exception."""
        await self.log(
            AuditEventBuilder.save_failed(
                user_id=user_id,
                operation=operation,
                error_message=error_message,
                transaction_id=transaction_id,
            )
        )

    async def log_remote_delete_failed(
        self,
        user_id: str,
        transaction_id: str,
        error_message: str,
        pending: int,
    ) -> None:
        await self.log(
            AuditEventBuilder.remote_delete_failed(
                user_id=user_id,
                transaction_id=transaction_id,
                error_message=error_message,
                pending=pending,
            )
        )

    async def log_deletion_reconciled(self, user_id: str, transaction_id: str) -> None:
        await self.log(AuditEventBuilder.deletion_reconciled(user_id, transaction_id))
