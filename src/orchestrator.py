"""
Main Orchestrator for Personal Ledger

This module builds the service graph explicitly: identity, remote
storage, audit logging, the ledger, its statistics view and the local
preferences store. Consumers receive these objects rather than looking
up a process-wide context.

DESIGN DECISION: Construction and initialization are separate steps.
create_app_components() only wires objects together; start() performs
the first load. Nothing talks to the network as a side effect of
construction.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from src.audit import AuditLogger, configure_logging
from src.config import get_settings
from src.ledger import LedgerStatistics, TransactionLedger
from src.services.identity import IdentityProvider, StaticIdentityProvider
from src.services.storage import (
    AuditStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    InMemoryTransactionStorage,
    JsonFileKeyValueStore,
    PreferencesStore,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)


@dataclass
class AppComponents:
    """Everything a front end needs, already wired."""

    identity: IdentityProvider
    storage: TransactionStorageInterface
    audit_logger: AuditLogger
    ledger: TransactionLedger
    statistics: LedgerStatistics
    preferences: PreferencesStore
    sheets_client: Optional[GoogleSheetsClient] = None

    async def start(self) -> Optional[int]:
        """Explicit initialization: load the signed-in user's transactions."""
        loaded = await self.ledger.initialize()
        logger.info("ledger_started", loaded=loaded)
        return loaded


def create_app_components(
    use_storage: bool = True,
    identity: Optional[IdentityProvider] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use Google Sheets as the remote store.
                    Set to False to run against in-memory storage.
        identity: Identity provider to use. Defaults to a static
                 provider holding the configured user id.

    Returns:
        Wired AppComponents; call start() before reading the ledger
    """
    settings = get_settings().app
    configure_logging(settings.log_level)

    sheets_client = None
    storage: TransactionStorageInterface
    audit_storage: Optional[AuditStorageInterface] = None

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            storage = GoogleSheetsTransactionStorage(sheets_client)
            audit_storage = GoogleSheetsAuditStorage(sheets_client)
        except Exception as e:
            # Storage not configured - continue without it
            logger.warning("storage_not_configured", error=str(e))
            sheets_client = None
            storage = InMemoryTransactionStorage()
            audit_storage = None
    else:
        storage = InMemoryTransactionStorage()

    identity = identity or StaticIdentityProvider(settings.user_id)
    audit_logger = AuditLogger(audit_storage)

    ledger = TransactionLedger(
        storage=storage,
        identity=identity,
        audit_logger=audit_logger,
        default_range=settings.default_date_range,
        recent_limit=settings.recent_transactions_limit,
    )

    preferences = PreferencesStore(JsonFileKeyValueStore(settings.preferences_path))

    return AppComponents(
        identity=identity,
        storage=storage,
        audit_logger=audit_logger,
        ledger=ledger,
        statistics=LedgerStatistics(ledger),
        preferences=preferences,
        sheets_client=sheets_client,
    )
