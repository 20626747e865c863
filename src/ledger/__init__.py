"""Transaction ledger package."""

from src.ledger.ledger import TransactionLedger, utc_now
from src.ledger.statistics import LedgerStatistics

__all__ = ["LedgerStatistics", "TransactionLedger", "utc_now"]
