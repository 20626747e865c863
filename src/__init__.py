"""
Personal Ledger - Source Package

The transaction ledger and reporting core behind a personal-finance app:
an in-memory snapshot of one user's transactions, kept in step with a
remote document store, with totals, balances and category breakdowns
derived on demand.

DESIGN PRINCIPLES:
1. The sign of the amount decides income vs expense
2. Writes the user is waiting on fail loudly
3. Cleanup failures are recorded, never hidden
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
