"""
Ledger Statistics

Category breakdowns and period summaries for the statistics view. All
figures come from the ledger's read side, so they follow the same
sign-based classification and the same reporting windows.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from src.ledger.ledger import RangeLike, TransactionLedger, ZERO, to_range
from src.models.transaction import (
    CategoryBreakdown,
    PeriodSummary,
    TransactionCategory,
    ensure_utc,
)


def _percentage(part: Decimal, whole: Decimal) -> float:
    if whole == ZERO:
        return 0.0
    return float(part / whole * 100)


class LedgerStatistics:
    """Read-only reporting over a TransactionLedger."""

    def __init__(self, ledger: TransactionLedger):
        self._ledger = ledger

    def category_breakdown(
        self,
        date_range: Optional[RangeLike] = None,
    ) -> list[CategoryBreakdown]:
        """
        Expense total and share for each category that has any spending.

        Categories are returned in their fixed order. Percentages are taken
        against total expenses in the same range.
        """
        total = self._ledger.total_expenses(date_range)
        breakdown = []
        for category in TransactionCategory:
            amount = self._ledger.category_total(category, date_range)
            if amount == ZERO:
                continue
            breakdown.append(
                CategoryBreakdown(
                    category=category,
                    amount=amount,
                    percentage=_percentage(amount, total),
                )
            )
        return breakdown

    def category_percentage(
        self,
        category: Union[TransactionCategory, str],
        date_range: Optional[RangeLike] = None,
    ) -> float:
        return _percentage(
            self._ledger.category_total(category, date_range),
            self._ledger.total_expenses(date_range),
        )

    def summary(self, date_range: Optional[RangeLike] = None) -> PeriodSummary:
        """Income, expenses and balance over a rolling range."""
        resolved = self._ledger.selected_range if date_range is None else to_range(date_range)
        transactions = self._ledger.filter_by_range(resolved)
        income = self._ledger.total_income(resolved)
        expenses = self._ledger.total_expenses(resolved)
        return PeriodSummary(
            label=resolved.value,
            income=income,
            expenses=expenses,
            balance=income - expenses,
            transaction_count=len(transactions),
        )

    def monthly_summary(self, reference: Optional[datetime] = None) -> PeriodSummary:
        """Income, expenses and balance for one calendar month."""
        reference = ensure_utc(reference) if reference else self._ledger.now()
        transactions = self._ledger.monthly_transactions(reference)
        income = sum((t.amount for t in transactions if t.is_income), ZERO)
        expenses = sum((abs(t.amount) for t in transactions if t.is_expense), ZERO)
        return PeriodSummary(
            label=reference.strftime("%Y-%m"),
            income=income,
            expenses=expenses,
            balance=income - expenses,
            transaction_count=len(transactions),
        )
