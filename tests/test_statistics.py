"""Tests for category breakdowns and period summaries."""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.models.transaction import DateRange, TransactionCategory


@pytest.fixture
def loaded(ledger, seed):
    seed(3000, category="Other", days_ago=1)
    seed(-600, category="Housing", days_ago=2)
    seed(-300, category="Food", days_ago=3)
    seed(-100, category="Transport", days_ago=4)
    seed(-50, category="Food", days_ago=200)
    asyncio.run(ledger.load())
    return ledger


class TestCategoryBreakdown:

    def test_only_categories_with_spending_in_fixed_order(self, loaded, statistics):
        breakdown = statistics.category_breakdown("Month")

        assert [b.category for b in breakdown] == [
            TransactionCategory.HOUSING,
            TransactionCategory.FOOD,
            TransactionCategory.TRANSPORT,
        ]
        assert breakdown[1].amount == Decimal("300")

    def test_percentages_use_same_range(self, loaded, statistics):
        breakdown = {b.category: b for b in statistics.category_breakdown("Month")}

        assert breakdown[TransactionCategory.HOUSING].percentage == pytest.approx(60.0)
        assert breakdown[TransactionCategory.FOOD].percentage == pytest.approx(30.0)
        assert sum(b.percentage for b in breakdown.values()) == pytest.approx(100.0)

    def test_wider_range_includes_older_spending(self, loaded, statistics):
        breakdown = {b.category: b for b in statistics.category_breakdown(DateRange.YEAR)}
        assert breakdown[TransactionCategory.FOOD].amount == Decimal("350")

    def test_no_expenses_gives_empty_breakdown(self, ledger, seed, statistics):
        seed(500, category="Other")
        asyncio.run(ledger.load())

        assert statistics.category_breakdown() == []
        assert statistics.category_percentage("Food") == 0.0

    def test_category_percentage(self, loaded, statistics):
        assert statistics.category_percentage("Transport", "Month") == pytest.approx(10.0)


class TestSummaries:

    def test_range_summary(self, loaded, statistics):
        summary = statistics.summary("Month")

        assert summary.label == "Month"
        assert summary.income == Decimal("3000")
        assert summary.expenses == Decimal("1000")
        assert summary.balance == Decimal("2000")
        assert summary.transaction_count == 4

    def test_summary_defaults_to_selected_range(self, loaded, statistics):
        loaded.select_range("All")
        assert statistics.summary().transaction_count == 5

    def test_monthly_summary(self, ledger, seed, statistics):
        seed(1500, when=datetime(2024, 3, 1, tzinfo=timezone.utc))
        seed(-400, when=datetime(2024, 3, 10, tzinfo=timezone.utc))
        seed(-999, when=datetime(2024, 2, 10, tzinfo=timezone.utc))
        asyncio.run(ledger.load())

        summary = statistics.monthly_summary()

        assert summary.label == "2024-03"
        assert summary.income == Decimal("1500")
        assert summary.expenses == Decimal("400")
        assert summary.balance == Decimal("1100")
        assert statistics.monthly_summary(datetime(2024, 2, 1, tzinfo=timezone.utc)).expenses == Decimal("999")

    def test_monthly_summary_label_follows_utc_month(self, ledger, seed, statistics):
        seed(-50, when=datetime(2024, 2, 29, 23, 30, tzinfo=timezone.utc))
        asyncio.run(ledger.load())

        reference = datetime(2024, 3, 1, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        summary = statistics.monthly_summary(reference)

        assert summary.label == "2024-02"
        assert summary.expenses == Decimal("50")
