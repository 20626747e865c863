"""Tests for wiring the application components."""

import asyncio
from decimal import Decimal

import pytest

from src.config import get_settings
from src.models.transaction import DateRange, NewTransaction
from src.orchestrator import create_app_components
from src.services.identity import StaticIdentityProvider
from src.services.storage import InMemoryTransactionStorage


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PREFERENCES_PATH", str(tmp_path / "prefs.json"))
    monkeypatch.setenv("DEFAULT_DATE_RANGE", "Week")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCreateAppComponents:

    def test_offline_components_share_one_ledger(self):
        components = create_app_components(
            use_storage=False,
            identity=StaticIdentityProvider("user-1"),
        )

        assert isinstance(components.storage, InMemoryTransactionStorage)
        assert components.sheets_client is None
        assert components.ledger.selected_range == DateRange.WEEK

    def test_start_then_use(self):
        components = create_app_components(
            use_storage=False,
            identity=StaticIdentityProvider("user-1"),
        )

        assert asyncio.run(components.start()) == 0

        asyncio.run(
            components.ledger.add(NewTransaction(amount=Decimal("80"), category="Food", type="expense"))
        )
        assert components.statistics.summary().expenses == Decimal("80")

    def test_start_without_user_loads_nothing(self):
        components = create_app_components(use_storage=False)
        assert asyncio.run(components.start()) is None

    def test_missing_sheets_config_falls_back_to_memory(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)

        components = create_app_components(use_storage=True)

        assert isinstance(components.storage, InMemoryTransactionStorage)
        assert components.sheets_client is None

    def test_preferences_use_configured_path(self, tmp_path):
        components = create_app_components(use_storage=False)
        components.preferences.update(currency="EUR")

        assert (tmp_path / "prefs.json").exists()

    def test_recent_limit_comes_from_settings(self, monkeypatch):
        monkeypatch.setenv("RECENT_TRANSACTIONS_LIMIT", "2")
        components = create_app_components(
            use_storage=False,
            identity=StaticIdentityProvider("user-1"),
        )

        for amount in ("10", "20", "30", "40"):
            asyncio.run(components.ledger.add(NewTransaction(amount=Decimal(amount), category="Food")))

        assert len(components.ledger.recent_transactions()) == 2
        assert len(components.ledger.recent_transactions(10)) == 4
