"""Tests for the local preferences store."""

import json

import pytest
from pydantic import ValidationError

from src.models.preferences import Currency, Language, Theme, UserPreferences
from src.services.storage import JsonFileKeyValueStore, PreferencesStore, StorageError
from src.services.storage.preferences import PREFERENCES_KEY


@pytest.fixture
def path(tmp_path):
    return tmp_path / "nested" / "preferences.json"


@pytest.fixture
def preferences(path) -> PreferencesStore:
    return PreferencesStore(JsonFileKeyValueStore(path))


class TestKeyValueStore:

    def test_missing_file_reads_as_empty(self, path):
        assert JsonFileKeyValueStore(path).get_item("anything") is None

    def test_set_then_get(self, path):
        store = JsonFileKeyValueStore(path)
        store.set_item("a", "1")
        store.set_item("b", "2")

        assert store.get_item("a") == "1"
        assert json.loads(path.read_text()) == {"a": "1", "b": "2"}

    def test_corrupt_file_raises(self, path):
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        with pytest.raises(StorageError):
            JsonFileKeyValueStore(path).get_item("a")


class TestPreferencesStore:

    def test_defaults_when_nothing_stored(self, preferences):
        assert preferences.load() == UserPreferences()

    def test_save_and_load(self, preferences):
        preferences.save(UserPreferences(currency="EUR", theme="dark", bill_reminders=False))

        loaded = preferences.load()
        assert loaded.currency == Currency.EUR
        assert loaded.theme == Theme.DARK
        assert loaded.bill_reminders is False

    def test_update_merges_into_stored_mapping(self, preferences):
        preferences.save(UserPreferences(theme="dark"))

        updated = preferences.update(currency="TL", language="tr")

        assert updated.theme == Theme.DARK
        assert updated.currency == Currency.TL
        assert preferences.load().language == Language.TR

    def test_update_rejects_invalid_value(self, preferences):
        with pytest.raises(ValidationError):
            preferences.update(theme="neon")
        assert preferences.load() == UserPreferences()

    def test_invalid_payload_falls_back_to_defaults(self, path, preferences):
        JsonFileKeyValueStore(path).set_item(PREFERENCES_KEY, '{"currency": "GBP"}')
        assert preferences.load() == UserPreferences()

    def test_unreadable_file_falls_back_to_defaults(self, path, preferences):
        path.parent.mkdir(parents=True)
        path.write_text("[]")
        assert preferences.load() == UserPreferences()
