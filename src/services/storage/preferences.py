"""
Local Preferences Storage

A small key-value store on the device, holding the user's preferences as
one serialized mapping under a single key. Screens read it once when they
mount and write it back whenever a tracked preference changes.

DESIGN DECISION: Reading preferences never fails. A missing, unreadable or
invalid payload falls back to defaults (and is logged), because a broken
settings file must not stop the app from showing the user's money.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from src.models.preferences import UserPreferences
from src.services.storage.interface import StorageError


logger = structlog.get_logger(__name__)

PREFERENCES_KEY = "userSettings"


class KeyValueStore(ABC):
    """String-to-string persistent store."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass


class JsonFileKeyValueStore(KeyValueStore):
    """
    Key-value store backed by a single JSON object on disk.

    The file is read on every access and rewritten on every write, which is
    plenty for a handful of settings keys.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self._path}: {e}")
        if not isinstance(data, dict):
            raise StorageError(f"Expected a JSON object in {self._path}")
        return data

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")


class PreferencesStore:
    """
    Reads and writes UserPreferences through a KeyValueStore.
    """

    def __init__(self, store: KeyValueStore, key: str = PREFERENCES_KEY):
        self._store = store
        self._key = key

    def load(self) -> UserPreferences:
        """Stored preferences, or defaults when none are usable."""
        try:
            raw = self._store.get_item(self._key)
        except StorageError as e:
            logger.error("preferences_load_failed", error=str(e))
            return UserPreferences()

        if not raw:
            return UserPreferences()

        try:
            return UserPreferences.model_validate_json(raw)
        except ValidationError as e:
            logger.error("preferences_invalid", error=str(e))
            return UserPreferences()

    def save(self, preferences: UserPreferences) -> None:
        """Persist the full preferences mapping."""
        self._store.set_item(self._key, preferences.model_dump_json())
        logger.debug("preferences_saved", key=self._key)

    def update(self, **changes: Any) -> UserPreferences:
        """
        Merge changes into the stored preferences and persist the result.

        Raises:
            ValidationError: If a change is not a valid preference value
        """
        current = self.load().model_dump()
        current.update(changes)
        updated = UserPreferences.model_validate(current)
        self.save(updated)
        return updated
