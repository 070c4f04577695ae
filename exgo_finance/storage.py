"""JSON persistence for the engine's collections.

Each collection lives in its own JSON document under
:data:`~exgo_finance.config.DATA_DIR`.  Reads are retried a few times
before giving up; writes go to a temporary file that replaces the
target so a failed write never leaves a half-written document behind.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from .config import SETTINGS_FILE, STORAGE_READ_ATTEMPTS
from .errors import NotFoundError, StorageError, ValidationError
from .models import UserSettings

logger = logging.getLogger(__name__)

T = TypeVar('T')


class JsonStore:
    """A single JSON document with a default value for missing or corrupt files."""

    def __init__(self, path: Path, default: Any, attempts: int = STORAGE_READ_ATTEMPTS):
        self.path = Path(path)
        self.default = default
        self.attempts = max(1, attempts)

    def _default(self) -> Any:
        return copy.deepcopy(self.default)

    def load(self) -> Any:
        if not self.path.exists():
            return self._default()
        last_error: Optional[OSError] = None
        for attempt in range(1, self.attempts + 1):
            try:
                with self.path.open('r', encoding='utf-8') as handle:
                    data = json.load(handle)
                break
            except json.JSONDecodeError:
                logger.warning("Corrupt JSON in %s; falling back to defaults", self.path)
                return self._default()
            except OSError as exc:
                last_error = exc
                logger.warning("Read attempt %d/%d for %s failed: %s", attempt, self.attempts, self.path, exc)
        else:
            raise StorageError(f"Could not read {self.path}: {last_error}") from last_error

        if not isinstance(data, type(self.default)):
            logger.warning("Unexpected %s in %s; falling back to defaults", type(data).__name__, self.path)
            return self._default()
        return data

    def save(self, data: Any) -> None:
        temporary = self.path.with_name(self.path.name + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temporary.open('w', encoding='utf-8') as handle:
                json.dump(data, handle, indent=2, sort_keys=True, ensure_ascii=False)
            os.replace(temporary, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc


class RecordStore(Generic[T]):
    """List of model records stored as a JSON array.

    ``record_type`` must provide ``from_dict`` and ``to_dict``.
    Records that fail validation on load are skipped with a warning.
    """

    def __init__(self, path: Path, record_type: Type[T], attempts: int = STORAGE_READ_ATTEMPTS):
        self.record_type = record_type
        self._document = JsonStore(path, [], attempts=attempts)

    @property
    def path(self) -> Path:
        return self._document.path

    def load(self) -> List[T]:
        records: List[T] = []
        for index, raw in enumerate(self._document.load()):
            try:
                records.append(self.record_type.from_dict(raw))
            except ValidationError as exc:
                logger.warning("Skipping %s #%d in %s: %s", self.record_type.__name__, index, self.path, exc)
        return records

    def save(self, records: List[T]) -> None:
        self._document.save([record.to_dict() for record in records])


class MemoryStore(Generic[T]):
    """In-process store with the same interface as :class:`RecordStore`."""

    def __init__(self, records: Optional[List[T]] = None):
        self.records: List[T] = list(records or [])
        self.saves = 0

    def load(self) -> List[T]:
        return list(self.records)

    def save(self, records: List[T]) -> None:
        self.records = list(records)
        self.saves += 1


def load_settings(path: Optional[Path] = None) -> UserSettings:
    """Load user settings merged over the defaults."""
    data = JsonStore(path or SETTINGS_FILE, {}).load()
    try:
        return UserSettings.from_dict(data)
    except ValidationError as exc:
        logger.warning("Invalid settings (%s); using defaults", exc)
        return UserSettings()


def save_settings(settings: UserSettings, path: Optional[Path] = None) -> None:
    JsonStore(path or SETTINGS_FILE, {}).save(settings.to_dict())


class PersistedCollection(Generic[T]):
    """In-memory list of records backed by a store.

    Mutations build the next list, hand it to the store, and only then
    replace the in-memory list.  When the store raises
    :class:`~exgo_finance.errors.StorageError` the previous list stays in
    place and the error propagates with ``retry`` set to re-run the write.
    """

    kind = 'Record'

    def __init__(self, store: Optional[Any] = None, items: Optional[List[T]] = None):
        self._store = store if store is not None else MemoryStore()
        self._items: List[T] = list(items or [])

    def load(self) -> List[T]:
        self._items = list(self._store.load())
        logger.debug("Loaded %d %s record(s)", len(self._items), self.kind.lower())
        return self.items

    @property
    def items(self) -> List[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    def get(self, item_id: str) -> T:
        for item in self._items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"{self.kind} {item_id} not found")

    def _replaced(self, updated: T) -> List[T]:
        self.get(updated.id)
        return [updated if item.id == updated.id else item for item in self._items]

    def _without(self, item_id: str) -> List[T]:
        self.get(item_id)
        return [item for item in self._items if item.id != item_id]

    def _commit(self, items: List[T], after: Optional[Callable[[], None]] = None) -> None:
        items = list(items)
        try:
            self._store.save(items)
        except StorageError as exc:
            logger.error("Saving %s records failed; keeping previous state: %s", self.kind.lower(), exc)
            exc.retry = lambda: self._commit(items, after)
            raise
        self._items = items
        if after is not None:
            after()
