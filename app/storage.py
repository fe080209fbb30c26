"""
app/storage.py -- Calculation history and per-calculator preferences.

CalculationStore is the interface the service depends on; routes receive a
store through the get_store() FastAPI dependency so tests (or another
backend) can swap it.

  save_calculation(type, input, result) -> HistoryRecord  (append only)
  get_calculation_history(type)         -> [HistoryRecord] oldest first
  save_preferences(type, defaults)      -> PreferencesRecord (overwrites)
  get_preferences(type)                 -> PreferencesRecord | None

Backends:
  InMemoryStore  -- process-local, lost on restart (default)
  JsonFileStore  -- single JSON document rewritten on every write
"""
from __future__ import annotations

import json
import math
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from app.config import get_settings
from app.errors import PersistenceFailure
from app.logging_config import get_logger
from app.models import HistoryRecord, PreferencesRecord

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def sanitize_json_compat(value: Any) -> Any:
    """Replace NaN / +-inf (not valid JSON) with None, recursively."""
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, list):
        return [sanitize_json_compat(item) for item in value]
    return value


class CalculationStore(ABC):
    @abstractmethod
    def save_calculation(
        self, calc_type: str, input: Dict[str, Any], result: Dict[str, Any]
    ) -> HistoryRecord:
        ...

    @abstractmethod
    def get_calculation_history(self, calc_type: str) -> List[HistoryRecord]:
        ...

    @abstractmethod
    def save_preferences(
        self, calc_type: str, default_values: Dict[str, Any]
    ) -> PreferencesRecord:
        ...

    @abstractmethod
    def get_preferences(self, calc_type: str) -> Optional[PreferencesRecord]:
        ...


class InMemoryStore(CalculationStore):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._history: List[HistoryRecord] = []
        self._preferences: Dict[str, PreferencesRecord] = {}
        self._next_history_id = 1
        self._next_preferences_id = 1

    def save_calculation(self, calc_type, input, result):
        with self._lock:
            record = HistoryRecord(
                id=self._next_history_id,
                type=calc_type,
                input=sanitize_json_compat(input),
                result=sanitize_json_compat(result),
                createdAt=_now(),
            )
            self._history.append(record)
            try:
                self._commit()
            except PersistenceFailure:
                self._history.pop()
                raise
            self._next_history_id += 1
        logger.info("calculation saved", calc_type=calc_type, record_id=record.id)
        return record

    def get_calculation_history(self, calc_type):
        with self._lock:
            return [r for r in self._history if r.type == calc_type]

    def save_preferences(self, calc_type, default_values):
        with self._lock:
            existing = self._preferences.get(calc_type)
            record = PreferencesRecord(
                id=existing.id if existing else self._next_preferences_id,
                calculatorType=calc_type,
                defaultValues=sanitize_json_compat(default_values),
                updatedAt=_now(),
            )
            self._preferences[calc_type] = record
            try:
                self._commit()
            except PersistenceFailure:
                if existing is None:
                    del self._preferences[calc_type]
                else:
                    self._preferences[calc_type] = existing
                raise
            if existing is None:
                self._next_preferences_id += 1
        logger.info("preferences saved", calc_type=calc_type)
        return record

    def get_preferences(self, calc_type):
        with self._lock:
            return self._preferences.get(calc_type)

    def _commit(self) -> None:
        """Persist the current state; called with the lock held after each write.

        A PersistenceFailure here undoes the write in memory.
        """


class JsonFileStore(InMemoryStore):
    """
    InMemoryStore persisted to ``path`` after each write and loaded on
    construction. Unreadable or malformed files raise PersistenceFailure,
    and a write that cannot reach the file is not kept in memory.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            self._history = [HistoryRecord.model_validate(r) for r in data.get("history", [])]
            self._preferences = {
                r["calculatorType"]: PreferencesRecord.model_validate(r)
                for r in data.get("preferences", [])
            }
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as exc:
            logger.error("store load failed", path=str(self.path), error=str(exc))
            raise PersistenceFailure(f"Cannot read store at {self.path}: {exc}") from exc

        self._next_history_id = max((r.id for r in self._history), default=0) + 1
        self._next_preferences_id = max(
            (r.id for r in self._preferences.values()), default=0
        ) + 1

    def _commit(self) -> None:
        data = {
            "history": [r.model_dump(mode="json") for r in self._history],
            "preferences": [r.model_dump(mode="json") for r in self._preferences.values()],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(data, f)
        except OSError as exc:
            logger.error("store write failed", path=str(self.path), error=str(exc))
            raise PersistenceFailure(f"Cannot write store at {self.path}: {exc}") from exc


def create_store(backend: str, path: str) -> CalculationStore:
    if backend == "memory":
        return InMemoryStore()
    if backend == "json":
        return JsonFileStore(path)
    raise PersistenceFailure(f"Unknown store backend: {backend}")


@lru_cache
def get_store() -> CalculationStore:
    """FastAPI dependency: the process-wide store chosen by configuration."""
    settings = get_settings()
    return create_store(settings.STORE_BACKEND, settings.STORE_PATH)
