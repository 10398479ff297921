"""Bounded, persisted conversion history.

The log is kept newest-first and never exceeds `limit` entries; appending past
the limit drops the oldest. The whole log lives in one key/value slot as a
JSON array, rewritten on every change.

Persistence is best-effort: read problems fall back to an empty log and
write problems are logged and swallowed. The in-memory log stays
authoritative for the running process either way.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import List, Protocol, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from currency_converter.core.errors import StorageError
from currency_converter.models import HistoryEntry

logger = logging.getLogger("currency_converter.history")

DEFAULT_HISTORY_KEY = "cc_history_v1"
DEFAULT_HISTORY_LIMIT = 50

_ENTRIES = TypeAdapter(List[HistoryEntry])


class SupportsSlots(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class HistoryStore:
    def __init__(
        self,
        storage: SupportsSlots,
        *,
        key: str = DEFAULT_HISTORY_KEY,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self._storage = storage
        self.key = key
        self.limit = limit
        self._entries: Tuple[HistoryEntry, ...] = ()
        self._lock = threading.Lock()

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> Tuple[HistoryEntry, ...]:
        """Read the persisted log; anything unreadable yields an empty log."""
        with self._lock:
            self._entries = self._read()
            return self._entries

    def append(self, entry: HistoryEntry) -> Tuple[HistoryEntry, ...]:
        with self._lock:
            self._entries = ((entry,) + self._entries)[: self.limit]
            self._write()
            return self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries = ()
            self._write()

    # Internal --------------------------------------------------
    def _read(self) -> Tuple[HistoryEntry, ...]:
        try:
            raw = self._storage.get(self.key)
        except StorageError:
            logger.warning("history slot unreadable; starting empty", exc_info=True)
            return ()
        if not raw:
            return ()
        try:
            entries = _ENTRIES.validate_python(json.loads(raw))
        except (ValueError, ValidationError) as e:  # ValueError for JSON decode
            logger.warning("history slot corrupt; starting empty: %s", e)
            return ()
        return tuple(entries[: self.limit])

    def _write(self) -> None:
        payload = _ENTRIES.dump_json(list(self._entries), by_alias=True).decode("utf-8")
        try:
            self._storage.set(self.key, payload)
        except StorageError:
            logger.warning("failed to persist history (%d entries)", len(self._entries), exc_info=True)
