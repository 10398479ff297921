"""Durable key/value store on SQLite.

Each slot holds one text value. Callers own serialization; this layer only
guarantees that a `set` either fully replaces the slot or leaves it untouched.
All sqlite failures surface as `StorageError`.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from currency_converter.core.errors import StorageError
from .schema import BASIC_UTC_NOW, init_db

logger = logging.getLogger("currency_converter.storage")


class KeyValueStore:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def ensure_schema(self) -> None:
        try:
            init_db(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"cannot initialize store at {self.db_path}: {e}") from e

    # ------------------------------------------------------------------
    # Slots
    def get(self, key: str) -> Optional[str]:
        try:
            conn = self._connect()
            try:
                cur = conn.cursor()
                cur.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
                row = cur.fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"cannot read '{key}': {e}") from e
        return None if row is None else row["value"]

    def set(self, key: str, value: str) -> None:
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute(
                        f"""
                        INSERT INTO kv_store (key, value) VALUES (?, ?)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = ({BASIC_UTC_NOW})
                        """,
                        (key, value),
                    )
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"cannot write '{key}': {e}") from e
        logger.debug("stored slot %s (%d bytes)", key, len(value))
