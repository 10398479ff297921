"""Smoke script for the persisted conversion history.

Demonstrates:
 1. Appending past the cap keeps only the newest entries (newest first).
 2. A fresh store on the same SQLite file sees the same log (restart).
 3. Clearing persists the empty log.

NOTE: This is a lightweight diagnostic and not a formal test.
"""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from pprint import pprint

from currency_converter.db.storage import KeyValueStore
from currency_converter.models import HistoryEntry
from currency_converter.services.history import HistoryStore


def run():
    with tempfile.TemporaryDirectory() as d:
        db_path = Path(d) / "smoke.sqlite3"
        storage = KeyValueStore(db_path)
        storage.ensure_schema()
        store = HistoryStore(storage, limit=5)
        start = datetime.now(timezone.utc)

        for n in range(1, 9):
            store.append(
                HistoryEntry(
                    from_currency="USD",
                    to_currency="PKR",
                    amount=n,
                    result=n * 279,
                    rate=279,
                    at=(start + timedelta(seconds=n)).isoformat(),
                )
            )

        reloaded = HistoryStore(KeyValueStore(db_path), limit=5).load()
        out = {
            "in_memory_amounts": [e.amount for e in store.entries],
            "after_restart_amounts": [e.amount for e in reloaded],
        }
        store.clear()
        out["after_clear"] = list(HistoryStore(KeyValueStore(db_path)).load())
        pprint(out)


if __name__ == "__main__":
    run()
