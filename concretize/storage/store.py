"""SQLite-backed key/value store for JSON-LD nodes."""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

SCHEMA = """
CREATE TABLE IF NOT EXISTS nodes (
    key TEXT PRIMARY KEY,
    data TEXT NOT NULL
)
"""


class StoreTransaction:
    """Key enumeration and get/put/delete inside one open transaction."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def keys(self) -> List[str]:
        return [row[0] for row in self._conn.execute("SELECT key FROM nodes ORDER BY key")]

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        row = self._conn.execute("SELECT data FROM nodes WHERE key = ?", (key,)).fetchone()
        return json.loads(row[0]) if row else None

    def put(self, key: str, node: Dict[str, Any]) -> None:
        self._conn.execute(
            "INSERT INTO nodes(key, data) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET data = excluded.data",
            (key, json.dumps(node, ensure_ascii=False)),
        )

    def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM nodes WHERE key = ?", (key,))


class NodeStore:
    """Persist nodes keyed by their ``@id`` in a single SQLite table."""

    def __init__(self, path: str | Path = ":memory:"):
        self.path = str(path)
        self.conn = sqlite3.connect(self.path, check_same_thread=False)
        with self.conn:
            self.conn.execute(SCHEMA)

    def close(self) -> None:
        self.conn.close()

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Yield a :class:`StoreTransaction`; commit on success, roll back on error.

        The write lock is taken before the first read so key enumeration and
        the writes that follow see one consistent snapshot.
        """

        self.conn.execute("BEGIN IMMEDIATE")
        try:
            yield StoreTransaction(self.conn)
        except BaseException:
            self.conn.rollback()
            raise
        self.conn.commit()

    # ------------------------------------------------------------------
    def keys(self) -> List[str]:
        return StoreTransaction(self.conn).keys()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        return StoreTransaction(self.conn).get(key)

    def all_nodes(self) -> List[Dict[str, Any]]:
        rows = self.conn.execute("SELECT data FROM nodes ORDER BY key")
        return [json.loads(row[0]) for row in rows]


__all__ = ["NodeStore", "StoreTransaction"]
