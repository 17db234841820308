# src/taskpad/storage/store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

USERS = "users"
TASKS = "tasks"
SESSION = "session"

COLLECTIONS = frozenset({USERS, TASKS, SESSION})

_FLAG_PREFIX = "flag:"

Record = dict[str, Any]


class KeyValueStore:
    """
    SQLite key-value store holding the local collections as JSON text blobs.

    One row per collection (users / tasks / session). Every save replaces the
    whole blob, so the last writer wins; there is no partial-write mode.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "store.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            counts = {name: len(self.load(name)) for name in (USERS, TASKS)}
        except Exception:
            counts = {}
        logger.info("KeyValueStore ready db=%s counts=%s", self._db_path, counts)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL DEFAULT 0
                )
                """
            )

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _check_collection(name: str) -> None:
        if name not in COLLECTIONS:
            raise ValueError(f"unknown collection: {name!r}")

    def _read_raw(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = cur.fetchone()
            return None if row is None else str(row["value"])
        finally:
            conn.close()

    def _write_raw(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def load(self, collection: str) -> list[Record]:
        """Return every record of a collection ([] when missing or unreadable)."""
        self._check_collection(collection)
        raw = self._read_raw(collection)
        if not raw:
            return []
        try:
            val = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Collection %s holds invalid JSON; treating it as empty", collection)
            return []
        if not isinstance(val, list):
            logger.warning("Collection %s is not a list; treating it as empty", collection)
            return []
        return [r for r in val if isinstance(r, dict)]

    def save(self, collection: str, records: list[Record]) -> None:
        """Atomically replace a whole collection."""
        self._check_collection(collection)
        self._write_raw(collection, json.dumps(list(records), ensure_ascii=False))
        logger.debug("Saved collection %s (%d records)", collection, len(records))

    def remove(self, collection: str) -> None:
        self._check_collection(collection)
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (collection,))
            conn.commit()
        finally:
            conn.close()

    def get_flag(self, name: str) -> str | None:
        return self._read_raw(_FLAG_PREFIX + name)

    def set_flag(self, name: str, value: str = "true") -> None:
        self._write_raw(_FLAG_PREFIX + name, value)
