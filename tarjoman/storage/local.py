"""
Local storage implementations.

``SQLiteRecordStorage`` is the durable default: one table per collection in
a single database file. ``InMemoryRecordStorage`` works without touching
disk and is used for tests and throwaway sessions.
"""

from __future__ import annotations

import copy
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Hashable

from tarjoman.core.errors import DuplicateKey, StorageUnavailable
from tarjoman.storage.base import Collections, RecordStorage

logger = logging.getLogger(__name__)


# =============================================================================
# In-Memory Storage
# =============================================================================


class InMemoryRecordStorage(RecordStorage):
    """In-memory record storage for tests and ephemeral sessions."""

    def __init__(self):
        self._data: dict[str, dict[Hashable, dict[str, Any]]] = {}
        self.open_count = 0

    async def open(self) -> None:
        self.open_count += 1
        for collection in Collections.ALL:
            self._data.setdefault(collection, {})

    async def close(self) -> None:
        pass

    def _collection(self, collection: str) -> dict[Hashable, dict[str, Any]]:
        return self._data.setdefault(collection, {})

    async def put(self, collection: str, key: Hashable, record: dict[str, Any]) -> None:
        # Copy on the way in and out so callers never share state with the store
        self._collection(collection)[key] = copy.deepcopy(record)

    async def insert(self, collection: str, key: Hashable, record: dict[str, Any]) -> None:
        records = self._collection(collection)
        if key in records:
            raise DuplicateKey(
                "A record with this key already exists.",
                collection=collection,
                key=key,
            )
        records[key] = copy.deepcopy(record)

    async def get(self, collection: str, key: Hashable) -> dict[str, Any] | None:
        record = self._collection(collection).get(key)
        return copy.deepcopy(record) if record is not None else None

    async def delete(self, collection: str, key: Hashable) -> bool:
        records = self._collection(collection)
        if key in records:
            del records[key]
            return True
        return False

    async def all(self, collection: str) -> list[dict[str, Any]]:
        return [copy.deepcopy(r) for r in self._collection(collection).values()]

    async def clear(self, collection: str) -> None:
        self._collection(collection).clear()


# =============================================================================
# SQLite Storage
# =============================================================================


class SQLiteRecordStorage(RecordStorage):
    """
    Durable record storage in a single SQLite file.

    Every collection is a table of ``(pk, data)`` where ``data`` holds the
    record as JSON. ``pk`` is declared without a type so integer ids keep
    their numeric ordering. Each method runs in its own transaction.
    """

    def __init__(self, db_path: str | Path = "./data/tarjoman.db"):
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    async def open(self) -> None:
        if self._conn is not None:
            return
        try:
            if str(self.db_path) != ":memory:":
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
            with conn:
                for collection in Collections.ALL:
                    conn.execute(
                        f"CREATE TABLE IF NOT EXISTS {collection} "
                        "(pk PRIMARY KEY, data TEXT NOT NULL)"
                    )
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Could not open database at {self.db_path}: {e}")
            raise StorageUnavailable(
                "Local storage is unavailable.", path=str(self.db_path)
            ) from e
        self._conn = conn
        logger.debug(f"Opened database at {self.db_path}")

    async def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageUnavailable("Local storage is not open.", path=str(self.db_path))
        return self._conn

    @staticmethod
    def _table(collection: str) -> str:
        if collection not in Collections.ALL:
            raise ValueError(f"Unknown collection: {collection}")
        return collection

    def _execute(self, sql: str, params: tuple = ()) -> tuple[list[tuple], int]:
        """Run one statement in its own transaction. Returns (rows, rowcount)."""
        try:
            with self.conn:
                cursor = self.conn.execute(sql, params)
                return cursor.fetchall(), cursor.rowcount
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            logger.error(f"Database operation failed: {e} ({sql})")
            raise StorageUnavailable("Local storage is unavailable.") from e

    async def put(self, collection: str, key: Hashable, record: dict[str, Any]) -> None:
        table = self._table(collection)
        self._execute(
            f"INSERT OR REPLACE INTO {table} (pk, data) VALUES (?, ?)",
            (key, json.dumps(record, ensure_ascii=False)),
        )

    async def insert(self, collection: str, key: Hashable, record: dict[str, Any]) -> None:
        table = self._table(collection)
        try:
            self._execute(
                f"INSERT INTO {table} (pk, data) VALUES (?, ?)",
                (key, json.dumps(record, ensure_ascii=False)),
            )
        except sqlite3.IntegrityError as e:
            raise DuplicateKey(
                "A record with this key already exists.",
                collection=collection,
                key=key,
            ) from e

    async def get(self, collection: str, key: Hashable) -> dict[str, Any] | None:
        table = self._table(collection)
        rows, _ = self._execute(f"SELECT data FROM {table} WHERE pk = ?", (key,))
        return json.loads(rows[0][0]) if rows else None

    async def delete(self, collection: str, key: Hashable) -> bool:
        table = self._table(collection)
        _, count = self._execute(f"DELETE FROM {table} WHERE pk = ?", (key,))
        return count > 0

    async def all(self, collection: str) -> list[dict[str, Any]]:
        table = self._table(collection)
        rows, _ = self._execute(f"SELECT data FROM {table} ORDER BY rowid")
        return [json.loads(row[0]) for row in rows]

    async def clear(self, collection: str) -> None:
        table = self._table(collection)
        self._execute(f"DELETE FROM {table}")
