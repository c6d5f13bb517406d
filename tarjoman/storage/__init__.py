"""
Storage abstractions.

- RecordStorage → SQLite (durable) or in-memory (tests)
- PersistentStore → settings, history and custom languages on top of it
"""

from tarjoman.storage.base import (
    RecordStorage,
    Collections,
    MISSING,
)
from tarjoman.storage.local import InMemoryRecordStorage, SQLiteRecordStorage
from tarjoman.storage.store import PersistentStore, get_store, set_store

__all__ = [
    "RecordStorage",
    "Collections",
    "MISSING",
    "InMemoryRecordStorage",
    "SQLiteRecordStorage",
    "PersistentStore",
    "get_store",
    "set_store",
]
