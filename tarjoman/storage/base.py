"""
Storage abstraction layer.

All persistence goes through the ``RecordStorage`` interface. This allows
swapping implementations (in-memory for tests, SQLite on disk) without
changing the store or anything above it.

Each collection is a flat mapping of primary key -> JSON-serializable
record. Every method is a single atomic operation on one collection;
nothing spans collections.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Hashable


# =============================================================================
# Storage Interface
# =============================================================================


class RecordStorage(ABC):
    """
    Durable key/record storage with independent collections.

    Implementations raise ``StorageUnavailable`` when the underlying
    storage cannot be reached, and ``DuplicateKey`` from ``insert``.
    """

    @abstractmethod
    async def open(self) -> None:
        """Establish the connection and create missing collections."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the connection."""
        pass

    @abstractmethod
    async def put(self, collection: str, key: Hashable, record: dict[str, Any]) -> None:
        """Insert or replace a record."""
        pass

    @abstractmethod
    async def insert(self, collection: str, key: Hashable, record: dict[str, Any]) -> None:
        """Insert a record, failing if the key already exists."""
        pass

    @abstractmethod
    async def get(self, collection: str, key: Hashable) -> dict[str, Any] | None:
        """Get a record by key, or None."""
        pass

    @abstractmethod
    async def delete(self, collection: str, key: Hashable) -> bool:
        """Delete a record. Returns whether anything was removed."""
        pass

    @abstractmethod
    async def all(self, collection: str) -> list[dict[str, Any]]:
        """Return every record in a collection."""
        pass

    @abstractmethod
    async def clear(self, collection: str) -> None:
        """Remove every record in a collection."""
        pass


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection/table names."""

    SETTINGS = "settings"
    HISTORY = "history"
    LANGUAGES = "languages"

    ALL = (SETTINGS, HISTORY, LANGUAGES)


class _Missing:
    """Sentinel type for an absent setting."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()
