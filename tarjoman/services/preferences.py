"""
User preferences stored as individual settings.
"""

from __future__ import annotations

import logging
from typing import Any

from tarjoman.core.models import PREFERENCE_KEYS, Preferences
from tarjoman.storage.store import PersistentStore

logger = logging.getLogger(__name__)


class PreferencesService:
    """Load and update ``Preferences`` through the settings collection."""

    def __init__(self, store: PersistentStore):
        self.store = store

    async def load(self) -> Preferences:
        """Current preferences; anything never saved falls back to its default."""
        values: dict[str, Any] = {}
        for field, key in PREFERENCE_KEYS.items():
            value = await self.store.get_setting(key, default=None)
            if value is not None:
                values[field] = value
        return Preferences.model_validate(values)

    async def update(self, **changes: Any) -> Preferences:
        """
        Change one or more preferences.

        Raises:
            ValueError: Unknown preference or invalid value
        """
        unknown = set(changes) - set(PREFERENCE_KEYS)
        if unknown:
            raise ValueError(f"Unknown preference(s): {', '.join(sorted(unknown))}")

        current = await self.load()
        updated = Preferences.model_validate({**current.model_dump(), **changes})

        stored = updated.model_dump(mode="json")
        for field in changes:
            await self.store.put_setting(PREFERENCE_KEYS[field], stored[field])
            logger.debug(f"Preference {field} set to {stored[field]!r}")

        return updated
