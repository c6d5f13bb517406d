"""
Language registry.

Presents one catalog merging the built-in languages with the custom ones
in the store. The merge is cached and rebuilt lazily: registering a new
language persists it and drops the cache, and the next read rebuilds.

States:
    EMPTY  -> no cache; the next read rebuilds from the store
    LOADED -> cache populated; reads return the same objects
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping

from pydantic import ValidationError

from tarjoman.core.models import LanguageDescriptor
from tarjoman.i18n.languages import AUTO_DETECT, BUILTIN_LANGUAGES
from tarjoman.storage.store import PersistentStore

logger = logging.getLogger(__name__)


class RegistryState(str, Enum):
    """Cache state of the registry."""

    EMPTY = "empty"
    LOADED = "loaded"


class LanguageRegistry:
    """
    Cached view of built-in + custom languages.

    A custom language whose code matches a built-in one replaces it in the
    merged catalog.

    Usage:
        registry = LanguageRegistry(store)

        languages = await registry.get_all_languages()
        names = await registry.get_language_names()  # {"fa": "فارسی", ...}

        await registry.register_language({"code": "it", "name": "ایتالیایی",
                                          "englishName": "Italian", "dir": "ltr"})
    """

    def __init__(
        self,
        store: PersistentStore,
        builtins: tuple[LanguageDescriptor, ...] = BUILTIN_LANGUAGES,
    ):
        self.store = store
        self.builtins = builtins

        self._languages: list[LanguageDescriptor] | None = None
        self._names: dict[str, str] | None = None

        # Bumped on every invalidation so a rebuild that raced with a write
        # does not publish a stale catalog.
        self._generation = 0

    @property
    def state(self) -> RegistryState:
        if self._languages is None:
            return RegistryState.EMPTY
        return RegistryState.LOADED

    # =========================================================================
    # Cache
    # =========================================================================

    async def _load(self) -> tuple[list[LanguageDescriptor], dict[str, str]]:
        generation = self._generation
        custom = await self.store.list_custom_languages()

        merged: dict[str, LanguageDescriptor] = {}
        for lang in self.builtins:
            merged[lang.code] = lang
        for lang in custom:
            if lang.code in merged and merged[lang.code] != lang:
                logger.debug(f"Custom language '{lang.code}' overrides the built-in entry")
            merged[lang.code] = lang

        languages = list(merged.values())
        names = {lang.code: lang.name for lang in languages}

        if generation == self._generation:
            self._languages = languages
            self._names = names
        else:
            logger.debug("Language catalog changed during rebuild; not caching")

        return languages, names

    def invalidate(self) -> None:
        """Drop the cached catalog; the next read rebuilds it."""
        self._generation += 1
        self._languages = None
        self._names = None

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_all_languages(self) -> list[LanguageDescriptor]:
        """The merged catalog. Same list object on repeated calls while loaded."""
        if self._languages is not None:
            return self._languages
        languages, _ = await self._load()
        return languages

    async def get_language_names(self) -> dict[str, str]:
        """Map of code -> localized display name."""
        if self._names is not None:
            return self._names
        _, names = await self._load()
        return names

    async def get_language(self, code: str) -> LanguageDescriptor | None:
        for lang in await self.get_all_languages():
            if lang.code == code:
                return lang
        return None

    async def is_known(self, code: str) -> bool:
        return await self.get_language(code) is not None

    async def translatable_languages(self) -> list[LanguageDescriptor]:
        """Every real language, without the auto-detect pseudo entry."""
        return [lang for lang in await self.get_all_languages() if lang.code != AUTO_DETECT]

    async def rtl_codes(self) -> set[str]:
        return {lang.code for lang in await self.get_all_languages() if lang.is_rtl}

    # =========================================================================
    # Writes
    # =========================================================================

    async def register_language(
        self, descriptor: LanguageDescriptor | Mapping[str, Any] | None
    ) -> bool:
        """
        Persist a newly discovered language and drop the cache.

        The descriptor usually comes from model output, so an invalid one is
        logged and ignored rather than raised. Returns whether it was stored.
        """
        if descriptor is None:
            logger.error("Invalid language object: none provided")
            return False

        if not isinstance(descriptor, LanguageDescriptor):
            try:
                descriptor = LanguageDescriptor.model_validate(dict(descriptor))
            except (ValidationError, TypeError, ValueError) as e:
                logger.error(f"Invalid language object {descriptor!r}: {e}")
                return False

        await self.store.put_language(descriptor)
        self.invalidate()
        logger.info(f"Registered language '{descriptor.code}' ({descriptor.english_name})")
        return True

