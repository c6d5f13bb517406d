"""
Services used by the front ends (HTTP API and CLI).

Initialize once with ``create_services()`` and hand the container around;
each front end uses the pieces it needs.
"""

from __future__ import annotations

from pydantic import BaseModel

from tarjoman.credentials import CredentialRotator
from tarjoman.i18n.registry import LanguageRegistry
from tarjoman.i18n.translator import Translator
from tarjoman.services.history import HistoryService
from tarjoman.services.preferences import PreferencesService
from tarjoman.services.translation import TranslationOutcome, TranslationSession
from tarjoman.storage.store import PersistentStore


class Services(BaseModel):
    """Container for everything wired to one store."""

    model_config = {"arbitrary_types_allowed": True}

    store: PersistentStore
    credentials: CredentialRotator
    languages: LanguageRegistry
    translator: Translator
    session: TranslationSession
    history: HistoryService
    preferences: PreferencesService


def create_services(store: PersistentStore, **translator_options) -> Services:
    """Wire every service to ``store``. Extra options go to ``Translator``."""
    credentials = CredentialRotator(store)
    languages = LanguageRegistry(store)
    translator = Translator(credentials, languages, **translator_options)
    return Services(
        store=store,
        credentials=credentials,
        languages=languages,
        translator=translator,
        session=TranslationSession(store, languages, translator),
        history=HistoryService(store),
        preferences=PreferencesService(store),
    )


__all__ = [
    "Services",
    "create_services",
    "TranslationSession",
    "TranslationOutcome",
    "HistoryService",
    "PreferencesService",
]
