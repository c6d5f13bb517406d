"""
Translation session.

The flow a front end runs for every translation: call the translator,
learn any new language the model reported, and record the result in the
history. Nothing is written when the translation fails.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from tarjoman.core.models import HistoryRecord, TranslationResult
from tarjoman.core.utils import generate_history_id
from tarjoman.i18n.registry import LanguageRegistry
from tarjoman.i18n.translator import Translator
from tarjoman.storage.store import PersistentStore

logger = logging.getLogger(__name__)


class TranslationOutcome(BaseModel):
    """What a front end needs after one translation."""

    result: TranslationResult
    record: HistoryRecord | None = None
    detected_language_known: bool = False
    language_registered: bool = False


class TranslationSession:
    """Runs translations end to end against one store."""

    def __init__(
        self,
        store: PersistentStore,
        registry: LanguageRegistry,
        translator: Translator,
    ):
        self.store = store
        self.registry = registry
        self.translator = translator

    async def translate(self, text: str, source: str, target: str) -> TranslationOutcome:
        result = await self.translator.translate(text, source, target)

        registered = False
        if result.new_language_info is not None:
            registered = await self.registry.register_language(result.new_language_info)

        known = await self.registry.is_known(result.detected_source_language)

        record = None
        if text.strip():
            record = HistoryRecord(
                id=generate_history_id(),
                source_lang=result.detected_source_language,
                target_lang=target,
                source_text=text,
                target_text=result.translated_text,
            )
            await self.store.append_history(record)
            logger.debug(f"Saved translation {record.id} to history")

        return TranslationOutcome(
            result=result,
            record=record,
            detected_language_known=known,
            language_registered=registered,
        )
