"""
Core data models for the translation client.

These models describe everything the core persists or exchanges with the
remote model: settings, history records, language descriptors and
translation results. Field names are snake_case in Python and camelCase
on the wire / on disk.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enums
# =============================================================================


class TextDirection(str, Enum):
    """Writing direction of a language."""

    LTR = "ltr"
    RTL = "rtl"


class Theme(str, Enum):
    """Colour theme preference."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"  # Follow the OS setting


class _CamelModel(BaseModel):
    """Base for models stored and exchanged with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        """Serialize for storage / JSON output."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Settings
# =============================================================================


class Setting(BaseModel):
    """A singleton named value. At most one per key."""

    key: str
    value: Any = None


# =============================================================================
# Languages
# =============================================================================


class LanguageDescriptor(_CamelModel):
    """
    A language known to the client.

    ``code`` is the merge key between the built-in catalog and languages
    discovered at runtime.
    """

    code: str
    name: str  # Localized display name
    english_name: str = Field(default="", alias="englishName")
    dir: TextDirection = TextDirection.LTR

    @field_validator("code", "name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @property
    def is_rtl(self) -> bool:
        return self.dir == TextDirection.RTL


# =============================================================================
# History
# =============================================================================


class HistoryRecord(_CamelModel):
    """
    One completed translation.

    ``id`` is derived from the creation time (milliseconds since epoch),
    so ordering by id is ordering by age.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    source_lang: str = Field(alias="sourceLang")
    target_lang: str = Field(alias="targetLang")
    source_text: str = Field(alias="sourceText")
    target_text: str = Field(alias="targetText")

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match against both texts."""
        needle = term.strip().lower()
        if not needle:
            return True
        return needle in self.source_text.lower() or needle in self.target_text.lower()


# =============================================================================
# Translation
# =============================================================================


class TranslationResult(_CamelModel):
    """Structured result parsed from the model output."""

    detected_source_language: str = Field(alias="detectedSourceLanguage")
    translated_text: str = Field(alias="translatedText")
    new_language_info: LanguageDescriptor | None = Field(
        default=None, alias="newLanguageInfo"
    )

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Preferences
# =============================================================================


class Preferences(BaseModel):
    """User-facing behaviour toggles persisted as individual settings."""

    theme: Theme = Theme.SYSTEM
    auto_translate_on_paste: bool = False
    auto_copy_result: bool = False


# Preference field -> settings key
PREFERENCE_KEYS: dict[str, str] = {
    "theme": "theme",
    "auto_translate_on_paste": "autoTranslateOnPaste",
    "auto_copy_result": "autoCopyResult",
}
