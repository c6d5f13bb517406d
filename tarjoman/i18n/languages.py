"""
Built-in language catalog and utilities.

The catalog is fixed and compiled in. Languages the model discovers at
runtime are stored separately and merged on top of it by the
``LanguageRegistry``. Display names are in Persian, the client's UI
language.
"""

from __future__ import annotations

from tarjoman.core.models import LanguageDescriptor, TextDirection


# Pseudo-language for "let the model detect the source"
AUTO_DETECT = "auto"


BUILTIN_LANGUAGES: tuple[LanguageDescriptor, ...] = (
    LanguageDescriptor(code=AUTO_DETECT, name="تشخیص خودکار", english_name="Auto-Detect"),
    LanguageDescriptor(code="fa", name="فارسی", english_name="Persian (Farsi)", dir=TextDirection.RTL),
    LanguageDescriptor(code="en", name="انگلیسی", english_name="English"),
    LanguageDescriptor(code="ar", name="عربی", english_name="Arabic", dir=TextDirection.RTL),
    LanguageDescriptor(code="de", name="آلمانی", english_name="German"),
    LanguageDescriptor(code="fr", name="فرانسوی", english_name="French"),
    LanguageDescriptor(code="es", name="اسپانیایی", english_name="Spanish"),
    LanguageDescriptor(code="ru", name="روسی", english_name="Russian"),
    LanguageDescriptor(code="zh", name="چینی", english_name="Chinese"),
    LanguageDescriptor(code="ja", name="ژاپنی", english_name="Japanese"),
)


# =============================================================================
# Utilities
# =============================================================================


def normalize_language_code(code: str) -> str:
    """Normalize a language code or English name to its short code."""
    code = code.lower().strip()

    # Handle common variants
    variants = {
        "automatic": AUTO_DETECT,
        "detect": AUTO_DETECT,
        "english": "en",
        "persian": "fa",
        "farsi": "fa",
        "arabic": "ar",
        "german": "de",
        "french": "fr",
        "spanish": "es",
        "russian": "ru",
        "chinese": "zh",
        "japanese": "ja",
    }

    return variants.get(code, code)
