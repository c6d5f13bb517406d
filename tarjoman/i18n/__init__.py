"""
Internationalization - languages and LLM-powered translation.

Design:
1. A fixed built-in catalog, merged with languages discovered at runtime
2. The merged catalog is cached and rebuilt after every new language
3. One model call per translation, answered as validated JSON

Usage:
    from tarjoman.i18n import LanguageRegistry, Translator

    registry = LanguageRegistry(store)
    translator = Translator(CredentialRotator(store), registry)

    result = await translator.translate("Hola", source="auto", target="fa")
    if result.new_language_info:
        await registry.register_language(result.new_language_info)
"""

from tarjoman.i18n.languages import (
    AUTO_DETECT,
    BUILTIN_LANGUAGES,
    normalize_language_code,
)
from tarjoman.i18n.registry import LanguageRegistry, RegistryState
from tarjoman.i18n.http_errors import get_error_message
from tarjoman.i18n.translator import (
    Translator,
    build_prompt,
    parse_model_output,
    strip_code_fence,
)

__all__ = [
    # Languages
    "AUTO_DETECT",
    "BUILTIN_LANGUAGES",
    "normalize_language_code",
    # Registry
    "LanguageRegistry",
    "RegistryState",
    # Translation
    "Translator",
    "build_prompt",
    "parse_model_output",
    "strip_code_fence",
    "get_error_message",
]
