"""
Gemini-backed translator.

Turns ``(text, source, target)`` into a ``TranslationResult`` with one
``generateContent`` call. The model is asked to answer with a JSON object;
its output is treated as untrusted and validated before it is returned.

Every failure is terminal for the call: nothing is retried and no partial
result is returned. Each failure raises its own exception type with a short
message, and the details are logged.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from tarjoman.config import get_settings
from tarjoman.core.errors import (
    MalformedResponse,
    NetworkFailure,
    NoCredential,
    RemoteRejected,
    UnparsableResult,
)
from tarjoman.core.models import LanguageDescriptor, TextDirection, TranslationResult
from tarjoman.credentials import CredentialRotator
from tarjoman.i18n.http_errors import get_error_message
from tarjoman.i18n.languages import AUTO_DETECT
from tarjoman.i18n.registry import LanguageRegistry

logger = logging.getLogger(__name__)


# =============================================================================
# Prompt
# =============================================================================


PROMPT_TEMPLATE = """
You are an expert linguist and translator. Translate the text below, keep its tone, and answer in the exact JSON format described.

1. **Source text**: {text}
2. **Source language**: {source_instruction}
3. **Translation**: Translate the text into {target_language}, preserving the original tone and register.
4. **Output format**: Respond with ONE valid JSON object and nothing else, with these keys:
    - "detectedSourceLanguage": the two-letter ISO 639-1 code of the source language.
    - "translatedText": the final translation as a string.
5. **New languages**:
    - IF AND ONLY IF the detected language code is NOT one of the known languages listed above, add a third key "newLanguageInfo".
    - "newLanguageInfo" must be an object with exactly four string keys: "code", "name", "englishName" and "dir" ("ltr" or "rtl"). "name" is the name of the language written in {display_language}.

Example for a known language:
{{
  "detectedSourceLanguage": "fr",
  "translatedText": "..."
}}

Example for a new language:
{{
  "detectedSourceLanguage": "it",
  "translatedText": "...",
  "newLanguageInfo": {{
    "code": "it",
    "name": "...",
    "englishName": "Italian",
    "dir": "ltr"
  }}
}}
"""


def build_prompt(
    text: str,
    source: str,
    target: str,
    languages: list[LanguageDescriptor],
    display_language: str = "Persian",
) -> str:
    """
    Build the translation prompt.

    Args:
        text: Text to translate
        source: Source language code, or "auto" to have the model detect it
        target: Target language code
        languages: Every known language (the auto-detect entry is skipped)
        display_language: Language for the name of a newly discovered language

    Returns:
        Prompt text for the model
    """
    by_code = {lang.code: lang for lang in languages if lang.code != AUTO_DETECT}

    def english_name(code: str) -> str:
        lang = by_code.get(code)
        return (lang.english_name or lang.name) if lang else code

    known = ", ".join(f'"{code}": "{english_name(code)}"' for code in by_code)

    if source == AUTO_DETECT:
        source_instruction = (
            "First, detect the language of the text. "
            f"The languages I already know are: {{{known}}}."
        )
    else:
        source_instruction = (
            f"The source language is {english_name(source)}. "
            f"The languages I already know are: {{{known}}}."
        )

    return PROMPT_TEMPLATE.format(
        text=json.dumps(text, ensure_ascii=False),
        source_instruction=source_instruction,
        target_language=english_name(target),
        display_language=display_language,
    )


# =============================================================================
# Response parsing
# =============================================================================


_FENCE_START = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```\s*$")

_REQUIRED_LANGUAGE_KEYS = ("code", "name", "englishName", "dir")


def strip_code_fence(raw: str) -> str:
    """Remove a Markdown code fence wrapped around the model output."""
    return _FENCE_END.sub("", _FENCE_START.sub("", raw))


def extract_model_text(envelope: Any) -> str | None:
    """Pull ``candidates[0].content.parts[0].text`` out of the response."""
    try:
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text else None


def parse_model_output(raw: str) -> TranslationResult:
    """
    Parse and validate the model's JSON answer.

    Raises:
        UnparsableResult: The text is not JSON once the fence is removed
        MalformedResponse: The JSON does not have the expected shape
    """
    try:
        data = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {raw!r}")
        raise UnparsableResult(
            "The translation service did not answer in the expected format.",
            raw=raw,
        ) from e

    if not isinstance(data, dict):
        logger.error(f"Expected a JSON object from the model, got: {raw!r}")
        raise MalformedResponse("The translation service returned an unexpected answer.", raw=raw)

    for key in ("detectedSourceLanguage", "translatedText"):
        if not isinstance(data.get(key), str):
            logger.error(f"Model output is missing '{key}': {raw!r}")
            raise MalformedResponse(
                "The translation service returned an incomplete answer.", raw=raw
            )

    info = data.get("newLanguageInfo")
    if info is not None:
        valid = (
            isinstance(info, dict)
            and all(isinstance(info.get(k), str) for k in _REQUIRED_LANGUAGE_KEYS)
            and info["dir"] in {d.value for d in TextDirection}
            and info["code"].strip() == data["detectedSourceLanguage"].strip()
        )
        if not valid:
            logger.error(f"Model returned malformed newLanguageInfo: {info!r}")
            raise MalformedResponse(
                "The translation service returned invalid language details.", raw=raw
            )

    try:
        return TranslationResult.model_validate(data)
    except ValidationError as e:
        logger.error(f"Model output failed validation: {e}")
        raise MalformedResponse(
            "The translation service returned an incomplete answer.", raw=raw
        ) from e


# =============================================================================
# Translator
# =============================================================================


class Translator:
    """
    Translation gateway to the Gemini ``generateContent`` endpoint.

    Usage:
        translator = Translator(rotator, registry)

        result = await translator.translate("Bonjour", source="auto", target="fa")
        result.detected_source_language  # "fr"
        result.translated_text

    The caller is responsible for registering ``result.new_language_info``.
    """

    def __init__(
        self,
        rotator: CredentialRotator,
        registry: LanguageRegistry,
        endpoint: str | None = None,
        error_messages: Callable[[int], str] = get_error_message,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
        display_language: str | None = None,
    ):
        settings = get_settings()
        self.rotator = rotator
        self.registry = registry
        self.endpoint = endpoint or settings.generate_content_url
        self.error_messages = error_messages
        self.transport = transport
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.display_language = display_language or settings.display_language

    async def build_prompt(self, text: str, source: str, target: str) -> str:
        languages = await self.registry.get_all_languages()
        return build_prompt(text, source, target, languages, self.display_language)

    async def translate(self, text: str, source: str, target: str) -> TranslationResult:
        """
        Translate text.

        Args:
            text: Text to translate
            source: Source language code, or "auto"
            target: Target language code

        Returns:
            The validated model answer

        Raises:
            NoCredential, NetworkFailure, RemoteRejected,
            MalformedResponse, UnparsableResult
        """
        api_key = await self.rotator.next_credential()
        if not api_key:
            raise NoCredential("No API key is configured. Please add one in settings.")

        if not text.strip():
            return TranslationResult(detected_source_language=source, translated_text="")

        prompt = await self.build_prompt(text, source, target)
        envelope = await self._generate(prompt, api_key)

        model_text = extract_model_text(envelope)
        if model_text is None:
            logger.error(f"Invalid response structure from API: {envelope!r}")
            raise MalformedResponse(
                "No usable answer was received from the translation service.",
                envelope=envelope,
            )

        return parse_model_output(model_text)

    async def _generate(self, prompt: str, api_key: str) -> Any:
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": api_key},
                    json=payload,
                )
        except httpx.RequestError as e:
            logger.error(f"Could not reach translation service: {e!r}")
            raise NetworkFailure(
                "Could not reach the translation service. Check your connection.",
                error=repr(e),
            ) from e

        if not response.is_success:
            status = response.status_code
            detail = _error_detail(response)
            logger.error(f"API Error: Status {status} | Details: {detail}")
            raise RemoteRejected(self.error_messages(status), status_code=status, detail=detail)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Response body is not JSON: {response.text!r}")
            raise MalformedResponse(
                "No usable answer was received from the translation service."
            ) from e


def _error_detail(response: httpx.Response) -> str:
    """Best-effort read of ``error.message`` from an error body."""
    fallback = "No specific details could be read from the API response."
    try:
        message = response.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        return fallback
    return message or fallback
