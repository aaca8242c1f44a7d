"""Language code helpers shared by the generators."""

from __future__ import annotations

from typing import Mapping

DEFAULT_LANGUAGE_CODE = "en"

LANGUAGE_NAMES: Mapping[str, str] = {
    "en": "English",
    "zh": "Chinese",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "ja": "Japanese",
    "ko": "Korean",
    "pt": "Portuguese",
    "ru": "Russian",
    "ar": "Arabic",
    "nl": "Dutch",
    "uk": "Ukrainian",
    "pl": "Polish",
}


def normalize_language_code(code: str | None) -> str:
    """Return a supported language code, mapping unknown values to English."""

    if not code:
        return DEFAULT_LANGUAGE_CODE
    candidate = code.strip().lower().replace("_", "-").split("-", 1)[0]
    if candidate in LANGUAGE_NAMES:
        return candidate
    return DEFAULT_LANGUAGE_CODE


def language_name(code: str | None) -> str:
    """Return the English display name for ``code``."""

    return LANGUAGE_NAMES[normalize_language_code(code)]


__all__ = [
    "DEFAULT_LANGUAGE_CODE",
    "LANGUAGE_NAMES",
    "language_name",
    "normalize_language_code",
]
