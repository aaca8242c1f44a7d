"""Generate structured dictionary entries through an ordered provider chain."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from pydantic import ValidationError

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.errors import (
    EntryParseError,
    GenerationError,
    ProviderError,
    TermRejectedError,
)
from dictionary_factory.languages import language_name, normalize_language_code
from dictionary_factory.llm_json import parse_json_payload

from .models import DictionaryEntry
from .prompts import INVALID_TERM_SENTINEL, make_entry_prompt
from .providers import TextProvider

logger = log_mgr.get_logger().getChild("text.generator")


def parse_entry(text: str, *, term: str, target_language: str) -> DictionaryEntry:
    """Parse raw model output into a :class:`DictionaryEntry`.

    Raises :class:`TermRejectedError` when the provider returned the
    invalid-term sentinel and :class:`EntryParseError` for anything that does
    not match the entry contract.
    """

    payload: Any = parse_json_payload(text)
    if not isinstance(payload, dict):
        raise EntryParseError(f"Response for '{term}' is not a JSON object")

    definition = payload.get("definition")
    if isinstance(definition, str) and definition.strip().upper() == INVALID_TERM_SENTINEL:
        raise TermRejectedError(term, language_name(target_language))

    try:
        return DictionaryEntry.model_validate(payload)
    except ValidationError as exc:
        raise EntryParseError(
            f"Response for '{term}' does not match the entry contract: "
            f"{exc.error_count()} validation error(s)"
        ) from exc


class TextContentGenerator:
    """Fetch a dictionary entry from the first provider that answers usefully.

    Each provider is tried at most once per call. Provider and parse failures
    move on to the next provider; a sentinel rejection ends the chain.
    """

    def __init__(self, providers: Sequence[TextProvider]) -> None:
        if not providers:
            raise ValueError("At least one text provider is required")
        self.providers = list(providers)

    def generate(
        self, term: str, source_language: str, target_language: str
    ) -> DictionaryEntry:
        source = normalize_language_code(source_language)
        target = normalize_language_code(target_language)
        prompt = make_entry_prompt(term, source, target)

        attempted: set[str] = set()
        last_error: Optional[GenerationError] = None
        for provider in self.providers:
            if provider.name in attempted:
                continue
            attempted.add(provider.name)
            try:
                raw_text = provider.complete(prompt)
                return parse_entry(raw_text, term=term, target_language=target)
            except (ProviderError, EntryParseError) as exc:
                last_error = exc
                logger.warning(
                    "Text provider %s failed for '%s': %s",
                    provider.name,
                    term,
                    exc,
                    extra={
                        "event": "text.provider.failed",
                        "provider": provider.name,
                        "console_suppress": True,
                    },
                )
                continue

        if last_error is None:
            raise GenerationError(f"No text provider available for '{term}'")
        raise last_error


__all__ = ["TextContentGenerator", "parse_entry"]
