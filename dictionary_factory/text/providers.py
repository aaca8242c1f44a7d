"""Text providers able to answer a dictionary entry prompt with JSON."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from google.genai import errors as genai_errors
from google.genai import types

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.errors import ProviderError, provider_error_for_status
from dictionary_factory.gemini_client import (
    TRANSPORT_ERRORS,
    translate_api_error,
    translate_transport_error,
)
from dictionary_factory.guards import call_with_timeout
from dictionary_factory.llm_client import LLMClient

from .models import DictionaryEntry
from .prompts import make_chat_payload

logger = log_mgr.get_logger().getChild("text.providers")

_SYSTEM_PROMPT = "You write precise learner's dictionary entries and answer only with JSON."


class TextProvider(ABC):
    """A single backend in the ordered text provider chain."""

    name: str = "base"

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Return the raw model text for ``prompt`` or raise :class:`ProviderError`."""


class GeminiTextProvider(TextProvider):
    """Primary provider backed by ``google-genai`` with a typed response schema."""

    name = "gemini"

    def __init__(
        self,
        client: Any,
        *,
        model: str,
        timeout_seconds: Optional[float] = 20.0,
    ) -> None:
        self._client = client
        self.model = model
        self.timeout_seconds = timeout_seconds

    def _request(self, prompt: str) -> Any:
        return self._client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=_SYSTEM_PROMPT,
                response_mime_type="application/json",
                response_schema=DictionaryEntry,
            ),
        )

    def complete(self, prompt: str) -> str:
        try:
            response = call_with_timeout(
                lambda: self._request(prompt),
                self.timeout_seconds,
                label=f"Gemini text ({self.model})",
            )
        except genai_errors.APIError as exc:
            raise translate_api_error(exc, label=f"Gemini text ({self.model})") from exc
        except TRANSPORT_ERRORS as exc:
            raise translate_transport_error(exc, label=f"Gemini text ({self.model})") from exc
        text = getattr(response, "text", None) or ""
        if not text.strip():
            raise ProviderError(f"Gemini text ({self.model}) returned an empty response")
        return text


class ChatTextProvider(TextProvider):
    """Alternate provider talking to an OpenAI-compatible chat endpoint."""

    name = "chat"

    def __init__(self, client: LLMClient, *, timeout_seconds: Optional[float] = 20.0) -> None:
        self._client = client
        self.timeout_seconds = timeout_seconds

    def complete(self, prompt: str) -> str:
        payload = make_chat_payload(
            prompt, model=self._client.model, system_prompt=_SYSTEM_PROMPT
        )
        response = call_with_timeout(
            lambda: self._client.send_chat_request(
                payload, max_attempts=1, timeout=self.timeout_seconds
            ),
            self.timeout_seconds,
            label=f"chat text ({self._client.model})",
        )
        if response.error:
            status = response.status_code or None
            raise provider_error_for_status(
                status, f"chat text ({self._client.model}) failed: {response.error}"
            )
        return response.text


__all__ = ["ChatTextProvider", "GeminiTextProvider", "TextProvider"]
