"""Shared helpers for the ``google-genai`` SDK."""

from __future__ import annotations

from typing import Any, Iterator, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors

from dictionary_factory.errors import ProviderError, provider_error_for_status


def create_gemini_client(api_key: str) -> genai.Client:
    """Return a :class:`genai.Client` bound to ``api_key``."""

    return genai.Client(api_key=api_key)


def status_code_of(exc: BaseException) -> Optional[int]:
    """Best-effort extraction of an HTTP status from SDK or HTTP exceptions."""

    for attr in ("code", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int):
        return value
    return None


def translate_api_error(exc: genai_errors.APIError, *, label: str) -> ProviderError:
    """Map an SDK :class:`APIError` onto the pipeline's provider errors."""

    status = status_code_of(exc)
    detail = getattr(exc, "message", None) or str(exc)
    return provider_error_for_status(status, f"{label} failed ({status}): {detail}")


# Raised by the SDK transport below the APIError layer.
TRANSPORT_ERRORS = (httpx.HTTPError, OSError)


def translate_transport_error(exc: BaseException, *, label: str) -> ProviderError:
    """Wrap a connection or protocol failure that never produced an HTTP status."""

    return ProviderError(f"{label} failed: {type(exc).__name__}: {exc}")


def iter_response_parts(response: Any) -> Iterator[Any]:
    """Yield content parts from every candidate of a ``generate_content`` response."""

    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            yield part


def first_inline_data(response: Any) -> Optional[bytes]:
    """Return the first inline binary payload of ``response`` if any."""

    for part in iter_response_parts(response):
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            return inline.data
    return None


__all__ = [
    "TRANSPORT_ERRORS",
    "create_gemini_client",
    "first_inline_data",
    "iter_response_parts",
    "status_code_of",
    "translate_api_error",
    "translate_transport_error",
]
