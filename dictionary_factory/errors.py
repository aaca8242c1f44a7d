"""Exception hierarchy for the dictionary enrichment pipeline."""

from __future__ import annotations

from typing import Optional, Sequence


class DictionaryFactoryError(RuntimeError):
    """Base class for pipeline errors."""


class MissingCredentialsError(DictionaryFactoryError):
    """Raised before a batch starts when selected tasks lack credentials."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        super().__init__("Missing credentials: " + ", ".join(self.missing))


class GenerationError(DictionaryFactoryError):
    """Base class for failures while generating content for a term."""


class TermRejectedError(GenerationError):
    """The provider flagged the input as not belonging to the target language."""

    def __init__(self, term: str, language: str) -> None:
        self.term = term
        self.language = language
        super().__init__(f"'{term}' was rejected as not a valid {language} word")


class EntryParseError(GenerationError):
    """The provider answered but the payload did not match the entry contract."""


class ProviderError(GenerationError):
    """A remote provider failed; ``status_code`` carries the HTTP status when known."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ProviderTimeoutError(ProviderError):
    """A provider call exceeded its deadline."""


class QuotaExceededError(ProviderError):
    """The provider reported rate limiting or quota exhaustion (429)."""


class PermissionDeniedError(ProviderError):
    """The provider rejected the credentials (401/403)."""


class ModelNotFoundError(ProviderError):
    """The requested model does not exist for this account (404)."""


class ImageGenerationError(GenerationError):
    """Image generation failed; ``category`` is one of the stable categories."""

    def __init__(self, category: str, message: str) -> None:
        self.category = category
        super().__init__(message)


class AudioGenerationError(GenerationError):
    """Speech synthesis failed after retries and model fallbacks."""


class StorageError(DictionaryFactoryError):
    """Uploading an asset or writing a row failed."""


def provider_error_for_status(
    status_code: Optional[int], message: str
) -> ProviderError:
    """Return the most specific :class:`ProviderError` for ``status_code``."""

    if status_code == 429:
        return QuotaExceededError(message, status_code=status_code)
    if status_code in (401, 403):
        return PermissionDeniedError(message, status_code=status_code)
    if status_code == 404:
        return ModelNotFoundError(message, status_code=status_code)
    return ProviderError(message, status_code=status_code)


__all__ = [
    "AudioGenerationError",
    "DictionaryFactoryError",
    "EntryParseError",
    "GenerationError",
    "ImageGenerationError",
    "MissingCredentialsError",
    "ModelNotFoundError",
    "PermissionDeniedError",
    "ProviderError",
    "ProviderTimeoutError",
    "QuotaExceededError",
    "StorageError",
    "TermRejectedError",
    "provider_error_for_status",
]
