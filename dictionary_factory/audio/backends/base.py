"""Base interfaces for text-to-speech backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from dictionary_factory.errors import ProviderError


class TTSBackendError(ProviderError):
    """Raised when a backend fails to synthesize audio.

    ``status_code`` is the provider HTTP status when one was returned;
    ``None`` means a network failure or a timeout. Pass ``transient`` to
    override the status-based classification.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        transient: Optional[bool] = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self._transient = transient

    @property
    def is_quota(self) -> bool:
        return self.status_code == 429

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_transient(self) -> bool:
        if self._transient is not None:
            return self._transient
        if self.status_code is None:
            return True
        return self.status_code >= 500 or self.status_code == 408


@dataclass(slots=True)
class SynthesisResult:
    """Encoded audio ready for upload."""

    audio_bytes: bytes
    mime_type: str
    extension: str
    model: Optional[str] = None


class BaseTTSBackend(ABC):
    """Abstract base class for concrete TTS backends.

    Implementations surface every operational failure as
    :class:`TTSBackendError` so the synthesizer can apply one retry and model
    fallback policy regardless of the provider.
    """

    name: str = "base"
    mime_type: str = "application/octet-stream"
    extension: str = "bin"

    def __init__(
        self,
        *,
        models: Sequence[str] = (),
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.models = tuple(models)
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    def synthesize(
        self,
        *,
        text: str,
        voice: str,
        lang_code: str,
        model: Optional[str] = None,
    ) -> SynthesisResult:
        """Generate speech audio for ``text`` using ``model``."""


__all__ = ["BaseTTSBackend", "SynthesisResult", "TTSBackendError"]
