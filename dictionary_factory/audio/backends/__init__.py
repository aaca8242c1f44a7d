"""Registry and helpers for TTS backends."""

from __future__ import annotations

from typing import Any, MutableMapping, Type

from .base import BaseTTSBackend, SynthesisResult, TTSBackendError
from .elevenlabs import ElevenLabsTTSBackend
from .gemini import GeminiTTSBackend, pcm_to_wav

_BACKENDS: MutableMapping[str, Type[BaseTTSBackend]] = {
    GeminiTTSBackend.name: GeminiTTSBackend,
    ElevenLabsTTSBackend.name: ElevenLabsTTSBackend,
}

_BACKEND_ALIASES = {
    "google": GeminiTTSBackend.name,
    "gemini_tts": GeminiTTSBackend.name,
    "eleven": ElevenLabsTTSBackend.name,
    "eleven_labs": ElevenLabsTTSBackend.name,
}

DEFAULT_BACKEND_NAME = GeminiTTSBackend.name


def register_backend(name: str, backend_cls: Type[BaseTTSBackend]) -> None:
    """Register ``backend_cls`` under ``name``."""

    _BACKENDS[name.lower()] = backend_cls


def resolve_backend_name(value: str | None) -> str:
    """Return the canonical registry key for ``value``."""

    if not value or not value.strip():
        return DEFAULT_BACKEND_NAME
    normalized = value.strip().lower()
    return _BACKEND_ALIASES.get(normalized, normalized)


def create_backend(name: str, *args: Any, **kwargs: Any) -> BaseTTSBackend:
    """Instantiate the backend registered as ``name``."""

    key = resolve_backend_name(name)
    backend_cls = _BACKENDS.get(key)
    if backend_cls is None:
        raise KeyError(f"Unknown TTS backend: {name}")
    return backend_cls(*args, **kwargs)


__all__ = [
    "BaseTTSBackend",
    "DEFAULT_BACKEND_NAME",
    "ElevenLabsTTSBackend",
    "GeminiTTSBackend",
    "SynthesisResult",
    "TTSBackendError",
    "create_backend",
    "pcm_to_wav",
    "register_backend",
    "resolve_backend_name",
]
