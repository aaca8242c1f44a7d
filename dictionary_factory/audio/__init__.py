"""Pronunciation audio synthesis."""

from .backends import (
    BaseTTSBackend,
    ElevenLabsTTSBackend,
    GeminiTTSBackend,
    SynthesisResult,
    TTSBackendError,
    create_backend,
)
from .cache import AudioCache
from .synthesizer import AudioSynthesizer
from .voices import VoiceRole, VoiceRoleConfig

__all__ = [
    "AudioCache",
    "AudioSynthesizer",
    "BaseTTSBackend",
    "ElevenLabsTTSBackend",
    "GeminiTTSBackend",
    "SynthesisResult",
    "TTSBackendError",
    "VoiceRole",
    "VoiceRoleConfig",
    "create_backend",
]
