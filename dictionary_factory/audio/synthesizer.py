"""Speech synthesis with retries, model fallback and run-scoped caching."""

from __future__ import annotations

import time
from typing import Callable, Optional

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.errors import AudioGenerationError
from dictionary_factory.languages import normalize_language_code

from .backends.base import BaseTTSBackend, SynthesisResult, TTSBackendError
from .cache import AudioCache
from .voices import VoiceRole, VoiceRoleConfig

logger = log_mgr.get_logger().getChild("audio.synthesizer")


class AudioSynthesizer:
    """Turn text into encoded speech through a single TTS backend.

    Transient failures (5xx, network, timeout) are retried with linear
    backoff up to ``max_attempts`` per model. A 429 fails immediately. A 404
    moves to the next model of the backend's fallback list; each model is
    tried at most once.
    """

    def __init__(
        self,
        backend: BaseTTSBackend,
        *,
        voices: Optional[VoiceRoleConfig] = None,
        default_language: str = "nl",
        cache: Optional[AudioCache] = None,
        max_attempts: int = 2,
        backoff_seconds: float = 1.0,
        sleeper: Callable[[float], None] = time.sleep,
    ) -> None:
        self.backend = backend
        self.voices = voices or VoiceRoleConfig()
        self.default_language = normalize_language_code(default_language)
        self.cache = cache
        self.max_attempts = max(1, int(max_attempts))
        self.backoff_seconds = backoff_seconds
        self._sleep = sleeper

    def synthesize(
        self,
        text: str,
        voice_role: VoiceRole | str,
        language: Optional[str] = None,
    ) -> SynthesisResult:
        if not text or not text.strip():
            raise AudioGenerationError("Cannot synthesize empty text")
        role = VoiceRole(voice_role)
        voice = self.voices.voice_for(role)
        lang_code = normalize_language_code(language or self.default_language)

        key = AudioCache.make_key(self.backend.name, voice, lang_code, text)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Audio cache hit for role %s", role.value)
                return cached

        result = self._synthesize_with_fallback(text.strip(), voice, lang_code)
        if self.cache is not None:
            self.cache.put(key, result)
        return result

    def _synthesize_with_fallback(self, text: str, voice: str, lang_code: str) -> SynthesisResult:
        models = list(self.backend.models) or [None]
        attempted: set[Optional[str]] = set()
        last_error: Optional[TTSBackendError] = None

        for model in models:
            if model in attempted:
                continue
            attempted.add(model)
            try:
                return self._synthesize_with_retries(text, voice, lang_code, model)
            except TTSBackendError as exc:
                last_error = exc
                if exc.is_not_found:
                    logger.warning(
                        "TTS model %s not found; trying the next model",
                        model,
                        extra={"event": "audio.model.not_found", "console_suppress": True},
                    )
                    continue
                if exc.is_quota:
                    raise AudioGenerationError(
                        f"Quota Exceeded (429) on {self.backend.name}"
                    ) from exc
                raise AudioGenerationError(
                    f"{self.backend.name} TTS failed: {exc}"
                ) from exc

        raise AudioGenerationError(
            f"No available {self.backend.name} TTS model (tried {len(attempted)})"
        ) from last_error

    def _synthesize_with_retries(
        self, text: str, voice: str, lang_code: str, model: Optional[str]
    ) -> SynthesisResult:
        attempt = 1
        while True:
            try:
                return self.backend.synthesize(
                    text=text, voice=voice, lang_code=lang_code, model=model
                )
            except TTSBackendError as exc:
                if not exc.is_transient or attempt >= self.max_attempts:
                    raise
                logger.info(
                    "Transient TTS failure on attempt %s/%s: %s",
                    attempt,
                    self.max_attempts,
                    exc,
                    extra={"event": "audio.retry", "console_suppress": True},
                )
                self._sleep(self.backoff_seconds * attempt)
                attempt += 1


__all__ = ["AudioSynthesizer"]
