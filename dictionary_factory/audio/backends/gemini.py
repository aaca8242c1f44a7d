"""Gemini speech generation backend returning WAV audio."""

from __future__ import annotations

import io
from typing import Any, Optional, Sequence

from google.genai import errors as genai_errors
from google.genai import types
from pydub import AudioSegment

from dictionary_factory.config_manager.constants import DEFAULT_GEMINI_TTS_MODELS
from dictionary_factory.errors import ProviderTimeoutError
from dictionary_factory.gemini_client import (
    TRANSPORT_ERRORS,
    first_inline_data,
    status_code_of,
)
from dictionary_factory.guards import call_with_timeout
from dictionary_factory.languages import language_name

from .base import BaseTTSBackend, SynthesisResult, TTSBackendError

PCM_SAMPLE_RATE = 24000
PCM_SAMPLE_WIDTH = 2
PCM_CHANNELS = 1


def pcm_to_wav(pcm: bytes) -> bytes:
    """Wrap raw 24 kHz mono 16-bit PCM in a WAV container."""

    segment = AudioSegment(
        data=pcm,
        sample_width=PCM_SAMPLE_WIDTH,
        frame_rate=PCM_SAMPLE_RATE,
        channels=PCM_CHANNELS,
    )
    buffer = io.BytesIO()
    segment.export(buffer, format="wav")
    return buffer.getvalue()


def speaker_instruction(lang_code: str) -> str:
    name = language_name(lang_code)
    return (
        f"You are a native {name} speaker. Read the text aloud clearly and naturally "
        f"with authentic {name} pronunciation and vowels. Do not add any words."
    )


class GeminiTTSBackend(BaseTTSBackend):
    """Synthesize speech through a Gemini TTS model."""

    name = "gemini"
    mime_type = "audio/wav"
    extension = "wav"

    def __init__(
        self,
        client: Any,
        *,
        models: Sequence[str] = DEFAULT_GEMINI_TTS_MODELS,
        timeout_seconds: Optional[float] = 30.0,
    ) -> None:
        super().__init__(models=models, timeout_seconds=timeout_seconds)
        self._client = client

    def _request(self, text: str, voice: str, lang_code: str, model: str) -> Any:
        return self._client.models.generate_content(
            model=model,
            contents=text,
            config=types.GenerateContentConfig(
                system_instruction=speaker_instruction(lang_code),
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice)
                    )
                ),
            ),
        )

    def synthesize(
        self,
        *,
        text: str,
        voice: str,
        lang_code: str,
        model: Optional[str] = None,
    ) -> SynthesisResult:
        model_name = model or self.models[0]
        try:
            response = call_with_timeout(
                lambda: self._request(text, voice, lang_code, model_name),
                self.timeout_seconds,
                label=f"Gemini TTS ({model_name})",
            )
        except ProviderTimeoutError as exc:
            raise TTSBackendError(str(exc)) from exc
        except genai_errors.APIError as exc:
            status = status_code_of(exc)
            raise TTSBackendError(
                f"Gemini TTS ({model_name}) failed ({status}): {getattr(exc, 'message', exc)}",
                status_code=status,
            ) from exc
        except TRANSPORT_ERRORS as exc:
            raise TTSBackendError(
                f"Gemini TTS ({model_name}) network error: {type(exc).__name__}: {exc}"
            ) from exc

        pcm = first_inline_data(response)
        if not pcm:
            raise TTSBackendError(f"Gemini TTS ({model_name}) returned no audio data")
        try:
            wav = pcm_to_wav(pcm)
        except ValueError as exc:
            raise TTSBackendError(
                f"Gemini TTS ({model_name}) returned malformed PCM: {exc}", transient=False
            ) from exc
        return SynthesisResult(
            audio_bytes=wav,
            mime_type=self.mime_type,
            extension=self.extension,
            model=model_name,
        )


__all__ = ["GeminiTTSBackend", "pcm_to_wav"]
