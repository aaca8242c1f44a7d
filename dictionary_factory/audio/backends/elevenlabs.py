"""ElevenLabs text-to-speech backend returning MP3 audio."""

from __future__ import annotations

from typing import Optional, Sequence

import requests

from dictionary_factory.config_manager.constants import (
    DEFAULT_ELEVENLABS_MODELS,
    DEFAULT_ELEVENLABS_URL,
)

from .base import BaseTTSBackend, SynthesisResult, TTSBackendError

OUTPUT_FORMAT = "mp3_44100_128"
VOICE_SETTINGS = {"stability": 0.5, "similarity_boost": 0.75}


class ElevenLabsTTSBackend(BaseTTSBackend):
    """Call the ElevenLabs ``text-to-speech/{voice}`` endpoint."""

    name = "elevenlabs"
    mime_type = "audio/mpeg"
    extension = "mp3"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_ELEVENLABS_URL,
        models: Sequence[str] = DEFAULT_ELEVENLABS_MODELS,
        timeout_seconds: Optional[float] = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(models=models, timeout_seconds=timeout_seconds)
        if not api_key:
            raise ValueError("ElevenLabs API key cannot be empty")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()

    def synthesize(
        self,
        *,
        text: str,
        voice: str,
        lang_code: str,
        model: Optional[str] = None,
    ) -> SynthesisResult:
        model_id = model or self.models[0]
        url = f"{self._base_url}/{voice}"
        headers = {
            "xi-api-key": self._api_key,
            "Accept": self.mime_type,
            "Content-Type": "application/json",
        }
        payload = {
            "text": text,
            "model_id": model_id,
            "voice_settings": dict(VOICE_SETTINGS),
        }
        try:
            response = self._session.post(
                url,
                params={"output_format": OUTPUT_FORMAT},
                headers=headers,
                json=payload,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TTSBackendError(f"ElevenLabs request failed: {exc}") from exc

        if response.status_code != 200:
            detail = (response.text or "")[:200]
            raise TTSBackendError(
                f"ElevenLabs request failed ({response.status_code}): {detail}",
                status_code=response.status_code,
            )
        if not response.content:
            raise TTSBackendError("ElevenLabs returned an empty audio body")
        return SynthesisResult(
            audio_bytes=response.content,
            mime_type=self.mime_type,
            extension=self.extension,
            model=model_id,
        )


__all__ = ["ElevenLabsTTSBackend"]
