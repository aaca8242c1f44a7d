from __future__ import annotations

import io
import wave
from types import SimpleNamespace
from typing import Any, Dict, List

import httpx
import pytest
import requests

from dictionary_factory.audio.backends import (
    ElevenLabsTTSBackend,
    GeminiTTSBackend,
    TTSBackendError,
    create_backend,
    pcm_to_wav,
    resolve_backend_name,
)
from dictionary_factory.audio.synthesizer import AudioSynthesizer
from dictionary_factory.audio.voices import VoiceRole, VoiceRoleConfig
from dictionary_factory.errors import AudioGenerationError

pytestmark = pytest.mark.audio


def test_pcm_is_wrapped_in_a_24khz_mono_wav():
    pcm = b"\x00\x01" * 2400

    data = pcm_to_wav(pcm)

    assert data[:4] == b"RIFF"
    assert data[8:12] == b"WAVE"
    with wave.open(io.BytesIO(data)) as wav:
        assert wav.getframerate() == 24000
        assert wav.getnchannels() == 1
        assert wav.getsampwidth() == 2
        assert wav.getnframes() == 2400


def _speech_response(data: bytes) -> SimpleNamespace:
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type="audio/L16"))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def test_gemini_backend_requests_voice_and_returns_wav():
    calls: List[Dict[str, Any]] = []

    def _generate(**kwargs):
        calls.append(kwargs)
        return _speech_response(b"\x00\x00" * 100)

    backend = GeminiTTSBackend(
        SimpleNamespace(models=SimpleNamespace(generate_content=_generate)),
        models=("tts-model",),
        timeout_seconds=None,
    )

    result = backend.synthesize(text="het huis", voice="Kore", lang_code="nl")

    assert result.mime_type == "audio/wav"
    assert result.extension == "wav"
    assert result.model == "tts-model"
    assert result.audio_bytes[:4] == b"RIFF"
    config = calls[0]["config"]
    assert config.response_modalities == ["AUDIO"]
    assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"
    assert "native Dutch speaker" in config.system_instruction


def test_gemini_backend_without_audio_raises_transient_error():
    backend = GeminiTTSBackend(
        SimpleNamespace(models=SimpleNamespace(generate_content=lambda **kwargs: _speech_response(b""))),
        timeout_seconds=None,
    )

    with pytest.raises(TTSBackendError) as excinfo:
        backend.synthesize(text="het huis", voice="Puck", lang_code="nl")

    assert excinfo.value.is_transient


def test_gemini_backend_wraps_transport_errors_as_transient():
    def _generate(**kwargs):
        raise httpx.ConnectError("connection reset")

    backend = GeminiTTSBackend(
        SimpleNamespace(models=SimpleNamespace(generate_content=_generate)),
        timeout_seconds=None,
    )

    with pytest.raises(TTSBackendError) as excinfo:
        backend.synthesize(text="het huis", voice="Puck", lang_code="nl")

    assert excinfo.value.status_code is None
    assert excinfo.value.is_transient


def test_gemini_backend_rejects_odd_length_pcm():
    backend = GeminiTTSBackend(
        SimpleNamespace(
            models=SimpleNamespace(generate_content=lambda **kwargs: _speech_response(b"\x00\x00\x01"))
        ),
        timeout_seconds=None,
    )

    with pytest.raises(TTSBackendError) as excinfo:
        backend.synthesize(text="het huis", voice="Puck", lang_code="nl")

    assert not excinfo.value.is_transient
    assert "malformed PCM" in str(excinfo.value)


def test_synthesizer_retries_gemini_network_failures():
    calls = []
    sleeps: List[float] = []

    def _generate(**kwargs):
        calls.append(kwargs["model"])
        raise httpx.ConnectError("connection reset")

    backend = GeminiTTSBackend(
        SimpleNamespace(models=SimpleNamespace(generate_content=_generate)),
        models=("tts-model",),
        timeout_seconds=None,
    )
    synthesizer = AudioSynthesizer(backend, max_attempts=2, backoff_seconds=1.5, sleeper=sleeps.append)

    with pytest.raises(AudioGenerationError, match="gemini TTS failed"):
        synthesizer.synthesize("het huis", VoiceRole.WORD)

    assert calls == ["tts-model", "tts-model"]
    assert sleeps == [1.5]


class _DummyResponse:
    def __init__(self, status_code: int, content: bytes = b"", text: str = "") -> None:
        self.status_code = status_code
        self.content = content
        self.text = text


class _DummySession:
    def __init__(self, response: Any) -> None:
        self.response = response
        self.requests: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> Any:
        self.requests.append({"url": url, **kwargs})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def test_elevenlabs_backend_posts_voice_and_model():
    session = _DummySession(_DummyResponse(200, content=b"ID3mp3"))
    backend = ElevenLabsTTSBackend(
        "xi-key",
        base_url="https://tts.test/v1/text-to-speech/",
        models=("eleven_multilingual_v2",),
        session=session,
    )

    result = backend.synthesize(text="het huis", voice="voice-123", lang_code="nl")

    assert result.audio_bytes == b"ID3mp3"
    assert result.mime_type == "audio/mpeg"
    sent = session.requests[0]
    assert sent["url"] == "https://tts.test/v1/text-to-speech/voice-123"
    assert sent["headers"]["xi-api-key"] == "xi-key"
    assert sent["params"] == {"output_format": "mp3_44100_128"}
    assert sent["json"]["model_id"] == "eleven_multilingual_v2"
    assert sent["json"]["voice_settings"] == {"stability": 0.5, "similarity_boost": 0.75}



def test_elevenlabs_speaks_each_role_with_its_own_voice():
    session = _DummySession(_DummyResponse(200, content=b"ID3mp3"))
    backend = ElevenLabsTTSBackend("xi-key", models=("eleven_multilingual_v2",), session=session)
    synthesizer = AudioSynthesizer(
        backend,
        voices=VoiceRoleConfig.with_default("fallback", word="W", example_1="E1", example_2="E2"),
    )

    for role in (VoiceRole.WORD, VoiceRole.EXAMPLE_1, VoiceRole.EXAMPLE_2, VoiceRole.USAGE_NOTE):
        synthesizer.synthesize(f"text for {role.value}", role)

    assert [sent["url"].rsplit("/", 1)[-1] for sent in session.requests] == [
        "W",
        "E1",
        "E2",
        "fallback",
    ]


@pytest.mark.parametrize(
    "status, quota, not_found, transient",
    [(429, True, False, False), (404, False, True, False), (502, False, False, True)],
)
def test_elevenlabs_status_classification(status, quota, not_found, transient):
    backend = ElevenLabsTTSBackend("xi-key", session=_DummySession(_DummyResponse(status, text="err")))

    with pytest.raises(TTSBackendError) as excinfo:
        backend.synthesize(text="fiets", voice="v", lang_code="nl")

    assert excinfo.value.status_code == status
    assert excinfo.value.is_quota is quota
    assert excinfo.value.is_not_found is not_found
    assert excinfo.value.is_transient is transient


def test_elevenlabs_network_error_has_no_status():
    backend = ElevenLabsTTSBackend(
        "xi-key", session=_DummySession(requests.ConnectionError("reset"))
    )

    with pytest.raises(TTSBackendError) as excinfo:
        backend.synthesize(text="fiets", voice="v", lang_code="nl")

    assert excinfo.value.status_code is None


def test_elevenlabs_requires_api_key():
    with pytest.raises(ValueError):
        ElevenLabsTTSBackend("")


def test_backend_registry_resolves_aliases():
    assert resolve_backend_name(None) == "gemini"
    assert resolve_backend_name("Eleven_Labs") == "elevenlabs"
    backend = create_backend("eleven", "xi-key", session=_DummySession(None))
    assert isinstance(backend, ElevenLabsTTSBackend)
    with pytest.raises(KeyError):
        create_backend("espeak")
