from __future__ import annotations

from typing import List

import pytest

from dictionary_factory.audio.backends.base import TTSBackendError
from dictionary_factory.audio.cache import AudioCache
from dictionary_factory.audio.synthesizer import AudioSynthesizer
from dictionary_factory.audio.voices import VoiceRole, VoiceRoleConfig
from dictionary_factory.errors import AudioGenerationError

pytestmark = pytest.mark.audio


def _synthesizer(backend, *, sleeps: List[float] | None = None, cache=None, max_attempts=2):
    return AudioSynthesizer(
        backend,
        voices=VoiceRoleConfig(word="Puck", example_1="Kore", example_2="Charon"),
        default_language="nl",
        cache=cache,
        max_attempts=max_attempts,
        backoff_seconds=1.5,
        sleeper=(sleeps.append if sleeps is not None else (lambda _seconds: None)),
    )


def test_voice_role_selects_configured_voice(tts_backend_factory):
    backend = tts_backend_factory()
    synthesizer = _synthesizer(backend)

    synthesizer.synthesize("het huis", VoiceRole.WORD)
    synthesizer.synthesize("Het huis is groot.", VoiceRole.EXAMPLE_1)
    synthesizer.synthesize("Wij kopen een huis.", "example_2")

    assert [call.voice for call in backend.calls] == ["Puck", "Kore", "Charon"]
    assert {call.lang_code for call in backend.calls} == {"nl"}


def test_transient_failure_is_retried_with_backoff(tts_backend_factory):
    backend = tts_backend_factory(statuses=[503])
    sleeps: List[float] = []
    synthesizer = _synthesizer(backend, sleeps=sleeps)

    result = synthesizer.synthesize("het huis", VoiceRole.WORD)

    assert result.audio_bytes.startswith(b"RIFF")
    assert len(backend.calls) == 2
    assert sleeps == [1.5]


def test_network_failure_counts_as_transient(tts_backend_factory):
    backend = tts_backend_factory(models=("only",))
    original = backend.synthesize
    failures = [TTSBackendError("connection reset")]

    def _flaky(**kwargs):
        if failures:
            raise failures.pop()
        return original(**kwargs)

    backend.synthesize = _flaky
    synthesizer = _synthesizer(backend, max_attempts=2)

    assert synthesizer.synthesize("fiets", VoiceRole.WORD).model == "only"
    assert failures == []


def test_retries_stop_at_max_attempts(tts_backend_factory):
    backend = tts_backend_factory(statuses=[500, 500, 500], models=("only",))
    synthesizer = _synthesizer(backend, max_attempts=2)

    with pytest.raises(AudioGenerationError):
        synthesizer.synthesize("het huis", VoiceRole.WORD)

    assert len(backend.calls) == 2


def test_quota_fails_immediately_without_retry(tts_backend_factory):
    backend = tts_backend_factory(statuses=[429], models=("first", "second"))
    sleeps: List[float] = []
    synthesizer = _synthesizer(backend, sleeps=sleeps)

    with pytest.raises(AudioGenerationError, match="Quota Exceeded"):
        synthesizer.synthesize("het huis", VoiceRole.WORD)

    assert len(backend.calls) == 1
    assert sleeps == []


def test_missing_model_falls_back_to_next_model(tts_backend_factory):
    backend = tts_backend_factory(statuses=[404], models=("retired", "current"))
    synthesizer = _synthesizer(backend)

    result = synthesizer.synthesize("het huis", VoiceRole.WORD)

    assert [call.model for call in backend.calls] == ["retired", "current"]
    assert result.model == "current"


def test_every_model_missing_raises(tts_backend_factory):
    backend = tts_backend_factory(statuses=[404, 404], models=("a", "b"))
    synthesizer = _synthesizer(backend)

    with pytest.raises(AudioGenerationError, match="No available dummy TTS model"):
        synthesizer.synthesize("het huis", VoiceRole.WORD)


def test_cache_deduplicates_identical_requests(tts_backend_factory):
    backend = tts_backend_factory()
    cache = AudioCache()
    synthesizer = _synthesizer(backend, cache=cache)

    first = synthesizer.synthesize("Het huis is groot.", VoiceRole.EXAMPLE_1)
    second = synthesizer.synthesize("Het huis is groot. ", VoiceRole.EXAMPLE_1)
    synthesizer.synthesize("Het huis is groot.", VoiceRole.EXAMPLE_1, language="de")

    assert first is second
    assert len(backend.calls) == 2
    assert cache.hits == 1
    assert len(cache) == 2


def test_empty_text_is_rejected(tts_backend_factory):
    synthesizer = _synthesizer(tts_backend_factory())

    with pytest.raises(AudioGenerationError):
        synthesizer.synthesize("   ", VoiceRole.WORD)


def test_voice_role_for_example_index():
    assert VoiceRole.for_example(0) is VoiceRole.EXAMPLE_1
    assert VoiceRole.for_example(1) is VoiceRole.EXAMPLE_2
    with pytest.raises(ValueError):
        VoiceRole.for_example(2)
