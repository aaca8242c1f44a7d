"""Audio phase: headword, example and usage-note pronunciation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from dictionary_factory.audio.voices import VoiceRole
from dictionary_factory.errors import GenerationError

from ..context import PhaseContext, TermWork


@dataclass
class AudioPhaseResult:
    generated: List[str] = field(default_factory=list)
    kept: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    @property
    def any_success(self) -> bool:
        return bool(self.generated or self.kept)


@dataclass
class _Slot:
    label: str
    role: VoiceRole
    text: str
    language: str
    existing_url: Optional[str]
    build_path: Callable[[str], str]
    persist: Callable[[str], None]


def _plan_slots(work: TermWork, ctx: PhaseContext) -> List[_Slot]:
    tasks = ctx.config.tasks
    services = ctx.services
    repo = services.repository
    word = work.word
    if word is None:
        return []
    source = ctx.config.language_code
    target = ctx.config.target_code
    slots: List[_Slot] = []

    if tasks.audio_word:
        slots.append(
            _Slot(
                label="word",
                role=VoiceRole.WORD,
                text=work.spoken_headword,
                language=target,
                existing_url=word.pronunciation_audio_url,
                build_path=lambda ext: services.paths.word_audio(work.term, ext),
                persist=lambda url: repo.set_word_audio(word.id, url),
            )
        )

    for index, selected in ((0, tasks.audio_example_1), (1, tasks.audio_example_2)):
        if not selected:
            continue
        example = work.example(index)
        if example is None:
            ctx.emit(
                f"  Audio example {index + 1}: no stored sentence, skipping",
                level=logging.WARNING,
                event="audio.example.missing",
                stage="audio",
            )
            continue
        slots.append(
            _Slot(
                label=f"example {index + 1}",
                role=VoiceRole.for_example(index),
                text=example.target_sentence,
                language=target,
                existing_url=example.audio_url,
                build_path=lambda ext, i=index: services.paths.example_audio(work.term, i, ext),
                persist=lambda url, i=index: repo.set_example_audio(word.id, source, i, url),
            )
        )

    if tasks.audio_usage_note and work.usage_note.strip():
        slots.append(
            _Slot(
                label="usage note",
                role=VoiceRole.USAGE_NOTE,
                text=work.usage_note,
                language=source,
                existing_url=work.usage_note_audio_url,
                build_path=lambda ext: services.paths.usage_note_audio(work.term, source, ext),
                persist=lambda url: repo.set_usage_note_audio(word.id, source, url),
            )
        )
    return slots


def generate_audio(work: TermWork, ctx: PhaseContext) -> AudioPhaseResult:
    """Synthesize each selected slot independently.

    Slots that already have audio are kept unless ``overwrite_audio`` is set.
    A failing slot is recorded and the remaining slots still run.
    """

    services = ctx.services
    if services.synthesizer is None or services.asset_store is None:
        raise GenerationError("Audio synthesis is not configured")
    if work.word is None:
        raise GenerationError(f"No stored word for '{work.term}'")

    result = AudioPhaseResult()
    overwrite = ctx.config.tasks.overwrite_audio
    calls = 0
    for slot in _plan_slots(work, ctx):
        if slot.existing_url and not overwrite:
            result.kept.append(slot.label)
            ctx.emit(f"  Audio {slot.label}: already present", event="audio.kept", stage="audio")
            continue
        if calls:
            ctx.pacer.pause(ctx.config.audio_buffer_delay_seconds)
        calls += 1
        try:
            audio = services.synthesizer.synthesize(slot.text, slot.role, language=slot.language)
            url = services.asset_store.upload(
                audio.audio_bytes, slot.build_path(audio.extension), audio.mime_type
            )
            slot.persist(url)
        except Exception as exc:
            message = f"audio {slot.label}: {exc}"
            result.failures.append(message)
            ctx.emit(
                f"  Audio {slot.label} failed: {exc}",
                level=logging.WARNING,
                event="audio.failed",
                stage="audio",
            )
            continue
        result.generated.append(slot.label)
        ctx.emit(f"  Audio {slot.label} saved", event="audio.saved", stage="audio")
    return result


__all__ = ["AudioPhaseResult", "generate_audio"]
