"""Text phase: generate an entry or reload the stored one."""

from __future__ import annotations

from dictionary_factory.errors import GenerationError

from ..context import ExampleSlot, PhaseContext, TermWork


def generate_text(work: TermWork, ctx: PhaseContext) -> None:
    """Generate and persist the entry for ``work.term``.

    Examples are written with ``audio_url=None`` so audio recorded for a
    previous version of the sentences is dropped.
    """

    generator = ctx.services.text_generator
    if generator is None:
        raise GenerationError("No text generator configured")
    repo = ctx.services.repository
    language = ctx.config.language_code

    entry = generator.generate(work.term, language, ctx.config.target_code)

    word = repo.upsert_word(work.term, entry.part_of_speech, entry.grammar_data.to_storage())
    repo.upsert_localized_content(word.id, language, entry.definition, entry.usage_note)
    slots = []
    for index, example in enumerate(entry.examples):
        repo.upsert_example(
            word.id,
            language,
            index,
            example.target,
            example.translation,
            audio_url=None,
        )
        slots.append(ExampleSlot(index, example.target, example.translation))

    work.word = word
    work.examples = slots
    work.usage_note = entry.usage_note
    work.usage_note_audio_url = None
    work.image_context = slots[0].target_sentence if slots else None
    ctx.emit(
        f"  Text saved: {entry.part_of_speech or '?'} - {entry.definition}",
        event="text.saved",
        stage="text",
    )


def load_existing(work: TermWork, ctx: PhaseContext) -> bool:
    """Populate ``work`` from stored rows; return ``False`` when the word is unknown."""

    repo = ctx.services.repository
    language = ctx.config.language_code

    word = repo.find_word(work.term)
    if word is None:
        return False
    work.word = word
    work.examples = [
        ExampleSlot(
            sentence_index=record.sentence_index,
            target_sentence=record.target_sentence,
            translation=record.translation,
            audio_url=record.audio_url,
        )
        for record in repo.list_examples(word.id, language)
    ]
    content = repo.get_localized_content(word.id, language)
    if content is not None:
        work.usage_note = content.usage_note
        work.usage_note_audio_url = content.usage_note_audio_url

    if work.examples:
        work.image_context = work.examples[0].target_sentence
    elif ctx.config.tasks.image:
        fallback = repo.find_any_example(word.id)
        work.image_context = fallback.target_sentence if fallback else None
    ctx.emit(
        f"  Loaded stored entry ({len(work.examples)} example(s) in {language})",
        event="text.loaded",
        stage="text",
    )
    return True


__all__ = ["generate_text", "load_existing"]
