"""Image phase: illustrate the term and record the URL for its style."""

from __future__ import annotations

from dictionary_factory.errors import GenerationError, StorageError

from ..context import PhaseContext, TermWork


def generate_image(work: TermWork, ctx: PhaseContext) -> str:
    """Generate, upload and persist an illustration; return its public URL."""

    services = ctx.services
    if services.image_generator is None or services.asset_store is None:
        raise GenerationError("Image generation is not configured")
    if work.word is None:
        raise GenerationError(f"No stored word for '{work.term}'")

    style = ctx.config.tasks.style
    context_sentence = work.image_context or work.term
    image = services.image_generator.generate(work.term, context_sentence, style)
    path = services.paths.image(work.term, style)
    url = services.asset_store.upload(image.image_bytes, path, image.mime_type)
    if not url:
        raise StorageError(f"Upload of {path} returned no public URL")
    services.repository.upsert_word_image(work.word.id, style, url)
    ctx.emit(f"  Image saved ({style}): {url}", event="image.saved", stage="image")
    return url


__all__ = ["generate_image"]
