"""Illustration generation: prompt, provider call and post-processing."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Protocol

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.errors import ImageGenerationError
from dictionary_factory.languages import normalize_language_code

from .gemini import GeminiImageRequest, classify_image_error
from .postprocess import PostProcessOptions, postprocess_image
from .prompting import build_image_prompt, choose_backdrop
from .style_templates import normalize_image_style

logger = log_mgr.get_logger().getChild("images.generator")


class ImageBackend(Protocol):
    def generate(self, request: GeminiImageRequest) -> bytes:
        ...


@dataclass(frozen=True, slots=True)
class GeneratedImage:
    image_bytes: bytes
    mime_type: str
    prompt: str


class ImageGenerator:
    """Produce watermarked, size-capped JPEG illustrations for a term."""

    def __init__(
        self,
        backend: ImageBackend,
        *,
        target_language: str = "nl",
        rng: Optional[random.Random] = None,
        options: Optional[PostProcessOptions] = None,
        image_size: str = "1K",
    ) -> None:
        self._backend = backend
        self.target_language = normalize_language_code(target_language)
        self._rng = rng or random.Random()
        self.options = options or PostProcessOptions()
        self.image_size = image_size

    def build_prompt(
        self, term: str, context_sentence: str, style: str, cultural_hint: Optional[str] = None
    ) -> str:
        backdrop = choose_backdrop(self.target_language, self._rng, cultural_hint=cultural_hint)
        return build_image_prompt(
            term=term,
            context_sentence=context_sentence or term,
            style=normalize_image_style(style),
            backdrop=backdrop,
            target_language=self.target_language,
        )

    def generate(
        self,
        term: str,
        context_sentence: str,
        style: str,
        cultural_hint: Optional[str] = None,
    ) -> GeneratedImage:
        """Return a post-processed JPEG or raise :class:`ImageGenerationError`."""

        prompt = self.build_prompt(term, context_sentence, style, cultural_hint)
        logger.debug(
            "Requesting illustration for '%s'",
            term,
            extra={"event": "image.request", "console_suppress": True},
        )
        request = GeminiImageRequest(prompt=prompt, image_size=self.image_size)
        try:
            raw = self._backend.generate(request)
        except ImageGenerationError:
            raise
        except Exception as exc:
            raise classify_image_error(exc) from exc
        processed = postprocess_image(raw, self.options)
        return GeneratedImage(image_bytes=processed, mime_type="image/jpeg", prompt=prompt)


__all__ = ["GeneratedImage", "ImageBackend", "ImageGenerator"]
