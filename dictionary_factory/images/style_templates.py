"""Art styles available for dictionary illustrations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True, slots=True)
class ImageStyleTemplate:
    """A style keyword and the phrase injected into the image prompt."""

    template_id: str
    label: str
    prompt_phrase: str


DEFAULT_IMAGE_STYLE = "anime"

IMAGE_STYLE_TEMPLATES: Mapping[str, ImageStyleTemplate] = {
    "flat": ImageStyleTemplate(
        template_id="flat",
        label="Flat design",
        prompt_phrase="minimalist flat design, vector art, vibrant colors",
    ),
    "cartoon": ImageStyleTemplate(
        template_id="cartoon",
        label="Cartoon",
        prompt_phrase="fun, energetic cartoon style",
    ),
    "anime": ImageStyleTemplate(
        template_id="anime",
        label="Slice-of-life anime",
        prompt_phrase=(
            "healing slice-of-life anime style, detailed backgrounds, soft colors, "
            "relaxing atmosphere"
        ),
    ),
    "watercolor": ImageStyleTemplate(
        template_id="watercolor",
        label="Watercolor",
        prompt_phrase="soft artistic watercolor painting",
    ),
    "pixel": ImageStyleTemplate(
        template_id="pixel",
        label="Pixel art",
        prompt_phrase="8-bit pixel art, retro game style",
    ),
    "realistic": ImageStyleTemplate(
        template_id="realistic",
        label="Photorealistic",
        prompt_phrase="photorealistic, high detailed",
    ),
}

_STYLE_ALIASES = {
    "anime healing": "anime",
    "ghibli": "anime",
    "pixel art": "pixel",
    "photorealistic": "realistic",
    "vector": "flat",
}


def normalize_image_style(value: object | None) -> str:
    """Return a known style keyword, falling back to :data:`DEFAULT_IMAGE_STYLE`."""

    if not isinstance(value, str):
        return DEFAULT_IMAGE_STYLE
    candidate = " ".join(value.strip().lower().replace("_", " ").replace("-", " ").split())
    if not candidate:
        return DEFAULT_IMAGE_STYLE
    resolved = _STYLE_ALIASES.get(candidate, candidate)
    if resolved in IMAGE_STYLE_TEMPLATES:
        return resolved
    return DEFAULT_IMAGE_STYLE


def image_style_choices() -> list[str]:
    """Style keywords and their aliases as accepted on the command line."""

    names = set(IMAGE_STYLE_TEMPLATES)
    names.update(alias.replace(" ", "-") for alias in _STYLE_ALIASES)
    return sorted(names)


def resolve_image_style(value: object | None) -> ImageStyleTemplate:
    """Return the :class:`ImageStyleTemplate` for ``value``."""

    return IMAGE_STYLE_TEMPLATES[normalize_image_style(value)]


__all__ = [
    "DEFAULT_IMAGE_STYLE",
    "IMAGE_STYLE_TEMPLATES",
    "ImageStyleTemplate",
    "image_style_choices",
    "normalize_image_style",
    "resolve_image_style",
]
