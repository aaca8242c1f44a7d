"""Illustration generation and post-processing."""

from .gemini import GeminiImageClient, GeminiImageRequest, classify_image_error
from .generator import GeneratedImage, ImageGenerator
from .postprocess import PostProcessOptions, postprocess_image
from .style_templates import (
    DEFAULT_IMAGE_STYLE,
    IMAGE_STYLE_TEMPLATES,
    normalize_image_style,
    resolve_image_style,
)

__all__ = [
    "DEFAULT_IMAGE_STYLE",
    "GeminiImageClient",
    "GeminiImageRequest",
    "GeneratedImage",
    "IMAGE_STYLE_TEMPLATES",
    "ImageGenerator",
    "PostProcessOptions",
    "classify_image_error",
    "normalize_image_style",
    "postprocess_image",
    "resolve_image_style",
]
