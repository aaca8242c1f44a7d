"""Resize, watermark and compress generated illustrations."""

from __future__ import annotations

import io
import os
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFilter, ImageFont, ImageOps, UnidentifiedImageError

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.config_manager.constants import (
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_WIDTH,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_MAX_IMAGE_BYTES,
    DEFAULT_WATERMARK_TEXT,
)
from dictionary_factory.errors import ImageGenerationError

logger = log_mgr.get_logger().getChild("images.postprocess")

_SHADOW_FILL = (0, 0, 0, 204)
_STROKE_FILL = (0, 0, 0, 153)
_TEXT_FILL = (255, 255, 255, 242)
_STROKE_WIDTH = 3
_SHADOW_BLUR_RADIUS = 4
_MIN_QUALITY = 30
_QUALITY_STEP = 10


@dataclass(frozen=True, slots=True)
class PostProcessOptions:
    """Target canvas, watermark and compression ceiling."""

    width: int = DEFAULT_IMAGE_WIDTH
    height: int = DEFAULT_IMAGE_HEIGHT
    watermark_text: str = DEFAULT_WATERMARK_TEXT
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    max_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    font_path: Optional[str] = None


def default_font_path() -> Optional[str]:
    """Return the first bold-capable system font found on this platform."""

    if sys.platform == "darwin":
        candidates = [
            "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
            "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
        ]
    elif sys.platform == "win32":
        candidates = [r"C:\\Windows\\Fonts\\arialbd.ttf"]
    else:
        candidates = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        ]
    for path in candidates:
        if os.path.exists(path):
            return path
    return None


def _load_font(size: int, font_path: Optional[str]) -> ImageFont.ImageFont:
    path = font_path or default_font_path()
    if path:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            logger.debug("Unable to load font %s; using the Pillow default.", path)
    return ImageFont.load_default(size=size)


def decode_image(data: bytes) -> Image.Image:
    """Decode provider bytes into an RGB image."""

    try:
        with Image.open(io.BytesIO(data)) as raw:
            raw.load()
            return raw.convert("RGB")
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageGenerationError("generic", "Image generation failed.") from exc


def fit_to_canvas(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """Scale and center-crop ``image`` so it fills ``size`` exactly."""

    return ImageOps.fit(image, size, method=Image.Resampling.LANCZOS, centering=(0.5, 0.5))


def apply_watermark(
    image: Image.Image, text: str, *, font_path: Optional[str] = None
) -> Image.Image:
    """Stamp ``text`` in the bottom-right corner with a soft shadow and stroke."""

    if not text:
        return image
    width, height = image.size
    font_size = max(14, int(width * 0.04))
    padding = int(font_size * 0.8)
    font = _load_font(font_size, font_path)

    base = image.convert("RGBA")
    measure = ImageDraw.Draw(base)
    left, top, right, bottom = measure.textbbox(
        (0, 0), text, font=font, stroke_width=_STROKE_WIDTH
    )
    x = width - padding - (right - left) - left
    y = height - padding - (bottom - top) - top

    shadow = Image.new("RGBA", base.size, (0, 0, 0, 0))
    ImageDraw.Draw(shadow).text(
        (x + 2, y + 2),
        text,
        font=font,
        fill=_SHADOW_FILL,
        stroke_width=_STROKE_WIDTH,
        stroke_fill=_SHADOW_FILL,
    )
    shadow = shadow.filter(ImageFilter.GaussianBlur(_SHADOW_BLUR_RADIUS))
    composed = Image.alpha_composite(base, shadow)

    ImageDraw.Draw(composed).text(
        (x, y),
        text,
        font=font,
        fill=_TEXT_FILL,
        stroke_width=_STROKE_WIDTH,
        stroke_fill=_STROKE_FILL,
    )
    return composed.convert("RGB")


def encode_jpeg(image: Image.Image, *, quality: int, max_bytes: int) -> bytes:
    """Encode ``image`` as JPEG, lowering quality until ``max_bytes`` is met.

    When even the minimum quality exceeds the ceiling the smallest encoding is
    returned.
    """

    current = quality
    while True:
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=current, optimize=True)
        data = buffer.getvalue()
        if len(data) <= max_bytes or current <= _MIN_QUALITY:
            if len(data) > max_bytes:
                logger.warning(
                    "JPEG still %d bytes at quality %d (ceiling %d)",
                    len(data),
                    current,
                    max_bytes,
                    extra={"event": "image.compress.ceiling", "console_suppress": True},
                )
            return data
        current = max(_MIN_QUALITY, current - _QUALITY_STEP)


def postprocess_image(data: bytes, options: Optional[PostProcessOptions] = None) -> bytes:
    """Decode, fit to the canvas, watermark and JPEG-encode ``data``."""

    opts = options or PostProcessOptions()
    image = decode_image(data)
    image = fit_to_canvas(image, (opts.width, opts.height))
    image = apply_watermark(image, opts.watermark_text, font_path=opts.font_path)
    return encode_jpeg(image, quality=opts.jpeg_quality, max_bytes=opts.max_bytes)


__all__ = [
    "PostProcessOptions",
    "apply_watermark",
    "decode_image",
    "encode_jpeg",
    "fit_to_canvas",
    "postprocess_image",
]
