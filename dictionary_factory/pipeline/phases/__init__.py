"""Per-term pipeline phases."""

from .audio_phase import AudioPhaseResult, generate_audio
from .image_phase import generate_image
from .text_phase import generate_text, load_existing

__all__ = [
    "AudioPhaseResult",
    "generate_audio",
    "generate_image",
    "generate_text",
    "load_existing",
]
