"""Batch inputs: task selection, credentials and timing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from dictionary_factory.config_manager.constants import (
    DEFAULT_AUDIO_BUFFER_DELAY_SECONDS,
    DEFAULT_INTER_TERM_DELAY_SECONDS,
)
from dictionary_factory.images.style_templates import DEFAULT_IMAGE_STYLE, normalize_image_style
from dictionary_factory.languages import normalize_language_code

TASK_NAMES = ("text", "image", "audio")


@dataclass(frozen=True)
class TaskSelection:
    """Which phases and audio slots a batch should run."""

    text: bool = True
    image: bool = True
    audio_word: bool = True
    audio_example_1: bool = True
    audio_example_2: bool = True
    audio_usage_note: bool = False
    image_style: str = DEFAULT_IMAGE_STYLE
    overwrite_audio: bool = False

    @property
    def any_audio(self) -> bool:
        return (
            self.audio_word
            or self.audio_example_1
            or self.audio_example_2
            or self.audio_usage_note
        )

    @property
    def style(self) -> str:
        return normalize_image_style(self.image_style)

    @classmethod
    def from_names(
        cls,
        names: Iterable[str],
        *,
        image_style: str = DEFAULT_IMAGE_STYLE,
        overwrite_audio: bool = False,
        usage_note_audio: bool = False,
    ) -> "TaskSelection":
        """Build a selection from names such as ``text``, ``image``, ``audio``.

        ``audio`` enables the word and both example slots; individual slots
        (``audio_word``, ``audio_example_1``, ...) may be named directly.
        """

        selected = {name.strip().lower() for name in names if name and name.strip()}
        unknown = selected - set(TASK_NAMES) - {
            "audio_word",
            "audio_example_1",
            "audio_example_2",
            "audio_usage_note",
        }
        if unknown:
            raise ValueError(f"Unknown task(s): {', '.join(sorted(unknown))}")
        audio_all = "audio" in selected
        return cls(
            text="text" in selected,
            image="image" in selected,
            audio_word=audio_all or "audio_word" in selected,
            audio_example_1=audio_all or "audio_example_1" in selected,
            audio_example_2=audio_all or "audio_example_2" in selected,
            audio_usage_note=usage_note_audio or "audio_usage_note" in selected,
            image_style=image_style,
            overwrite_audio=overwrite_audio,
        )


@dataclass(frozen=True)
class Credentials:
    """Secrets and endpoints; each is required only by the tasks that use it."""

    database_url: Optional[str] = None
    storage_url: Optional[str] = None
    storage_key: Optional[str] = None
    local_storage_dir: Optional[str] = None
    gemini_api_key: Optional[str] = None
    chat_llm_url: Optional[str] = None
    chat_llm_api_key: Optional[str] = None
    elevenlabs_api_key: Optional[str] = None

    @property
    def has_storage(self) -> bool:
        return bool(self.local_storage_dir) or bool(self.storage_url and self.storage_key)

    @property
    def has_text_provider(self) -> bool:
        return bool(self.gemini_api_key) or bool(self.chat_llm_url and self.chat_llm_api_key)

    def missing_for(self, tasks: TaskSelection, *, tts_backend: str = "gemini") -> List[str]:
        """Return the names of credentials the selected tasks still need."""

        missing: List[str] = []
        if not self.database_url:
            missing.append("DATABASE_URL")
        if tasks.text and not self.has_text_provider:
            missing.append("GEMINI_API_KEY")
        if tasks.image and not self.gemini_api_key and "GEMINI_API_KEY" not in missing:
            missing.append("GEMINI_API_KEY")
        if (tasks.image or tasks.any_audio) and not self.has_storage:
            missing.append("SUPABASE_URL/SUPABASE_SERVICE_ROLE_KEY")
        if tasks.any_audio:
            if tts_backend == "elevenlabs":
                if not self.elevenlabs_api_key:
                    missing.append("ELEVENLABS_API_KEY")
            elif not self.gemini_api_key and "GEMINI_API_KEY" not in missing:
                missing.append("GEMINI_API_KEY")
        return missing


@dataclass(frozen=True)
class BatchConfig:
    """Everything the orchestrator needs besides the word list."""

    tasks: TaskSelection = field(default_factory=TaskSelection)
    source_language: str = "en"
    target_language: str = "nl"
    inter_term_delay_seconds: float = DEFAULT_INTER_TERM_DELAY_SECONDS
    audio_buffer_delay_seconds: float = DEFAULT_AUDIO_BUFFER_DELAY_SECONDS

    @property
    def language_code(self) -> str:
        return normalize_language_code(self.source_language)

    @property
    def target_code(self) -> str:
        return normalize_language_code(self.target_language)


def clean_word_list(lines: Iterable[str]) -> List[str]:
    """Trim each line and drop empty ones, keeping order and duplicates."""

    return [line.strip() for line in lines if line and line.strip()]


__all__ = [
    "BatchConfig",
    "Credentials",
    "TASK_NAMES",
    "TaskSelection",
    "clean_word_list",
]
