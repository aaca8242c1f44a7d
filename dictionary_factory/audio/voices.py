"""Voice roles used when speaking dictionary content."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dictionary_factory.config_manager.constants import (
    DEFAULT_GEMINI_EXAMPLE_VOICE,
    DEFAULT_GEMINI_VOICE,
)


class VoiceRole(str, Enum):
    WORD = "word"
    EXAMPLE_1 = "example_1"
    EXAMPLE_2 = "example_2"
    USAGE_NOTE = "usage_note"

    @classmethod
    def for_example(cls, sentence_index: int) -> "VoiceRole":
        if sentence_index == 0:
            return cls.EXAMPLE_1
        if sentence_index == 1:
            return cls.EXAMPLE_2
        raise ValueError(f"No voice role for example index {sentence_index}")


@dataclass(frozen=True)
class VoiceRoleConfig:
    """Voice identifier per role; interpretation depends on the backend."""

    word: str = DEFAULT_GEMINI_VOICE
    example_1: str = DEFAULT_GEMINI_VOICE
    example_2: str = DEFAULT_GEMINI_EXAMPLE_VOICE
    usage_note: str = DEFAULT_GEMINI_VOICE

    def voice_for(self, role: VoiceRole) -> str:
        return getattr(self, VoiceRole(role).value)

    @classmethod
    def with_default(
        cls,
        default: Optional[str] = None,
        *,
        word: Optional[str] = None,
        example_1: Optional[str] = None,
        example_2: Optional[str] = None,
        usage_note: Optional[str] = None,
    ) -> "VoiceRoleConfig":
        """Build a config where unset roles fall back to ``default``.

        Without ``default`` the Gemini voices of :class:`VoiceRoleConfig` apply.
        """

        base = cls() if default is None else cls(default, default, default, default)
        return cls(
            word=word or base.word,
            example_1=example_1 or base.example_1,
            example_2=example_2 or base.example_2,
            usage_note=usage_note or base.usage_note,
        )


__all__ = ["VoiceRole", "VoiceRoleConfig"]
