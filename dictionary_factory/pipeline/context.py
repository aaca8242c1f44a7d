"""Shared objects handed to each pipeline phase."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.audio.synthesizer import AudioSynthesizer
from dictionary_factory.guards import Pacer
from dictionary_factory.images.generator import ImageGenerator
from dictionary_factory.repository import DictionaryRepository, WordRecord
from dictionary_factory.storage.assets import AssetPathBuilder, AssetStore
from dictionary_factory.text.generator import TextContentGenerator

from .config import BatchConfig

LogSink = Callable[[str], None]

logger = log_mgr.get_logger().getChild("pipeline")


@dataclass
class PipelineServices:
    """Collaborators used by the phases; unused ones may be ``None``."""

    repository: DictionaryRepository
    text_generator: Optional[TextContentGenerator] = None
    image_generator: Optional[ImageGenerator] = None
    synthesizer: Optional[AudioSynthesizer] = None
    asset_store: Optional[AssetStore] = None
    paths: AssetPathBuilder = field(default_factory=AssetPathBuilder)


@dataclass
class ExampleSlot:
    sentence_index: int
    target_sentence: str
    translation: str
    audio_url: Optional[str] = None

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_url)


@dataclass
class TermWork:
    """Mutable per-term data carried from one phase to the next."""

    term: str
    word: Optional[WordRecord] = None
    examples: List[ExampleSlot] = field(default_factory=list)
    usage_note: str = ""
    usage_note_audio_url: Optional[str] = None
    image_context: Optional[str] = None

    @property
    def article(self) -> Optional[str]:
        if self.word is None:
            return None
        article = self.word.grammar_data.get("article")
        if isinstance(article, str) and article.strip():
            return article.strip()
        return None

    @property
    def spoken_headword(self) -> str:
        article = self.article
        return f"{article} {self.term}" if article else self.term

    def example(self, sentence_index: int) -> Optional[ExampleSlot]:
        for slot in self.examples:
            if slot.sentence_index == sentence_index:
                return slot
        return None


class LogEmitter:
    """Send human-readable lines to the caller's sink and mirror them to logging."""

    def __init__(self, sink: Optional[LogSink] = None) -> None:
        self._sink = sink
        self.lines: List[str] = []

    def __call__(
        self,
        message: str,
        *,
        level: int = logging.INFO,
        event: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> None:
        self.lines.append(message)
        if self._sink is not None:
            self._sink(message)
        logger.log(
            level,
            message,
            extra={"event": event, "stage": stage, "console_suppress": True},
        )


@dataclass
class PhaseContext:
    services: PipelineServices
    config: BatchConfig
    emit: LogEmitter
    pacer: Pacer


__all__ = [
    "ExampleSlot",
    "LogEmitter",
    "LogSink",
    "PhaseContext",
    "PipelineServices",
    "TermWork",
]
