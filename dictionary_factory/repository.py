"""Natural-key upserts and lookups over the dictionary tables."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.database.engine import session_scope
from dictionary_factory.database.models import (
    ExampleModel,
    LocalizedContentModel,
    WordImageModel,
    WordModel,
)
from dictionary_factory.errors import StorageError

logger = log_mgr.get_logger().getChild("repository")


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


UNSET: Any = _Unset()


def term_key(term: str) -> str:
    """Case-insensitive natural key for ``term``."""

    return term.strip().casefold()


@dataclass(frozen=True)
class WordRecord:
    id: str
    term: str
    part_of_speech: str
    grammar_data: Dict[str, Any]
    pronunciation_audio_url: Optional[str]

    @classmethod
    def from_model(cls, model: WordModel) -> "WordRecord":
        return cls(
            id=model.id,
            term=model.term,
            part_of_speech=model.part_of_speech or "",
            grammar_data=dict(model.grammar_data or {}),
            pronunciation_audio_url=model.pronunciation_audio_url,
        )


@dataclass(frozen=True)
class LocalizedContentRecord:
    word_id: str
    language_code: str
    definition: str
    usage_note: str
    usage_note_audio_url: Optional[str]


@dataclass(frozen=True)
class ExampleRecord:
    word_id: str
    language_code: str
    sentence_index: int
    target_sentence: str
    translation: str
    audio_url: Optional[str]

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_url)

    @classmethod
    def from_model(cls, model: ExampleModel) -> "ExampleRecord":
        return cls(
            word_id=model.word_id,
            language_code=model.language_code,
            sentence_index=model.sentence_index,
            target_sentence=model.target_sentence,
            translation=model.translation or "",
            audio_url=model.audio_url,
        )


@dataclass(frozen=True)
class DictionaryView:
    """Read-path projection of one word in one language and style."""

    term: str
    definition: str
    part_of_speech: str
    grammar: Dict[str, Any]
    usage_note: str
    usage_note_audio_url: Optional[str]
    pronunciation_audio_url: Optional[str]
    image_url: Optional[str]
    examples: List[Dict[str, Optional[str]]] = field(default_factory=list)

    def as_payload(self) -> Dict[str, Any]:
        return {
            "term": self.term,
            "definition": self.definition,
            "partOfSpeech": self.part_of_speech,
            "grammar": dict(self.grammar),
            "usageNote": self.usage_note,
            "usageNoteAudioUrl": self.usage_note_audio_url,
            "pronunciationAudioUrl": self.pronunciation_audio_url,
            "imageUrl": self.image_url,
            "examples": [dict(example) for example in self.examples],
        }


class DictionaryRepository:
    """Persist dictionary rows with ``INSERT ... ON CONFLICT DO UPDATE``.

    Every write is keyed on a natural key so re-running a batch overwrites
    instead of duplicating. Later calls win for non-key fields.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as exc:
            raise StorageError(f"Database {action} failed: {exc}") from exc

    @staticmethod
    def _insert(session: Session, model: Any):
        dialect = session.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(model)
        if dialect == "sqlite":
            return sqlite_insert(model)
        raise StorageError(f"Upserts are not supported for dialect '{dialect}'")

    def _upsert(
        self,
        session: Session,
        model: Any,
        values: Mapping[str, Any],
        index_elements: List[str],
    ) -> None:
        stmt = self._insert(session, model).values(**values)
        set_ = {
            key: stmt.excluded[key] for key in values if key not in index_elements
        }
        set_["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(index_elements=index_elements, set_=set_)
        session.execute(stmt)

    # ------------------------------------------------------------------
    # Upserts
    # ------------------------------------------------------------------
    def upsert_word(
        self, term: str, part_of_speech: str, grammar_data: Mapping[str, Any]
    ) -> WordRecord:
        key = term_key(term)
        values = {
            "term": term.strip(),
            "term_key": key,
            "part_of_speech": part_of_speech or "",
            "grammar_data": dict(grammar_data or {}),
        }
        with self._session("word upsert") as session:
            self._upsert(session, WordModel, values, ["term_key"])
            model = session.scalars(select(WordModel).where(WordModel.term_key == key)).one()
            return WordRecord.from_model(model)

    def upsert_localized_content(
        self, word_id: str, language_code: str, definition: str, usage_note: str
    ) -> None:
        values = {
            "word_id": word_id,
            "language_code": language_code,
            "definition": definition,
            "usage_note": usage_note or "",
            "usage_note_audio_url": None,
        }
        with self._session("localized content upsert") as session:
            self._upsert(
                session, LocalizedContentModel, values, ["word_id", "language_code"]
            )

    def upsert_example(
        self,
        word_id: str,
        language_code: str,
        sentence_index: int,
        target_sentence: str,
        translation: str,
        audio_url: Optional[str] = UNSET,
    ) -> None:
        """Upsert one example; omit ``audio_url`` to keep the stored value."""

        if sentence_index not in (0, 1):
            raise ValueError(f"sentence_index must be 0 or 1, got {sentence_index}")
        values: Dict[str, Any] = {
            "word_id": word_id,
            "language_code": language_code,
            "sentence_index": sentence_index,
            "target_sentence": target_sentence,
            "translation": translation or "",
        }
        if audio_url is not UNSET:
            values["audio_url"] = audio_url
        with self._session("example upsert") as session:
            self._upsert(
                session,
                ExampleModel,
                values,
                ["word_id", "language_code", "sentence_index"],
            )

    def upsert_word_image(self, word_id: str, style: str, image_url: str) -> None:
        values = {"word_id": word_id, "style": style, "image_url": image_url}
        with self._session("image upsert") as session:
            self._upsert(session, WordImageModel, values, ["word_id", "style"])

    # ------------------------------------------------------------------
    # Narrow updates
    # ------------------------------------------------------------------
    def set_word_audio(self, word_id: str, audio_url: Optional[str]) -> None:
        with self._session("word audio update") as session:
            session.execute(
                update(WordModel)
                .where(WordModel.id == word_id)
                .values(pronunciation_audio_url=audio_url, updated_at=func.now())
            )

    def set_example_audio(
        self, word_id: str, language_code: str, sentence_index: int, audio_url: Optional[str]
    ) -> None:
        with self._session("example audio update") as session:
            session.execute(
                update(ExampleModel)
                .where(
                    ExampleModel.word_id == word_id,
                    ExampleModel.language_code == language_code,
                    ExampleModel.sentence_index == sentence_index,
                )
                .values(audio_url=audio_url, updated_at=func.now())
            )

    def set_usage_note_audio(
        self, word_id: str, language_code: str, audio_url: Optional[str]
    ) -> None:
        with self._session("usage note audio update") as session:
            session.execute(
                update(LocalizedContentModel)
                .where(
                    LocalizedContentModel.word_id == word_id,
                    LocalizedContentModel.language_code == language_code,
                )
                .values(usage_note_audio_url=audio_url, updated_at=func.now())
            )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def find_word(self, term: str) -> Optional[WordRecord]:
        with self._session("word lookup") as session:
            model = session.scalars(
                select(WordModel).where(WordModel.term_key == term_key(term))
            ).one_or_none()
            return WordRecord.from_model(model) if model is not None else None

    def list_examples(self, word_id: str, language_code: str) -> List[ExampleRecord]:
        with self._session("example lookup") as session:
            rows = session.scalars(
                select(ExampleModel)
                .where(
                    ExampleModel.word_id == word_id,
                    ExampleModel.language_code == language_code,
                )
                .order_by(ExampleModel.sentence_index)
            ).all()
            return [ExampleRecord.from_model(row) for row in rows]

    def find_any_example(self, word_id: str) -> Optional[ExampleRecord]:
        with self._session("example lookup") as session:
            row = session.scalars(
                select(ExampleModel)
                .where(ExampleModel.word_id == word_id)
                .order_by(ExampleModel.language_code, ExampleModel.sentence_index)
                .limit(1)
            ).first()
            return ExampleRecord.from_model(row) if row is not None else None

    def get_localized_content(
        self, word_id: str, language_code: str
    ) -> Optional[LocalizedContentRecord]:
        with self._session("localized content lookup") as session:
            row = session.scalars(
                select(LocalizedContentModel).where(
                    LocalizedContentModel.word_id == word_id,
                    LocalizedContentModel.language_code == language_code,
                )
            ).one_or_none()
            if row is None:
                return None
            return LocalizedContentRecord(
                word_id=row.word_id,
                language_code=row.language_code,
                definition=row.definition,
                usage_note=row.usage_note or "",
                usage_note_audio_url=row.usage_note_audio_url,
            )

    def get_image_url(self, word_id: str, style: str) -> Optional[str]:
        """Return the image stored for exactly ``style``; no cross-style fallback."""

        with self._session("image lookup") as session:
            return session.scalars(
                select(WordImageModel.image_url).where(
                    WordImageModel.word_id == word_id, WordImageModel.style == style
                )
            ).one_or_none()

    def get_entry(self, term: str, language_code: str, style: str) -> Optional[DictionaryView]:
        """Assemble the read-path view of ``term`` for ``language_code``.

        Returns ``None`` when the word or its content in ``language_code``
        does not exist.
        """

        word = self.find_word(term)
        if word is None:
            return None
        content = self.get_localized_content(word.id, language_code)
        if content is None:
            return None
        examples = self.list_examples(word.id, language_code)
        grammar = dict(word.grammar_data)
        if word.part_of_speech:
            grammar["partOfSpeech"] = word.part_of_speech
        return DictionaryView(
            term=word.term,
            definition=content.definition,
            part_of_speech=word.part_of_speech,
            grammar=grammar,
            usage_note=content.usage_note,
            usage_note_audio_url=content.usage_note_audio_url,
            pronunciation_audio_url=word.pronunciation_audio_url,
            image_url=self.get_image_url(word.id, style),
            examples=[
                {
                    "target": example.target_sentence,
                    "source": example.translation,
                    "audioUrl": example.audio_url,
                }
                for example in examples
            ],
        )


__all__ = [
    "DictionaryRepository",
    "DictionaryView",
    "ExampleRecord",
    "LocalizedContentRecord",
    "UNSET",
    "WordRecord",
    "term_key",
]
