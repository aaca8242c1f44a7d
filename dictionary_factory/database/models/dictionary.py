"""Dictionary models: words, localized content, examples and images."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base, JSONType, TimestampMixin, new_id


class WordModel(TimestampMixin, Base):
    __tablename__ = "words"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    term: Mapped[str] = mapped_column(Text, nullable=False)
    term_key: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    part_of_speech: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    grammar_data: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    pronunciation_audio_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    localized_content: Mapped[list[LocalizedContentModel]] = relationship(
        back_populates="word", cascade="all, delete-orphan"
    )
    examples: Mapped[list[ExampleModel]] = relationship(
        back_populates="word", cascade="all, delete-orphan"
    )
    images: Mapped[list[WordImageModel]] = relationship(
        back_populates="word", cascade="all, delete-orphan"
    )


class LocalizedContentModel(TimestampMixin, Base):
    __tablename__ = "localized_content"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    word_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("words.id", ondelete="CASCADE"), nullable=False
    )
    language_code: Mapped[str] = mapped_column(String(10), nullable=False)
    definition: Mapped[str] = mapped_column(Text, nullable=False, default="")
    usage_note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    usage_note_audio_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    word: Mapped[WordModel] = relationship(back_populates="localized_content")

    __table_args__ = (
        UniqueConstraint("word_id", "language_code", name="uq_localized_content_word_lang"),
    )


class ExampleModel(TimestampMixin, Base):
    __tablename__ = "examples"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    word_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("words.id", ondelete="CASCADE"), nullable=False
    )
    language_code: Mapped[str] = mapped_column(String(10), nullable=False)
    sentence_index: Mapped[int] = mapped_column(nullable=False)
    target_sentence: Mapped[str] = mapped_column(Text, nullable=False)
    translation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    audio_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    word: Mapped[WordModel] = relationship(back_populates="examples")

    __table_args__ = (
        UniqueConstraint(
            "word_id", "language_code", "sentence_index", name="uq_examples_word_lang_index"
        ),
        CheckConstraint("sentence_index IN (0, 1)", name="ck_examples_sentence_index"),
        Index("idx_examples_word", "word_id"),
    )


class WordImageModel(TimestampMixin, Base):
    __tablename__ = "word_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    word_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("words.id", ondelete="CASCADE"), nullable=False
    )
    style: Mapped[str] = mapped_column(String(32), nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)

    word: Mapped[WordModel] = relationship(back_populates="images")

    __table_args__ = (UniqueConstraint("word_id", "style", name="uq_word_images_word_style"),)
