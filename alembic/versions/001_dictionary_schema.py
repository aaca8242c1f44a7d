"""Dictionary schema: words, localized content, examples, word images.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "words",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("term", sa.Text, nullable=False),
        sa.Column("term_key", sa.Text, nullable=False, unique=True),
        sa.Column("part_of_speech", sa.String(64), nullable=False, server_default=""),
        sa.Column("grammar_data", JSONB, nullable=False, server_default="{}"),
        sa.Column("pronunciation_audio_url", sa.Text, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "localized_content",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "word_id", sa.String(36), sa.ForeignKey("words.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("language_code", sa.String(10), nullable=False),
        sa.Column("definition", sa.Text, nullable=False, server_default=""),
        sa.Column("usage_note", sa.Text, nullable=False, server_default=""),
        sa.Column("usage_note_audio_url", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("word_id", "language_code", name="uq_localized_content_word_lang"),
    )

    op.create_table(
        "examples",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "word_id", sa.String(36), sa.ForeignKey("words.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("language_code", sa.String(10), nullable=False),
        sa.Column("sentence_index", sa.Integer, nullable=False),
        sa.Column("target_sentence", sa.Text, nullable=False),
        sa.Column("translation", sa.Text, nullable=False, server_default=""),
        sa.Column("audio_url", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "word_id", "language_code", "sentence_index", name="uq_examples_word_lang_index"
        ),
        sa.CheckConstraint("sentence_index IN (0, 1)", name="ck_examples_sentence_index"),
    )
    op.create_index("idx_examples_word", "examples", ["word_id"])

    op.create_table(
        "word_images",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "word_id", sa.String(36), sa.ForeignKey("words.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("style", sa.String(32), nullable=False),
        sa.Column("image_url", sa.Text, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("word_id", "style", name="uq_word_images_word_style"),
    )


def downgrade() -> None:
    op.drop_table("word_images")
    op.drop_index("idx_examples_word", table_name="examples")
    op.drop_table("examples")
    op.drop_table("localized_content")
    op.drop_table("words")
