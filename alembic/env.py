"""Alembic environment bound to the dictionary models."""

from __future__ import annotations

from alembic import context

from dictionary_factory.database import Base
from dictionary_factory.database import models  # noqa: F401
from dictionary_factory.database.engine import (
    create_engine_for_url,
    get_database_url,
    normalize_database_url,
)

config = context.config
target_metadata = Base.metadata


def _url() -> str:
    return normalize_database_url(config.get_main_option("sqlalchemy.url") or get_database_url())


def run_migrations_offline() -> None:
    context.configure(url=_url(), target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine_for_url(_url())
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
