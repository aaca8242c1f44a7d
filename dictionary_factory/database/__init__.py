"""Relational store for dictionary entries."""

from .base import Base
from .engine import (
    create_engine_for_url,
    create_session_factory,
    init_db,
    session_scope,
)
from .models import ExampleModel, LocalizedContentModel, WordImageModel, WordModel

__all__ = [
    "Base",
    "ExampleModel",
    "LocalizedContentModel",
    "WordImageModel",
    "WordModel",
    "create_engine_for_url",
    "create_session_factory",
    "init_db",
    "session_scope",
]
