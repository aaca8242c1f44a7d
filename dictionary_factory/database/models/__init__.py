"""SQLAlchemy models for the dictionary store."""

from .dictionary import ExampleModel, LocalizedContentModel, WordImageModel, WordModel

__all__ = ["ExampleModel", "LocalizedContentModel", "WordImageModel", "WordModel"]
