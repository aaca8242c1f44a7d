"""Command line interface for dictionary-factory."""

from .main import run_cli

__all__ = ["run_cli"]
