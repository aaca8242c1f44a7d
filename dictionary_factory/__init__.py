"""Batch enrichment pipeline that fills the dictionary database."""

from .environment import load_environment

# Load .env-style files on import so the CLI and library callers see the same
# credentials without extra wiring.
load_environment()

__all__ = ["load_environment"]
