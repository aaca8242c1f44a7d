"""Dotenv loading for credentials such as ``GEMINI_API_KEY`` and ``DATABASE_URL``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

ENV_FILE_VAR = "DICTIONARY_FACTORY_ENV_FILE"

_loaded: Optional[Tuple[Path, ...]] = None


def _dotenv_paths() -> List[Path]:
    """``DICTIONARY_FACTORY_ENV_FILE`` entries, else the nearest ``.env`` above the cwd."""
    explicit = os.environ.get(ENV_FILE_VAR, "")
    paths = [
        Path(value).expanduser().resolve()
        for value in explicit.split(os.pathsep)
        if value.strip()
    ]
    if paths:
        return list(dict.fromkeys(paths))
    found = find_dotenv(usecwd=True)
    return [Path(found).resolve()] if found else []


def load_environment(*, force: bool = False) -> Tuple[Path, ...]:
    """Load dotenv files once per process; variables already set in the shell win.

    Returns the files that were read. ``force`` re-reads them.
    """
    global _loaded
    if _loaded is None or force:
        _loaded = tuple(
            path for path in _dotenv_paths() if path.is_file() and load_dotenv(path, override=False)
        )
    return _loaded


__all__ = ["ENV_FILE_VAR", "load_environment"]
