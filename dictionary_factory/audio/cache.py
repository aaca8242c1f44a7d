"""Run-scoped cache for synthesized speech."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from .backends.base import SynthesisResult

CacheKey = Tuple[str, str, str, str]


class AudioCache:
    """Deduplicate identical synthesis requests within one batch run.

    Keys are ``(backend, voice, language, text)``; create one instance per run
    and pass it to the synthesizer.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, SynthesisResult] = {}
        self.hits = 0

    @staticmethod
    def make_key(backend: str, voice: str, language: str, text: str) -> CacheKey:
        return (backend, voice, language, text.strip())

    def get(self, key: CacheKey) -> Optional[SynthesisResult]:
        result = self._entries.get(key)
        if result is not None:
            self.hits += 1
        return result

    def put(self, key: CacheKey, result: SynthesisResult) -> None:
        self._entries[key] = result

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["AudioCache"]
