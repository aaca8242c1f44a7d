"""Object storage for generated images and audio."""

from __future__ import annotations

import re
import time
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from supabase import create_client

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.config_manager.constants import DEFAULT_STORAGE_BUCKET
from dictionary_factory.errors import StorageError

logger = log_mgr.get_logger().getChild("storage")

_SLUG_PATTERN = re.compile(r"[^\w.-]+", re.UNICODE)


def _now_ms() -> int:
    return int(time.time() * 1000)


def slugify_term(term: str) -> str:
    """Return a filesystem and URL friendly version of ``term``."""

    slug = _SLUG_PATTERN.sub("_", term.strip().lower()).strip("_.")
    return slug or "term"


class AssetPathBuilder:
    """Build append-only object paths with an epoch-millisecond suffix."""

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock

    def image(self, term: str, style: str) -> str:
        return f"images/{slugify_term(term)}_{style}_{self._clock()}.jpg"

    def word_audio(self, term: str, extension: str) -> str:
        return f"audio/words/{slugify_term(term)}_{self._clock()}.{extension}"

    def example_audio(self, term: str, sentence_index: int, extension: str) -> str:
        return (
            f"audio/examples/{slugify_term(term)}_{sentence_index}_{self._clock()}.{extension}"
        )

    def usage_note_audio(self, term: str, language_code: str, extension: str) -> str:
        return f"audio/notes_{language_code}/{slugify_term(term)}_{self._clock()}.{extension}"


class AssetStore(Protocol):
    def upload(self, data: bytes, path: str, mime_type: str) -> str:
        """Store ``data`` at ``path`` and return its public URL."""


class SupabaseAssetStore:
    """Upload assets into a Supabase Storage bucket."""

    def __init__(
        self,
        client: Any,
        *,
        bucket: str = DEFAULT_STORAGE_BUCKET,
    ) -> None:
        self._client = client
        self.bucket = bucket

    @classmethod
    def from_credentials(
        cls, url: str, service_role_key: str, *, bucket: str = DEFAULT_STORAGE_BUCKET
    ) -> "SupabaseAssetStore":
        return cls(create_client(url, service_role_key), bucket=bucket)

    def upload(self, data: bytes, path: str, mime_type: str) -> str:
        storage = self._client.storage.from_(self.bucket)
        try:
            storage.upload(
                path=path,
                file=data,
                file_options={"content-type": mime_type, "upsert": "false"},
            )
            public_url = storage.get_public_url(path)
        except Exception as exc:
            raise StorageError(f"Upload of {path} to bucket {self.bucket} failed: {exc}") from exc
        if isinstance(public_url, str):
            public_url = public_url.rstrip("?")
        logger.debug(
            "Uploaded %s (%d bytes)",
            path,
            len(data),
            extra={"event": "storage.upload", "console_suppress": True},
        )
        return public_url


class LocalAssetStore:
    """Write assets below a directory and expose them under ``base_url``."""

    def __init__(self, root: Path | str, *, base_url: Optional[str] = None) -> None:
        self.root = Path(root).expanduser().resolve()
        self.base_url = (base_url or self.root.as_uri()).rstrip("/")

    def upload(self, data: bytes, path: str, mime_type: str) -> str:
        destination = (self.root / path).resolve()
        if self.root not in destination.parents:
            raise StorageError(f"Refusing to write outside the storage root: {path}")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Unable to write {destination}: {exc}") from exc
        return f"{self.base_url}/{path}"


__all__ = [
    "AssetPathBuilder",
    "AssetStore",
    "LocalAssetStore",
    "SupabaseAssetStore",
    "slugify_term",
]
