from __future__ import annotations

from typing import Any, Dict, List

import pytest

from dictionary_factory.errors import StorageError
from dictionary_factory.storage.assets import (
    AssetPathBuilder,
    LocalAssetStore,
    SupabaseAssetStore,
    slugify_term,
)

pytestmark = pytest.mark.storage


@pytest.mark.parametrize(
    "term, slug",
    [
        ("Huis", "huis"),
        ("op de fiets", "op_de_fiets"),
        ("café/bar", "café_bar"),
        ("  ?!  ", "term"),
    ],
)
def test_slugify_term(term, slug):
    assert slugify_term(term) == slug


def test_paths_use_semantic_prefixes_and_timestamps():
    paths = AssetPathBuilder(clock=lambda: 1700000000123)

    assert paths.image("Fiets", "anime") == "images/fiets_anime_1700000000123.jpg"
    assert paths.word_audio("Fiets", "wav") == "audio/words/fiets_1700000000123.wav"
    assert paths.example_audio("Fiets", 1, "mp3") == "audio/examples/fiets_1_1700000000123.mp3"
    assert paths.usage_note_audio("Fiets", "en", "wav") == "audio/notes_en/fiets_1700000000123.wav"


def test_paths_are_unique_per_call(fixed_paths):
    assert fixed_paths.image("huis", "anime") != fixed_paths.image("huis", "anime")


def test_local_store_writes_file_and_returns_public_url(tmp_path):
    store = LocalAssetStore(tmp_path, base_url="https://cdn.test/")

    url = store.upload(b"jpeg-bytes", "images/huis_anime_1.jpg", "image/jpeg")

    assert url == "https://cdn.test/images/huis_anime_1.jpg"
    assert (tmp_path / "images" / "huis_anime_1.jpg").read_bytes() == b"jpeg-bytes"


def test_local_store_refuses_paths_outside_root(tmp_path):
    store = LocalAssetStore(tmp_path / "root")

    with pytest.raises(StorageError):
        store.upload(b"x", "../escape.jpg", "image/jpeg")


class _DummyBucket:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.uploads: List[Dict[str, Any]] = []

    def upload(self, *, path: str, file: bytes, file_options: Dict[str, str]) -> None:
        if self.fail:
            raise RuntimeError("bucket is read-only")
        self.uploads.append({"path": path, "file": file, "file_options": file_options})

    def get_public_url(self, path: str) -> str:
        return f"https://project.supabase.co/storage/v1/object/public/dictionary-assets/{path}?"


class _DummySupabase:
    def __init__(self, bucket: _DummyBucket) -> None:
        self.bucket = bucket
        self.requested: List[str] = []
        self.storage = self

    def from_(self, name: str) -> _DummyBucket:
        self.requested.append(name)
        return self.bucket


def test_supabase_store_uploads_without_overwrite():
    bucket = _DummyBucket()
    client = _DummySupabase(bucket)
    store = SupabaseAssetStore(client, bucket="dictionary-assets")

    url = store.upload(b"wav", "audio/words/huis_1.wav", "audio/wav")

    assert url.endswith("/dictionary-assets/audio/words/huis_1.wav")
    assert client.requested == ["dictionary-assets"]
    assert bucket.uploads[0]["file_options"] == {"content-type": "audio/wav", "upsert": "false"}


def test_supabase_store_wraps_client_failures():
    store = SupabaseAssetStore(_DummySupabase(_DummyBucket(fail=True)))

    with pytest.raises(StorageError, match="bucket is read-only"):
        store.upload(b"wav", "audio/words/huis_1.wav", "audio/wav")
