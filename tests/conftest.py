import copy
import itertools
import json
import re
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dictionary_factory.audio.backends.base import BaseTTSBackend, SynthesisResult, TTSBackendError
from dictionary_factory.audio.cache import AudioCache
from dictionary_factory.audio.synthesizer import AudioSynthesizer
from dictionary_factory.database.engine import init_db
from dictionary_factory.errors import ImageGenerationError
from dictionary_factory.images.generator import GeneratedImage
from dictionary_factory.pipeline.context import PipelineServices
from dictionary_factory.repository import DictionaryRepository
from dictionary_factory.storage.assets import AssetPathBuilder, LocalAssetStore
from dictionary_factory.text.generator import TextContentGenerator
from dictionary_factory.text.prompts import TERM_END, TERM_START
from dictionary_factory.text.providers import TextProvider

_TERM_PATTERN = re.compile(re.escape(TERM_START) + r"(.*?)" + re.escape(TERM_END))

_BASE_ENTRY: Dict[str, Any] = {
    "definition": "a building that people live in",
    "partOfSpeech": "zn.",
    "grammar_data": {
        "plural": "huizen",
        "article": "het",
        "synonyms": ["woning"],
        "antonyms": [],
    },
    "usageNote": "Huis is a het-word, so it is 'het huis' and 'dat huis'.",
    "examples": [
        {"target": "Het huis is groot.", "translation": "The house is big."},
        {"target": "Wij kopen een huis.", "translation": "We are buying a house."},
    ],
}


def _entry_payload(**overrides: Any) -> Dict[str, Any]:
    payload = copy.deepcopy(_BASE_ENTRY)
    payload.update(overrides)
    return payload


class _DummyTextProvider(TextProvider):
    """Answer prompts through ``handler(term)``; dict results are sent as JSON."""

    def __init__(self, name: str, handler: Callable[[str], Any]) -> None:
        self.name = name
        self._handler = handler
        self.terms: List[str] = []

    def complete(self, prompt: str) -> str:
        match = _TERM_PATTERN.search(prompt)
        term = match.group(1) if match else ""
        self.terms.append(term)
        result = self._handler(term)
        if isinstance(result, dict):
            return json.dumps(result, ensure_ascii=False)
        return result


class _DummyImageGenerator:
    def __init__(self, fail_terms: Iterable[str] = ()) -> None:
        self.fail_terms = set(fail_terms)
        self.calls: List[SimpleNamespace] = []

    def generate(
        self,
        term: str,
        context_sentence: str,
        style: str,
        cultural_hint: Optional[str] = None,
    ) -> GeneratedImage:
        self.calls.append(SimpleNamespace(term=term, context=context_sentence, style=style))
        if term in self.fail_terms:
            raise ImageGenerationError("quota", "Daily Image Quota Exceeded (429).")
        return GeneratedImage(
            image_bytes=b"\xff\xd8\xff" + term.encode("utf-8"),
            mime_type="image/jpeg",
            prompt=f"illustration of {term}",
        )


class _DummyTTSBackend(BaseTTSBackend):
    """Fake backend: ``statuses`` are raised in order, then calls succeed."""

    name = "dummy"
    mime_type = "audio/wav"
    extension = "wav"

    def __init__(
        self,
        *,
        statuses: Sequence[Optional[int]] = (),
        fail_texts: Iterable[str] = (),
        models: Sequence[str] = ("model-a",),
    ) -> None:
        super().__init__(models=models)
        self._statuses = list(statuses)
        self.fail_texts = set(fail_texts)
        self.calls: List[SimpleNamespace] = []

    def synthesize(
        self,
        *,
        text: str,
        voice: str,
        lang_code: str,
        model: Optional[str] = None,
    ) -> SynthesisResult:
        self.calls.append(SimpleNamespace(text=text, voice=voice, lang_code=lang_code, model=model))
        if self._statuses:
            status = self._statuses.pop(0)
            if status is not None:
                raise TTSBackendError(f"dummy failure ({status})", status_code=status)
        if text in self.fail_texts:
            raise TTSBackendError("dummy failure (500)", status_code=500)
        return SynthesisResult(
            audio_bytes=b"RIFF" + text.encode("utf-8"),
            mime_type=self.mime_type,
            extension=self.extension,
            model=model,
        )


_CREDENTIAL_ENV_VARS = (
    "DATABASE_URL",
    "DICTIONARY_DATABASE_URL",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "ELEVENLABS_API_KEY",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_KEY",
    "DICTIONARY_STORAGE_BUCKET",
    "LLM_API_URL",
    "LLM_API_KEY",
    "LLM_MODEL",
    "DICTIONARY_TARGET_LANGUAGE",
    "DICTIONARY_TTS_BACKEND",
    "DICTIONARY_FACTORY_DEBUG",
)


@pytest.fixture
def isolated_env(monkeypatch):
    """Remove credential variables so settings come from config files only."""

    for name in _CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def entry_payload() -> Callable[..., Dict[str, Any]]:
    return _entry_payload


@pytest.fixture
def repository():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield DictionaryRepository(sessionmaker(bind=engine, expire_on_commit=False))
    engine.dispose()


@pytest.fixture
def text_provider_factory() -> Callable[..., _DummyTextProvider]:
    return _DummyTextProvider


@pytest.fixture
def image_generator_factory() -> Callable[..., _DummyImageGenerator]:
    return _DummyImageGenerator


@pytest.fixture
def tts_backend_factory() -> Callable[..., _DummyTTSBackend]:
    return _DummyTTSBackend


@pytest.fixture
def fixed_paths() -> AssetPathBuilder:
    counter = itertools.count(1700000000000)
    return AssetPathBuilder(clock=lambda: next(counter))


@pytest.fixture
def local_store(tmp_path) -> LocalAssetStore:
    return LocalAssetStore(tmp_path / "assets", base_url="https://cdn.test/assets")


@pytest.fixture
def build_services(repository, local_store, fixed_paths):
    """Assemble pipeline services from fakes; pass ``None`` to leave a slot empty."""

    def _build(
        *,
        text_handler: Optional[Callable[[str], Any]] = None,
        image_generator: Optional[_DummyImageGenerator] = None,
        tts_backend: Optional[_DummyTTSBackend] = None,
    ) -> PipelineServices:
        services = PipelineServices(repository=repository, paths=fixed_paths)
        services.asset_store = local_store
        if text_handler is not None:
            services.text_generator = TextContentGenerator(
                [_DummyTextProvider("primary", text_handler)]
            )
        services.image_generator = image_generator
        if tts_backend is not None:
            services.synthesizer = AudioSynthesizer(
                tts_backend,
                default_language="nl",
                cache=AudioCache(),
                max_attempts=1,
                sleeper=lambda _seconds: None,
            )
        return services

    return _build
