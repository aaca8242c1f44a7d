"""Wire settings and credentials into a ready-to-run orchestrator."""

from __future__ import annotations

import random
from typing import Optional

from pydantic import SecretStr

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.audio.backends import create_backend, resolve_backend_name
from dictionary_factory.audio.cache import AudioCache
from dictionary_factory.audio.synthesizer import AudioSynthesizer
from dictionary_factory.audio.voices import VoiceRoleConfig
from dictionary_factory.config_manager.settings import FactorySettings
from dictionary_factory.database.engine import create_session_factory
from dictionary_factory.errors import MissingCredentialsError
from dictionary_factory.gemini_client import create_gemini_client
from dictionary_factory.images.gemini import GeminiImageClient
from dictionary_factory.images.generator import ImageGenerator
from dictionary_factory.images.postprocess import PostProcessOptions
from dictionary_factory.llm_client import create_client
from dictionary_factory.repository import DictionaryRepository
from dictionary_factory.storage.assets import LocalAssetStore, SupabaseAssetStore
from dictionary_factory.text.generator import TextContentGenerator
from dictionary_factory.text.providers import ChatTextProvider, GeminiTextProvider, TextProvider

from .config import BatchConfig, Credentials, TaskSelection
from .context import PipelineServices
from .orchestrator import BatchOrchestrator

logger = log_mgr.get_logger().getChild("pipeline.factory")


def _secret(value: Optional[SecretStr]) -> Optional[str]:
    if value is None:
        return None
    secret = value.get_secret_value().strip()
    return secret or None


def credentials_from_settings(settings: FactorySettings) -> Credentials:
    return Credentials(
        database_url=_secret(settings.database_url),
        storage_url=settings.supabase_url,
        storage_key=_secret(settings.supabase_service_role_key),
        local_storage_dir=settings.local_storage_dir,
        gemini_api_key=_secret(settings.gemini_api_key),
        chat_llm_url=settings.chat_llm_url if _secret(settings.chat_llm_api_key) else None,
        chat_llm_api_key=_secret(settings.chat_llm_api_key),
        elevenlabs_api_key=_secret(settings.elevenlabs_api_key),
    )


def voices_from_settings(settings: FactorySettings) -> VoiceRoleConfig:
    """Per-role voices; ElevenLabs roles left unset use ``elevenlabs_voice``."""

    default = None
    if resolve_backend_name(settings.tts_backend) == "elevenlabs":
        default = settings.elevenlabs_voice
    return VoiceRoleConfig.with_default(
        default,
        word=settings.voice_word,
        example_1=settings.voice_example_1,
        example_2=settings.voice_example_2,
        usage_note=settings.voice_usage_note,
    )


def batch_config_from_settings(settings: FactorySettings, tasks: TaskSelection) -> BatchConfig:
    return BatchConfig(
        tasks=tasks,
        source_language=settings.source_language,
        target_language=settings.target_language,
        inter_term_delay_seconds=settings.inter_term_delay_seconds,
        audio_buffer_delay_seconds=settings.audio_buffer_delay_seconds,
    )


def _build_text_providers(
    settings: FactorySettings, credentials: Credentials, gemini_client: Optional[object]
) -> list[TextProvider]:
    providers: list[TextProvider] = []
    for name in settings.text_providers:
        key = name.strip().lower()
        if key == "gemini" and gemini_client is not None:
            providers.append(
                GeminiTextProvider(
                    gemini_client,
                    model=settings.text_model,
                    timeout_seconds=settings.text_timeout_seconds,
                )
            )
        elif key == "chat" and credentials.chat_llm_url and credentials.chat_llm_api_key:
            client = create_client(
                model=settings.chat_llm_model,
                api_url=credentials.chat_llm_url,
                api_key=credentials.chat_llm_api_key,
                debug=settings.debug,
            )
            providers.append(
                ChatTextProvider(client, timeout_seconds=settings.text_timeout_seconds)
            )
    return providers


def build_services(
    settings: FactorySettings,
    tasks: TaskSelection,
    *,
    credentials: Optional[Credentials] = None,
    repository: Optional[DictionaryRepository] = None,
) -> PipelineServices:
    """Create the collaborators needed for ``tasks``.

    Raises :class:`MissingCredentialsError` before creating anything when a
    selected task lacks its credentials.
    """

    credentials = credentials or credentials_from_settings(settings)
    tts_backend = resolve_backend_name(settings.tts_backend)
    missing = credentials.missing_for(tasks, tts_backend=tts_backend)
    if repository is not None and "DATABASE_URL" in missing:
        missing.remove("DATABASE_URL")
    if missing:
        raise MissingCredentialsError(missing)

    if repository is None:
        repository = DictionaryRepository(create_session_factory(credentials.database_url or ""))

    gemini_client = (
        create_gemini_client(credentials.gemini_api_key) if credentials.gemini_api_key else None
    )
    services = PipelineServices(repository=repository)

    if tasks.text:
        services.text_generator = TextContentGenerator(
            _build_text_providers(settings, credentials, gemini_client)
        )

    if tasks.image and gemini_client is not None:
        rng = random.Random(settings.image_seed)
        services.image_generator = ImageGenerator(
            GeminiImageClient(
                gemini_client,
                model=settings.image_model,
                timeout_seconds=settings.image_timeout_seconds,
            ),
            target_language=settings.target_language,
            rng=rng,
            options=PostProcessOptions(
                width=settings.image_width,
                height=settings.image_height,
                watermark_text=settings.watermark_text,
                jpeg_quality=settings.jpeg_quality,
                max_bytes=settings.max_image_bytes,
            ),
            image_size=settings.image_size,
        )

    if tasks.any_audio:
        if tts_backend == "elevenlabs":
            backend = create_backend(
                tts_backend,
                credentials.elevenlabs_api_key,
                base_url=settings.elevenlabs_url,
                models=settings.elevenlabs_models,
                timeout_seconds=settings.audio_timeout_seconds,
            )
        else:
            backend = create_backend(
                tts_backend,
                gemini_client,
                models=settings.gemini_tts_models,
                timeout_seconds=settings.audio_timeout_seconds,
            )
        services.synthesizer = AudioSynthesizer(
            backend,
            voices=voices_from_settings(settings),
            default_language=settings.target_language,
            cache=AudioCache(),
            max_attempts=settings.tts_max_attempts,
            backoff_seconds=settings.tts_backoff_seconds,
        )

    if tasks.image or tasks.any_audio:
        if credentials.local_storage_dir:
            services.asset_store = LocalAssetStore(
                credentials.local_storage_dir, base_url=settings.local_storage_base_url
            )
        else:
            services.asset_store = SupabaseAssetStore.from_credentials(
                credentials.storage_url or "",
                credentials.storage_key or "",
                bucket=settings.storage_bucket,
            )
    logger.debug(
        "Pipeline services ready",
        extra={"event": "pipeline.services.ready", "console_suppress": True},
    )
    return services


def build_orchestrator(
    settings: FactorySettings,
    tasks: TaskSelection,
    *,
    credentials: Optional[Credentials] = None,
    repository: Optional[DictionaryRepository] = None,
) -> BatchOrchestrator:
    return BatchOrchestrator(
        build_services(settings, tasks, credentials=credentials, repository=repository)
    )


__all__ = [
    "batch_config_from_settings",
    "build_orchestrator",
    "build_services",
    "credentials_from_settings",
    "voices_from_settings",
]
