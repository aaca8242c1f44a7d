"""Pydantic models and helper utilities for configuration values."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from dictionary_factory import logging_manager

from .constants import (
    DEFAULT_AUDIO_BUFFER_DELAY_SECONDS,
    DEFAULT_AUDIO_TIMEOUT_SECONDS,
    DEFAULT_CHAT_LLM_MODEL,
    DEFAULT_CHAT_LLM_URL,
    DEFAULT_ELEVENLABS_MODELS,
    DEFAULT_ELEVENLABS_URL,
    DEFAULT_ELEVENLABS_VOICE,
    DEFAULT_GEMINI_TTS_MODELS,
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_IMAGE_TIMEOUT_SECONDS,
    DEFAULT_IMAGE_WIDTH,
    DEFAULT_INTER_TERM_DELAY_SECONDS,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_MAX_IMAGE_BYTES,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_STORAGE_BUCKET,
    DEFAULT_TARGET_LANGUAGE,
    DEFAULT_TEXT_MODEL,
    DEFAULT_TEXT_TIMEOUT_SECONDS,
    DEFAULT_TTS_BACKOFF_SECONDS,
    DEFAULT_TTS_MAX_ATTEMPTS,
    DEFAULT_WATERMARK_TEXT,
)

logger = logging_manager.get_logger()


class FactorySettings(BaseModel):
    """Typed representation of the dictionary-factory configuration."""

    model_config = ConfigDict(extra="allow")

    source_language: str = DEFAULT_SOURCE_LANGUAGE
    target_language: str = DEFAULT_TARGET_LANGUAGE
    database_url: Optional[SecretStr] = None

    # Providers
    gemini_api_key: Optional[SecretStr] = None
    text_model: str = DEFAULT_TEXT_MODEL
    text_providers: list[str] = Field(default_factory=lambda: ["gemini", "chat"])
    chat_llm_url: str = DEFAULT_CHAT_LLM_URL
    chat_llm_model: str = DEFAULT_CHAT_LLM_MODEL
    chat_llm_api_key: Optional[SecretStr] = None
    image_model: str = DEFAULT_IMAGE_MODEL
    image_size: str = DEFAULT_IMAGE_SIZE
    tts_backend: str = "gemini"
    gemini_tts_models: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GEMINI_TTS_MODELS)
    )
    elevenlabs_api_key: Optional[SecretStr] = None
    elevenlabs_url: str = DEFAULT_ELEVENLABS_URL
    elevenlabs_models: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ELEVENLABS_MODELS)
    )

    # Voices per role; unset roles use the backend default
    voice_word: Optional[str] = None
    voice_example_1: Optional[str] = None
    voice_example_2: Optional[str] = None
    voice_usage_note: Optional[str] = None
    elevenlabs_voice: str = DEFAULT_ELEVENLABS_VOICE

    # Object storage
    supabase_url: Optional[str] = None
    supabase_service_role_key: Optional[SecretStr] = None
    storage_bucket: str = DEFAULT_STORAGE_BUCKET
    local_storage_dir: Optional[str] = None
    local_storage_base_url: Optional[str] = None

    # Timing
    text_timeout_seconds: float = DEFAULT_TEXT_TIMEOUT_SECONDS
    image_timeout_seconds: float = DEFAULT_IMAGE_TIMEOUT_SECONDS
    audio_timeout_seconds: float = DEFAULT_AUDIO_TIMEOUT_SECONDS
    inter_term_delay_seconds: float = DEFAULT_INTER_TERM_DELAY_SECONDS
    audio_buffer_delay_seconds: float = DEFAULT_AUDIO_BUFFER_DELAY_SECONDS
    tts_max_attempts: int = DEFAULT_TTS_MAX_ATTEMPTS
    tts_backoff_seconds: float = DEFAULT_TTS_BACKOFF_SECONDS

    # Image post-processing
    watermark_text: str = DEFAULT_WATERMARK_TEXT
    image_width: int = DEFAULT_IMAGE_WIDTH
    image_height: int = DEFAULT_IMAGE_HEIGHT
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    image_seed: Optional[int] = None

    debug: bool = False


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    database_url: Optional[SecretStr] = Field(
        default=None, validation_alias=AliasChoices("DATABASE_URL", "DICTIONARY_DATABASE_URL")
    )
    gemini_api_key: Optional[SecretStr] = Field(
        default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY")
    )
    elevenlabs_api_key: Optional[SecretStr] = Field(
        default=None, validation_alias=AliasChoices("ELEVENLABS_API_KEY")
    )
    supabase_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("SUPABASE_URL")
    )
    supabase_service_role_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_KEY"),
    )
    storage_bucket: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DICTIONARY_STORAGE_BUCKET")
    )
    chat_llm_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LLM_API_URL")
    )
    chat_llm_api_key: Optional[SecretStr] = Field(
        default=None, validation_alias=AliasChoices("LLM_API_KEY")
    )
    chat_llm_model: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LLM_MODEL")
    )
    target_language: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DICTIONARY_TARGET_LANGUAGE")
    )
    tts_backend: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DICTIONARY_TTS_BACKEND")
    )
    debug: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("DICTIONARY_FACTORY_DEBUG")
    )


def load_environment_overrides() -> Dict[str, Any]:
    """Return configuration overrides sourced from environment variables."""

    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        logger.warning(
            "Invalid environment configuration detected; using defaults.",
            extra={
                "event": "config.env.validation_error",
                "error": str(exc),
                "console_suppress": True,
            },
        )
        return {}
    return overrides.model_dump(exclude_none=True)


def apply_settings_updates(
    settings: FactorySettings, updates: Dict[str, Any]
) -> FactorySettings:
    """Return a copy of ``settings`` updated with ``updates`` if any values exist."""

    if not updates:
        return settings
    return settings.model_copy(update=updates)


__all__ = [
    "EnvironmentOverrides",
    "FactorySettings",
    "apply_settings_updates",
    "load_environment_overrides",
]
