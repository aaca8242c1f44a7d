"""Constants and default values for configuration management."""
from __future__ import annotations

from pathlib import Path

MODULE_DIR = Path(__file__).resolve().parent.parent
SCRIPT_DIR = MODULE_DIR.parent.resolve()
CONF_DIR = SCRIPT_DIR / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "config.json"
DEFAULT_LOCAL_CONFIG_PATH = CONF_DIR / "config.local.json"

DEFAULT_STORAGE_BUCKET = "dictionary-assets"
DEFAULT_TARGET_LANGUAGE = "nl"
DEFAULT_SOURCE_LANGUAGE = "en"

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-3-pro-image-preview"
DEFAULT_IMAGE_SIZE = "1K"
DEFAULT_GEMINI_TTS_MODELS = ("gemini-2.5-flash-preview-tts", "gemini-2.5-pro-preview-tts")
DEFAULT_GEMINI_VOICE = "Puck"
DEFAULT_GEMINI_EXAMPLE_VOICE = "Kore"
DEFAULT_ELEVENLABS_MODELS = ("eleven_multilingual_v2", "eleven_turbo_v2_5")
DEFAULT_ELEVENLABS_VOICE = "pNInz6obpgDQGcFmaJgB"
DEFAULT_ELEVENLABS_URL = "https://api.elevenlabs.io/v1/text-to-speech"
DEFAULT_CHAT_LLM_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_CHAT_LLM_MODEL = "gpt-4o-mini"

DEFAULT_TEXT_TIMEOUT_SECONDS = 20.0
DEFAULT_IMAGE_TIMEOUT_SECONDS = 25.0
DEFAULT_AUDIO_TIMEOUT_SECONDS = 30.0
DEFAULT_INTER_TERM_DELAY_SECONDS = 1.0
DEFAULT_AUDIO_BUFFER_DELAY_SECONDS = 0.5
DEFAULT_TTS_MAX_ATTEMPTS = 2
DEFAULT_TTS_BACKOFF_SECONDS = 1.0

DEFAULT_WATERMARK_TEXT = "@Parlolo"
DEFAULT_IMAGE_WIDTH = 960
DEFAULT_IMAGE_HEIGHT = 540
DEFAULT_JPEG_QUALITY = 80
DEFAULT_MAX_IMAGE_BYTES = 300 * 1024
