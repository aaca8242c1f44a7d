from __future__ import annotations

import json
import os

import pytest

from dictionary_factory import environment
from dictionary_factory.config_manager import loader
from dictionary_factory.config_manager.settings import (
    FactorySettings,
    apply_settings_updates,
    load_environment_overrides,
)

pytestmark = pytest.mark.config


@pytest.fixture(autouse=True)
def _reset_cached_settings():
    loader.reset_settings()
    yield
    loader.reset_settings()


def _write_json(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_defaults_come_from_config_json(isolated_env, tmp_path):
    settings = loader.load_settings(str(tmp_path / "absent.json"))

    assert settings.target_language == "nl"
    assert settings.voice_example_2 is None
    assert settings.max_image_bytes == 300 * 1024
    assert settings.database_url is None


def test_override_file_is_merged_over_defaults(isolated_env, tmp_path):
    override = _write_json(tmp_path / "local.json", {"target_language": "de", "voice_word": "Fenrir"})

    settings = loader.load_settings(override)

    assert settings.target_language == "de"
    assert settings.voice_word == "Fenrir"
    assert settings.voice_example_2 is None


def test_environment_wins_over_files(isolated_env, tmp_path):
    override = _write_json(tmp_path / "local.json", {"target_language": "de"})
    isolated_env.setenv("DICTIONARY_TARGET_LANGUAGE", "fr")
    isolated_env.setenv("GOOGLE_API_KEY", "from-google-alias")
    isolated_env.setenv("SUPABASE_KEY", "service-role")

    settings = loader.load_settings(override)

    assert settings.target_language == "fr"
    assert settings.gemini_api_key.get_secret_value() == "from-google-alias"
    assert settings.supabase_service_role_key.get_secret_value() == "service-role"


def test_environment_can_be_ignored(isolated_env, tmp_path):
    isolated_env.setenv("DATABASE_URL", "postgresql://db.test/dictionary")

    settings = loader.load_settings(str(tmp_path / "absent.json"), include_environment=False)

    assert settings.database_url is None


def test_invalid_values_raise(isolated_env, tmp_path):
    override = _write_json(tmp_path / "bad.json", {"image_width": "very wide"})

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        loader.load_settings(override)


def test_malformed_override_file_is_ignored(isolated_env, tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    settings = loader.load_settings(str(broken))

    assert settings.target_language == "nl"


def test_get_settings_caches_until_reset(isolated_env):
    first = loader.get_settings()

    assert loader.get_settings() is first
    loader.reset_settings()
    assert loader.get_settings() is not first


def test_invalid_environment_is_ignored(isolated_env):
    isolated_env.setenv("DICTIONARY_FACTORY_DEBUG", "not-a-bool")

    assert load_environment_overrides() == {}


def test_apply_settings_updates_returns_copy():
    settings = FactorySettings()

    updated = apply_settings_updates(settings, {"debug": True})

    assert updated.debug is True
    assert settings.debug is False
    assert apply_settings_updates(settings, {}) is settings


def test_dotenv_file_is_loaded_without_overriding(monkeypatch, tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "DICTIONARY_TEST_FROM_DOTENV=loaded\nDICTIONARY_TEST_PRESET=from-file\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DICTIONARY_TEST_FROM_DOTENV", "placeholder")
    monkeypatch.delenv("DICTIONARY_TEST_FROM_DOTENV")
    monkeypatch.setenv("DICTIONARY_TEST_PRESET", "from-shell")
    monkeypatch.setenv("DICTIONARY_FACTORY_ENV_FILE", str(env_file))

    loaded = environment.load_environment(force=True)

    assert env_file.resolve() in loaded
    assert os.environ["DICTIONARY_TEST_FROM_DOTENV"] == "loaded"
    assert os.environ["DICTIONARY_TEST_PRESET"] == "from-shell"


def test_nearest_dotenv_is_used_without_explicit_file(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("DICTIONARY_TEST_NEAREST=yes\n", encoding="utf-8")
    workdir = tmp_path / "batches"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.delenv(environment.ENV_FILE_VAR, raising=False)
    monkeypatch.setenv("DICTIONARY_TEST_NEAREST", "placeholder")
    monkeypatch.delenv("DICTIONARY_TEST_NEAREST")

    loaded = environment.load_environment(force=True)

    assert loaded == ((tmp_path / ".env").resolve(),)
    assert os.environ["DICTIONARY_TEST_NEAREST"] == "yes"
    assert environment.load_environment() is loaded
