"""Configuration loading utilities."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from dictionary_factory import logging_manager

from .constants import DEFAULT_CONFIG_PATH, DEFAULT_LOCAL_CONFIG_PATH
from .settings import FactorySettings, apply_settings_updates, load_environment_overrides

logger = logging_manager.get_logger()
console_info = logging_manager.console_info
console_warning = logging_manager.console_warning

_ACTIVE_SETTINGS: Optional[FactorySettings] = None


def _read_config_json(
    path: Optional[Path], verbose: bool = False, label: str = "configuration"
) -> Dict[str, Any]:
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        if verbose:
            console_info("No %s found at %s.", label, path, logger_obj=logger)
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        console_warning(
            "Error loading %s from %s: %s. Proceeding without it.",
            label,
            path,
            exc,
            logger_obj=logger,
        )
        return {}
    if verbose:
        console_info("Loaded %s from %s", label, path, logger_obj=logger)
    return data if isinstance(data, dict) else {}


def _deep_merge_dict(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(
    config_file: Optional[str] = None,
    *,
    verbose: bool = False,
    include_environment: bool = True,
) -> FactorySettings:
    """Load ``conf/config.json``, the local override file and the environment."""

    global _ACTIVE_SETTINGS

    payload = _read_config_json(DEFAULT_CONFIG_PATH, verbose=verbose, label="default configuration")

    if config_file:
        override_path = Path(config_file).expanduser()
        if not override_path.is_absolute():
            override_path = (Path.cwd() / override_path).resolve()
    else:
        override_path = DEFAULT_LOCAL_CONFIG_PATH
    payload = _deep_merge_dict(
        payload,
        _read_config_json(override_path, verbose=verbose, label="local configuration"),
    )

    try:
        settings = FactorySettings.model_validate(payload)
    except ValidationError as exc:
        raise RuntimeError("Invalid configuration detected") from exc

    if include_environment:
        settings = apply_settings_updates(settings, load_environment_overrides())

    _ACTIVE_SETTINGS = settings
    return settings


def get_settings() -> FactorySettings:
    """Return the currently loaded :class:`FactorySettings` instance."""

    global _ACTIVE_SETTINGS
    if _ACTIVE_SETTINGS is None:
        _ACTIVE_SETTINGS = load_settings()
    return _ACTIVE_SETTINGS


def reset_settings() -> None:
    """Forget the cached settings so the next lookup reloads them."""

    global _ACTIVE_SETTINGS
    _ACTIVE_SETTINGS = None


__all__ = ["get_settings", "load_settings", "reset_settings"]
