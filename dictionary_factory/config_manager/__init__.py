"""High-level configuration management for dictionary-factory."""
from __future__ import annotations

from .constants import (
    CONF_DIR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_LOCAL_CONFIG_PATH,
)
from .loader import get_settings, load_settings, reset_settings
from .settings import (
    EnvironmentOverrides,
    FactorySettings,
    apply_settings_updates,
    load_environment_overrides,
)

__all__ = [
    "CONF_DIR",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "EnvironmentOverrides",
    "FactorySettings",
    "apply_settings_updates",
    "get_settings",
    "load_environment_overrides",
    "load_settings",
    "reset_settings",
]
