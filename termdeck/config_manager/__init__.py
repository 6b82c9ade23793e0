"""High-level configuration management for termdeck."""
from __future__ import annotations

from .constants import (
    CONF_DIR,
    DEFAULT_CODE_THEME,
    DEFAULT_CONFIG_PATH,
    DEFAULT_HORIZONTAL_MARGIN,
    DEFAULT_LOCAL_CONFIG_PATH,
    DEFAULT_TAB_WIDTH,
)
from .loader import get_settings, load_configuration, reset_settings
from .settings import EnvironmentOverrides, TermDeckSettings

__all__ = [
    "CONF_DIR",
    "DEFAULT_CODE_THEME",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_HORIZONTAL_MARGIN",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_TAB_WIDTH",
    "EnvironmentOverrides",
    "TermDeckSettings",
    "get_settings",
    "load_configuration",
    "reset_settings",
]
