"""Shared constants for the configuration manager package."""
from __future__ import annotations

from pathlib import Path

MODULE_DIR = Path(__file__).resolve().parent
SCRIPT_DIR = MODULE_DIR.parent.parent.resolve()
CONF_DIR = SCRIPT_DIR / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "config.json"
DEFAULT_LOCAL_CONFIG_PATH = CONF_DIR / "config.local.json"

DEFAULT_CODE_THEME = "monokai"
DEFAULT_TAB_WIDTH = 4
DEFAULT_HORIZONTAL_MARGIN = 2

__all__ = [
    "MODULE_DIR",
    "SCRIPT_DIR",
    "CONF_DIR",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_CODE_THEME",
    "DEFAULT_TAB_WIDTH",
    "DEFAULT_HORIZONTAL_MARGIN",
]
