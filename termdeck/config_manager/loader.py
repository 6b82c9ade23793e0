"""Configuration loading utilities."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from termdeck import logging_manager
from termdeck.errors import ConfigurationError

from .constants import DEFAULT_CONFIG_PATH, DEFAULT_LOCAL_CONFIG_PATH
from .settings import TermDeckSettings, apply_settings_updates, load_environment_overrides

logger = logging_manager.get_logger()

_ACTIVE_SETTINGS: Optional[TermDeckSettings] = None


def _read_config_json(path: Optional[Path], label: str = "configuration") -> Dict[str, Any]:
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        logger.debug(
            "No %s found at %s.",
            label,
            path,
            extra={"event": "config.file.missing", "console_suppress": True},
        )
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Unable to read {label} from {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"The {label} at {path} must contain a JSON object")
    logger.debug(
        "Loaded %s from %s",
        label,
        path,
        extra={"event": "config.file.loaded", "console_suppress": True},
    )
    return data


def _deep_merge_dict(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def _apply_environment(settings: TermDeckSettings) -> TermDeckSettings:
    try:
        return apply_settings_updates(settings, load_environment_overrides())
    except ValidationError as exc:
        logger.warning(
            "Ignoring invalid environment overrides: %s",
            exc,
            extra={"event": "config.env.validation_error", "console_suppress": True},
        )
        return settings


def load_configuration(
    config_file: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> TermDeckSettings:
    """Load the layered configuration and activate the resulting settings.

    Layers, lowest precedence first: model defaults, ``conf/config.json``,
    ``conf/config.local.json`` (or ``config_file``), environment variables and
    finally ``overrides`` (CLI flags). ``None`` values in ``overrides`` are
    ignored.
    """

    global _ACTIVE_SETTINGS

    payload = _read_config_json(DEFAULT_CONFIG_PATH, label="default configuration")

    if config_file:
        override_path = Path(config_file).expanduser()
        if not override_path.is_absolute():
            override_path = (Path.cwd() / override_path).resolve()
        if not override_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {override_path}")
    else:
        override_path = DEFAULT_LOCAL_CONFIG_PATH
    payload = _deep_merge_dict(payload, _read_config_json(override_path, label="local configuration"))

    try:
        settings = TermDeckSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration detected: {exc}") from exc
    settings = _apply_environment(settings)
    explicit = {key: value for key, value in (overrides or {}).items() if value is not None}
    try:
        settings = apply_settings_updates(settings, explicit)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration detected: {exc}") from exc

    _ACTIVE_SETTINGS = settings
    return settings


def get_settings() -> TermDeckSettings:
    """Return the currently loaded :class:`TermDeckSettings` instance."""

    global _ACTIVE_SETTINGS
    if _ACTIVE_SETTINGS is None:
        _ACTIVE_SETTINGS = _apply_environment(TermDeckSettings())
    return _ACTIVE_SETTINGS


def reset_settings() -> None:
    """Forget the active settings so the next lookup reloads them."""

    global _ACTIVE_SETTINGS
    _ACTIVE_SETTINGS = None


__all__ = ["get_settings", "load_configuration", "reset_settings"]
