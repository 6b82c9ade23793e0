"""Pydantic models and helper utilities for configuration values."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from termdeck import logging_manager

from .constants import DEFAULT_CODE_THEME, DEFAULT_HORIZONTAL_MARGIN, DEFAULT_TAB_WIDTH

logger = logging_manager.get_logger()


class TermDeckSettings(BaseModel):
    """Typed representation of the presenter configuration."""

    model_config = ConfigDict(extra="ignore")

    code_theme: str = DEFAULT_CODE_THEME
    tab_width: int = Field(default=DEFAULT_TAB_WIDTH, ge=1, le=16)
    horizontal_margin: int = Field(default=DEFAULT_HORIZONTAL_MARGIN, ge=0, le=20)
    softbreak_as_newline: bool = True
    debug: bool = False


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    code_theme: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("TERMDECK_CODE_THEME")
    )
    tab_width: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("TERMDECK_TAB_WIDTH")
    )
    horizontal_margin: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("TERMDECK_MARGIN", "TERMDECK_HORIZONTAL_MARGIN")
    )
    softbreak_as_newline: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("TERMDECK_SOFTBREAK_AS_NEWLINE")
    )
    debug: Optional[bool] = Field(default=None, validation_alias=AliasChoices("TERMDECK_DEBUG"))


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
    settings: TermDeckSettings, updates: Dict[str, Any]
) -> TermDeckSettings:
    """Return a copy of ``settings`` validated against ``updates`` if any values exist."""

    if not updates:
        return settings
    payload = settings.model_dump()
    payload.update(updates)
    return TermDeckSettings.model_validate(payload)


__all__ = [
    "EnvironmentOverrides",
    "TermDeckSettings",
    "apply_settings_updates",
    "load_environment_overrides",
]
