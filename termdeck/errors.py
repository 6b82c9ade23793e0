"""Common termdeck exceptions."""

from __future__ import annotations


class TermDeckError(RuntimeError):
    """Base class for errors reported to the user by the CLI."""


class DocumentLoadError(TermDeckError):
    """Raised when the markdown document cannot be read or decoded."""


class ConfigurationError(TermDeckError):
    """Raised when a configuration file is present but invalid."""


__all__ = ["ConfigurationError", "DocumentLoadError", "TermDeckError"]
