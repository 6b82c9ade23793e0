"""Terminal markdown slide decks."""

from .environment import load_environment

# Load environment variables from .env-style files as soon as the package is
# imported so configuration overrides are visible to every entry point.
load_environment()

__version__ = "0.3.0"

__all__ = ["__version__", "load_environment"]
