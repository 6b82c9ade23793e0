"""Curses presentation layer."""

from .keys import KEY_BINDINGS, translate_key
from .painter import CursesPainter, rgb_to_ansi256
from .session import run_event_loop, run_presentation

__all__ = [
    "CursesPainter",
    "KEY_BINDINGS",
    "rgb_to_ansi256",
    "run_event_loop",
    "run_presentation",
    "translate_key",
]
