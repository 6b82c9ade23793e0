"""Keyboard bindings for the presentation session."""

from __future__ import annotations

import curses
from typing import Dict, Optional, Union

from termdeck.core.navigation import NavEvent

ESCAPE = "\x1b"

KEY_BINDINGS: Dict[Union[int, str], NavEvent] = {
    curses.KEY_RIGHT: NavEvent.NEXT,
    "l": NavEvent.NEXT,
    " ": NavEvent.NEXT,
    curses.KEY_LEFT: NavEvent.PREV,
    "h": NavEvent.PREV,
    curses.KEY_DOWN: NavEvent.SCROLL_DOWN,
    "j": NavEvent.SCROLL_DOWN,
    curses.KEY_UP: NavEvent.SCROLL_UP,
    "k": NavEvent.SCROLL_UP,
    "q": NavEvent.QUIT,
    ESCAPE: NavEvent.QUIT,
}


def translate_key(key: Union[int, str]) -> Optional[NavEvent]:
    """Map a curses key code or character to a navigation event.

    ``getch`` reports plain characters as integers while ``get_wch`` returns
    them as strings; both forms are accepted. Unbound keys map to ``None``.
    """

    if isinstance(key, int) and 0 <= key < 256 and key not in KEY_BINDINGS:
        key = chr(key)
    return KEY_BINDINGS.get(key)


__all__ = ["ESCAPE", "KEY_BINDINGS", "translate_key"]
