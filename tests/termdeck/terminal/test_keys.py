from __future__ import annotations

import curses

import pytest

from termdeck.core.navigation import NavEvent
from termdeck.terminal.keys import translate_key


@pytest.mark.parametrize(
    "key, expected",
    [
        (curses.KEY_RIGHT, NavEvent.NEXT),
        ("l", NavEvent.NEXT),
        (" ", NavEvent.NEXT),
        (curses.KEY_LEFT, NavEvent.PREV),
        ("h", NavEvent.PREV),
        (curses.KEY_DOWN, NavEvent.SCROLL_DOWN),
        ("j", NavEvent.SCROLL_DOWN),
        (curses.KEY_UP, NavEvent.SCROLL_UP),
        ("k", NavEvent.SCROLL_UP),
        ("q", NavEvent.QUIT),
        ("\x1b", NavEvent.QUIT),
        (27, NavEvent.QUIT),
        (ord("l"), NavEvent.NEXT),
    ],
)
def test_bound_keys(key, expected):
    assert translate_key(key) is expected


@pytest.mark.parametrize("key", ["x", "Q", curses.KEY_HOME, 0])
def test_unbound_keys_are_ignored(key):
    assert translate_key(key) is None
