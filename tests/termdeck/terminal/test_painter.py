from __future__ import annotations

import curses

import pytest

from termdeck.core.frame import render_frame
from termdeck.core.models import Style, StyledRun
from termdeck.terminal import painter as painter_mod
from termdeck.terminal.painter import CursesPainter, rgb_to_ansi256, rgb_to_basic


class FakeScreen:
    def __init__(self, fail_at=None):
        self.calls = []
        self.fail_at = fail_at
        self.refreshed = False

    def erase(self):
        self.calls.clear()

    def addstr(self, y, x, text, attr=0):
        if self.fail_at == (y, x):
            raise curses.error("addwstr() returned ERR")
        self.calls.append((y, x, text, attr))

    def refresh(self):
        self.refreshed = True


@pytest.fixture
def pairs(monkeypatch):
    initialised = []
    monkeypatch.setattr(painter_mod.curses, "init_pair", lambda *args: initialised.append(args))
    monkeypatch.setattr(painter_mod.curses, "color_pair", lambda number: number << 8)
    monkeypatch.setattr(painter_mod.curses, "COLOR_PAIRS", 64, raising=False)
    return initialised


def test_rgb_mapping():
    assert rgb_to_ansi256(0, 0, 0) == 16
    assert rgb_to_ansi256(255, 0, 0) == 196
    assert rgb_to_ansi256(255, 255, 255) == 231
    assert rgb_to_basic(255, 0, 0) == curses.COLOR_RED
    assert rgb_to_basic(0, 200, 200) == curses.COLOR_CYAN


def test_colour_lookup_depends_on_palette_size():
    rich = CursesPainter(FakeScreen(), colors=256)
    basic = CursesPainter(FakeScreen(), colors=8)

    assert rich.color_index("#ff0000") == 196
    assert basic.color_index("#ff0000") == curses.COLOR_RED
    assert rich.color_index("gray") == 8
    assert basic.color_index("gray") == curses.COLOR_WHITE
    assert rich.color_index("cyan") == curses.COLOR_CYAN
    assert rich.color_index(None) == -1
    assert rich.color_index("#zzzzzz") == -1


def test_pairs_are_allocated_once_per_colour_combination(pairs):
    painter = CursesPainter(FakeScreen(), colors=256)

    first = painter.attributes(Style(fg="red", bold=True))
    second = painter.attributes(Style(fg="red"))

    assert pairs == [(1, curses.COLOR_RED, -1)]
    assert first == (1 << 8) | curses.A_BOLD
    assert second == 1 << 8


def test_inline_code_gets_a_background(pairs):
    painter = CursesPainter(FakeScreen(), colors=256)

    painter.attributes(Style(fg="green", code=True))

    assert pairs == [(1, curses.COLOR_GREEN, rgb_to_ansi256(0x28, 0x28, 0x28))]


def test_paint_groups_cells_by_style(pairs):
    screen = FakeScreen()
    red = Style(fg="red")
    frame = render_frame([(StyledRun("日x", red), StyledRun("y"))], 0, 5, 1)

    CursesPainter(screen, colors=256).paint(frame)

    assert [(y, x, text) for y, x, text, _ in screen.calls] == [(0, 0, "日x"), (0, 3, "y ")]
    assert screen.refreshed


def test_edge_write_errors_are_swallowed(pairs):
    screen = FakeScreen(fail_at=(0, 0))
    frame = render_frame([(StyledRun("abc"),)], 0, 3, 1)

    CursesPainter(screen, colors=8).paint(frame)

    assert screen.refreshed
