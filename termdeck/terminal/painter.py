"""Paint :class:`~termdeck.core.frame.Frame` grids onto a curses window."""

from __future__ import annotations

import curses
from typing import Any, Dict, List, Optional, Tuple

from termdeck.core.frame import Frame
from termdeck.core.models import Style

CODE_BACKGROUND = "#282828"

NAMED_COLORS: Dict[str, int] = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}

# Bright black; terminals with fewer than 16 colours fall back to white.
GRAY_INDEX = 8


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    """Map an RGB tuple (0-255) to the nearest 256-color ANSI index."""

    r_ = int(round(r / 255 * 5))
    g_ = int(round(g / 255 * 5))
    b_ = int(round(b / 255 * 5))
    return 16 + 36 * r_ + 6 * g_ + b_


def rgb_to_basic(r: int, g: int, b: int) -> int:
    """Map an RGB tuple to the nearest of the eight base terminal colours."""

    return (1 if r > 127 else 0) | (2 if g > 127 else 0) | (4 if b > 127 else 0)


def parse_hex_color(value: str) -> Optional[Tuple[int, int, int]]:
    digits = value.lstrip("#")
    if len(digits) != 6:
        return None
    try:
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
    except ValueError:
        return None


class CursesPainter:
    """Draw frames cell by cell, allocating colour pairs on demand."""

    def __init__(self, screen: Any, *, colors: Optional[int] = None) -> None:
        self.screen = screen
        self.colors = colors if colors is not None else getattr(curses, "COLORS", 8)
        self._pairs: Dict[Tuple[int, int], int] = {}
        self._next_pair = 1

    def color_index(self, color: Optional[str]) -> int:
        if not color:
            return -1
        if color.startswith("#"):
            rgb = parse_hex_color(color)
            if rgb is None:
                return -1
            if self.colors >= 256:
                return rgb_to_ansi256(*rgb)
            return rgb_to_basic(*rgb)
        if color == "gray":
            return GRAY_INDEX if self.colors >= 16 else curses.COLOR_WHITE
        return NAMED_COLORS.get(color, -1)

    def _pair_number(self, fg: int, bg: int) -> int:
        if fg == -1 and bg == -1:
            return 0
        key = (fg, bg)
        pair = self._pairs.get(key)
        if pair is not None:
            return pair
        if self._next_pair >= getattr(curses, "COLOR_PAIRS", 64):
            return 0
        pair = self._next_pair
        try:
            curses.init_pair(pair, fg, bg)
        except curses.error:
            return 0
        self._next_pair += 1
        self._pairs[key] = pair
        return pair

    def attributes(self, style: Style) -> int:
        bg = self.color_index(CODE_BACKGROUND) if style.code else -1
        attr = curses.color_pair(self._pair_number(self.color_index(style.fg), bg))
        if style.bold:
            attr |= curses.A_BOLD
        if style.italic:
            attr |= getattr(curses, "A_ITALIC", 0)
        return attr

    def _write(self, y: int, x: int, text: str, style: Style) -> None:
        try:
            self.screen.addstr(y, x, text, self.attributes(style))
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen.
            pass

    def paint(self, frame: Frame) -> None:
        self.screen.erase()
        for y, row in enumerate(frame.rows):
            segment: List[str] = []
            segment_style: Optional[Style] = None
            segment_x = 0
            x = 0
            for cell in row:
                if cell.is_continuation:
                    x += 1
                    continue
                if segment and cell.style != segment_style:
                    self._write(y, segment_x, "".join(segment), segment_style)
                    segment = []
                if not segment:
                    segment_x = x
                    segment_style = cell.style
                segment.append(cell.text)
                x += 1
            if segment and segment_style is not None:
                self._write(y, segment_x, "".join(segment), segment_style)
        self.screen.refresh()


__all__ = ["CODE_BACKGROUND", "CursesPainter", "rgb_to_ansi256", "rgb_to_basic"]
