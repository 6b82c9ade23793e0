"""Convert laid-out lines into fixed-size grids of styled cells."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from termdeck.text import grapheme_width, split_graphemes

from .layout import DeckLayout, body_size
from .models import PLAIN, Deck, Line, Style, StyledRun
from .navigation import ViewportState
from .theme import DEFAULT_THEME, Theme

FOOTER_TEMPLATE = " Slide {current}/{total} | ← → Navigate | ↑ ↓ Scroll | q Quit "


@dataclass(frozen=True, slots=True)
class Cell:
    """One terminal cell.

    The right half of a double-width grapheme is a continuation cell whose
    ``text`` is empty; painters skip it.
    """

    text: str = " "
    style: Style = PLAIN

    @property
    def is_continuation(self) -> bool:
        return self.text == ""


BLANK = Cell()

Row = Tuple[Cell, ...]


@dataclass(frozen=True, slots=True)
class Frame:
    width: int
    height: int
    rows: Tuple[Row, ...]

    def row_text(self, index: int) -> str:
        return "".join(cell.text for cell in self.rows[index])

    def text(self) -> str:
        return "\n".join(self.row_text(index) for index in range(len(self.rows)))


def line_cells(line: Line, width: int, fill: Style = PLAIN) -> Row:
    """Return exactly ``width`` cells for ``line``, truncating or padding it."""

    cells: List[Cell] = []
    for run in line:
        if run.is_line_break:
            continue
        for grapheme in split_graphemes(run.text):
            cells_needed = grapheme_width(grapheme)
            if cells_needed == 0:
                # Combining marks join the previous cell; control characters are dropped.
                if cells and grapheme.isprintable():
                    previous = cells[-1]
                    if previous.is_continuation and len(cells) > 1:
                        cells[-2] = Cell(cells[-2].text + grapheme, cells[-2].style)
                    else:
                        cells[-1] = Cell(previous.text + grapheme, previous.style)
                continue
            if len(cells) + cells_needed > width:
                if len(cells) < width:
                    cells.append(Cell(" ", run.style))
                return tuple(cells) + (Cell(" ", fill),) * (width - len(cells))
            cells.append(Cell(grapheme, run.style))
            if cells_needed == 2:
                cells.append(Cell("", run.style))
    return tuple(cells) + (Cell(" ", fill),) * (width - len(cells))


def render_frame(lines: Sequence[Line], scroll_offset: int, width: int, height: int) -> Frame:
    """Select the visible window of ``lines`` and convert it to cells.

    Rows past the end of the content are blank.
    """

    width = max(0, width)
    height = max(0, height)
    start = max(0, scroll_offset)
    rows: List[Row] = []
    for position in range(start, start + height):
        line = lines[position] if position < len(lines) else ()
        rows.append(line_cells(line, width))
    return Frame(width=width, height=height, rows=tuple(rows))


def footer_text(state: ViewportState, slide_count: int) -> str:
    return FOOTER_TEMPLATE.format(current=state.slide_index + 1, total=slide_count)


def render_screen(
    deck: Deck,
    layout: DeckLayout,
    state: ViewportState,
    margin: int = 2,
    theme: Theme = DEFAULT_THEME,
) -> Frame:
    """Compose the full screen: the slide body inset by ``margin`` plus the footer row."""

    width = max(0, state.terminal_width)
    height = max(0, state.terminal_height)
    body_width, body_height = body_size(width, height, margin)
    body = render_frame(
        layout.lines(state.slide_index, body_width),
        state.scroll_offset,
        body_width,
        body_height,
    )

    inset = (BLANK,) * max(0, min(margin, width))
    rows: List[Row] = []
    for body_row in body.rows[: max(0, height - 1)]:
        row = (inset + body_row)[:width]
        rows.append(row + (BLANK,) * (width - len(row)))
    if height:
        footer_line = (StyledRun(footer_text(state, len(deck)), theme.footer),)
        rows.append(line_cells(footer_line, width, theme.footer))
    return Frame(width=width, height=len(rows), rows=tuple(rows))


__all__ = ["BLANK", "Cell", "Frame", "footer_text", "line_cells", "render_frame", "render_screen"]
