"""Turn compiled slides into wrapped terminal lines for a given width."""

from __future__ import annotations

from typing import Dict, List, Tuple

from .models import (
    Block,
    CodeBlock,
    Deck,
    Heading,
    Line,
    ListItem,
    Paragraph,
    Slide,
    StyledRun,
    Table,
    ThematicBreak,
)
from .tables import render_table
from .theme import DEFAULT_THEME, Theme
from .wrapping import line_width, wrap_chars, wrap_runs

FOOTER_HEIGHT = 1
BULLET = "• "
INDENT_PER_DEPTH = 2


def body_size(width: int, height: int, margin: int) -> Tuple[int, int]:
    """Return the ``(width, height)`` available to slide content."""

    body_width = max(1, width - 2 * max(0, margin))
    body_height = max(1, height - FOOTER_HEIGHT)
    return body_width, body_height


def _centered(lines: List[Line], width: int) -> List[Line]:
    centered: List[Line] = []
    for line in lines:
        padding = max(0, (width - line_width(line)) // 2)
        if padding:
            centered.append((StyledRun(" " * padding),) + tuple(line))
        else:
            centered.append(line)
    return centered


def _item_marker(item: ListItem) -> str:
    if item.ordered:
        return f"{item.index if item.index is not None else 1}. "
    return BULLET


def _list_item_lines(item: ListItem, width: int, theme: Theme) -> List[Line]:
    indent = " " * (INDENT_PER_DEPTH * max(0, item.depth))
    marker = _item_marker(item)
    next_prefix = (StyledRun(indent + " " * len(marker)),)
    if item.continuation:
        first_prefix = next_prefix
    else:
        first_prefix = (StyledRun(indent), StyledRun(marker, theme.bullet))
    return wrap_runs(item.runs, width, first_prefix=first_prefix, next_prefix=next_prefix)


def _code_lines(block: CodeBlock, width: int, theme: Theme) -> List[Line]:
    gutter = (StyledRun("│ ", theme.code_gutter),)
    if not block.lines:
        return [gutter]
    lines: List[Line] = []
    for runs in block.lines:
        lines.extend(wrap_chars(runs, width, first_prefix=gutter, next_prefix=gutter))
    return lines


def block_lines(block: Block, width: int, theme: Theme = DEFAULT_THEME) -> List[Line]:
    """Lay out a single block at ``width`` cells."""

    if isinstance(block, (Heading, Paragraph)):
        return wrap_runs(block.runs, width)
    if isinstance(block, ListItem):
        return _list_item_lines(block, width, theme)
    if isinstance(block, CodeBlock):
        return _code_lines(block, width, theme)
    if isinstance(block, Table):
        return render_table(block, width, theme)
    if isinstance(block, ThematicBreak):
        return [(StyledRun("─" * width, theme.rule),)]
    raise TypeError(f"Unsupported block type: {type(block).__name__}")


def layout_slide(slide: Slide, width: int, theme: Theme = DEFAULT_THEME) -> List[Line]:
    """Return every line of ``slide`` wrapped to ``width`` cells.

    The title is centred and followed by a blank line; blocks are separated by
    one blank line except between consecutive list items.
    """

    width = max(1, width)
    lines: List[Line] = []
    if slide.title:
        lines.extend(_centered(wrap_runs(slide.title, width), width))
        lines.append(())

    previous = None
    for block in slide.blocks:
        if previous is not None and not (isinstance(previous, ListItem) and isinstance(block, ListItem)):
            lines.append(())
        lines.extend(block_lines(block, width, theme))
        previous = block
    return lines


class DeckLayout:
    """Per-width cache of slide layouts.

    The cache holds layouts for a single width and is dropped whenever a
    different width is requested (terminal resize).
    """

    def __init__(self, deck: Deck, theme: Theme = DEFAULT_THEME) -> None:
        self.deck = deck
        self.theme = theme
        self._width = None
        self._cache: Dict[int, List[Line]] = {}

    def lines(self, index: int, width: int) -> List[Line]:
        width = max(1, width)
        if width != self._width:
            self._cache.clear()
            self._width = width
        cached = self._cache.get(index)
        if cached is None:
            cached = layout_slide(self.deck[index], width, self.theme)
            self._cache[index] = cached
        return cached

    def content_height(self, index: int, width: int) -> int:
        return len(self.lines(index, width))


__all__ = ["DeckLayout", "block_lines", "body_size", "layout_slide"]
