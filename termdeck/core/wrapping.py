"""Width-aware wrapping of styled runs into terminal lines."""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from termdeck.text import grapheme_width, split_graphemes, text_width

from .models import Line, Style, StyledRun

_SEGMENT_PATTERN = re.compile(r"\s+|\S+")


class _LineBuilder:
    """Accumulates runs for the line being filled, merging equal styles."""

    def __init__(self, width: int, first_prefix: Sequence[StyledRun], next_prefix: Sequence[StyledRun]) -> None:
        self.width = max(1, width)
        self.next_prefix = tuple(next_prefix)
        self.lines: List[Line] = []
        self._runs: List[StyledRun] = []
        self._used = 0
        self._content = 0
        self._start(tuple(first_prefix))

    def _start(self, prefix: Tuple[StyledRun, ...]) -> None:
        self._runs = []
        self._used = 0
        self._content = 0
        for run in prefix:
            self._push(run.text, run.style, count=False)

    @property
    def remaining(self) -> int:
        return self.width - self._used

    @property
    def has_content(self) -> bool:
        return self._content > 0

    def _push(self, value: str, style: Style, *, count: bool = True) -> None:
        if not value:
            return
        cells = text_width(value)
        if self._runs and self._runs[-1].style == style:
            self._runs[-1] = StyledRun(self._runs[-1].text + value, style)
        else:
            self._runs.append(StyledRun(value, style))
        self._used += cells
        if count:
            self._content += cells

    def add(self, value: str, style: Style) -> None:
        self._push(value, style)

    def newline(self) -> None:
        self.lines.append(tuple(self._runs))
        self._start(self.next_prefix)

    def add_broken(self, value: str, style: Style) -> None:
        """Place ``value`` grapheme by grapheme, breaking lines wherever it overflows."""

        chunk: List[str] = []
        chunk_cells = 0
        for grapheme in split_graphemes(value):
            cells = grapheme_width(grapheme)
            if cells and chunk_cells + cells > self.remaining and (self.has_content or chunk):
                self._push("".join(chunk), style)
                chunk = []
                chunk_cells = 0
                self.newline()
            chunk.append(grapheme)
            chunk_cells += cells
        self._push("".join(chunk), style)

    def finish(self) -> List[Line]:
        self.lines.append(tuple(self._runs))
        return self.lines


def _split_segments(runs: Sequence[StyledRun]):
    """Yield ``(kind, pieces)`` where kind is ``word``, ``space`` or ``break``.

    A word may span several runs (``**bold**text`` has no break opportunity).
    """

    word: List[StyledRun] = []
    for run in runs:
        if run.is_line_break:
            if word:
                yield "word", word
                word = []
            yield "break", [run]
            continue
        for match in _SEGMENT_PATTERN.finditer(run.text):
            segment = match.group()
            if segment.isspace():
                if word:
                    yield "word", word
                    word = []
                yield "space", [StyledRun(segment, run.style)]
            else:
                word.append(StyledRun(segment, run.style))
    if word:
        yield "word", word


def wrap_runs(
    runs: Sequence[StyledRun],
    width: int,
    *,
    first_prefix: Sequence[StyledRun] = (),
    next_prefix: Sequence[StyledRun] = (),
) -> List[Line]:
    """Word-wrap ``runs`` to ``width`` cells.

    Always returns at least one line. Whitespace at a wrap point is dropped;
    words longer than a line are broken at grapheme boundaries; ``"\\n"`` runs
    force a break.
    """

    builder = _LineBuilder(width, first_prefix, next_prefix)
    pending_space: List[StyledRun] = []
    for kind, pieces in _split_segments(runs):
        if kind == "break":
            pending_space = []
            builder.newline()
            continue
        if kind == "space":
            if builder.has_content:
                pending_space = pieces
            continue

        word_cells = sum(text_width(piece.text) for piece in pieces)
        space_cells = sum(text_width(piece.text) for piece in pending_space)
        if builder.has_content and space_cells + word_cells > builder.remaining:
            builder.newline()
            pending_space = []
        for piece in pending_space:
            builder.add(piece.text, piece.style)
        pending_space = []
        if word_cells <= builder.remaining:
            for piece in pieces:
                builder.add(piece.text, piece.style)
        else:
            for piece in pieces:
                builder.add_broken(piece.text, piece.style)
    return builder.finish()


def wrap_chars(
    runs: Sequence[StyledRun],
    width: int,
    *,
    first_prefix: Sequence[StyledRun] = (),
    next_prefix: Sequence[StyledRun] = (),
) -> List[Line]:
    """Wrap ``runs`` at grapheme boundaries, preserving every space (code lines)."""

    builder = _LineBuilder(width, first_prefix, next_prefix)
    for run in runs:
        if run.is_line_break:
            builder.newline()
            continue
        builder.add_broken(run.text, run.style)
    return builder.finish()


def line_width(line: Line) -> int:
    return sum(text_width(run.text) for run in line)


def line_text(line: Line) -> str:
    return "".join(run.text for run in line)


__all__ = ["line_text", "line_width", "wrap_chars", "wrap_runs"]
