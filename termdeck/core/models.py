"""Typed containers for compiled slide decks."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Optional, Tuple, Union


@dataclass(frozen=True, slots=True)
class Style:
    """Presentation attributes of a run of text.

    ``fg`` is either a named colour (``"cyan"``, ``"gray"``...) or a
    ``#rrggbb`` string produced by the highlighter. ``code`` requests the
    inline-code background.
    """

    fg: Optional[str] = None
    bold: bool = False
    italic: bool = False
    code: bool = False

    def add(self, *, bold: bool = False, italic: bool = False) -> "Style":
        if (bold and not self.bold) or (italic and not self.italic):
            return replace(self, bold=self.bold or bold, italic=self.italic or italic)
        return self


PLAIN = Style()


@dataclass(frozen=True, slots=True)
class StyledRun:
    """Minimal unit of text carrying one consistent style."""

    text: str
    style: Style = PLAIN

    @property
    def is_line_break(self) -> bool:
        return self.text == "\n"


LINE_BREAK_TEXT = "\n"

Runs = Tuple[StyledRun, ...]
Line = Tuple[StyledRun, ...]


def runs_text(runs: Runs) -> str:
    """Concatenate the text of ``runs``."""

    return "".join(run.text for run in runs)


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    runs: Runs = ()


@dataclass(frozen=True, slots=True)
class Paragraph:
    runs: Runs = ()


@dataclass(frozen=True, slots=True)
class ListItem:
    ordered: bool
    index: Optional[int]
    runs: Runs = ()
    depth: int = 0
    # Text of an item that follows one of its nested blocks; drawn without a marker.
    continuation: bool = False


@dataclass(frozen=True, slots=True)
class CodeBlock:
    language: Optional[str]
    lines: Tuple[Runs, ...] = ()


@dataclass(frozen=True, slots=True)
class Table:
    """A table whose rows each hold exactly ``column_count`` cells."""

    header_row: Tuple[Runs, ...]
    body_rows: Tuple[Tuple[Runs, ...], ...]
    column_count: int

    def rows(self) -> Iterator[Tuple[Runs, ...]]:
        yield self.header_row
        yield from self.body_rows


@dataclass(frozen=True, slots=True)
class ThematicBreak:
    pass


Block = Union[Heading, Paragraph, ListItem, CodeBlock, Table, ThematicBreak]


@dataclass(frozen=True, slots=True)
class Slide:
    """One screen-page: the runs of its H1 title and its body blocks."""

    title: Runs = ()
    blocks: Tuple[Block, ...] = ()

    @property
    def title_text(self) -> str:
        return runs_text(self.title)


@dataclass(frozen=True, slots=True)
class Deck:
    """Ordered, immutable sequence of slides compiled from one document."""

    slides: Tuple[Slide, ...]

    def __post_init__(self) -> None:
        if not self.slides:
            raise ValueError("A deck must contain at least one slide")

    def __len__(self) -> int:
        return len(self.slides)

    def __getitem__(self, index: int) -> Slide:
        return self.slides[index]

    def __iter__(self) -> Iterator[Slide]:
        return iter(self.slides)


__all__ = [
    "Block",
    "CodeBlock",
    "Deck",
    "Heading",
    "LINE_BREAK_TEXT",
    "Line",
    "ListItem",
    "PLAIN",
    "Paragraph",
    "Runs",
    "Slide",
    "Style",
    "StyledRun",
    "Table",
    "ThematicBreak",
    "runs_text",
]
