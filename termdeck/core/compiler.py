"""Compile the markdown event stream into an immutable :class:`Deck`.

Slides start at every level-one heading; the heading text becomes the slide
title and never appears as a body block. Content before the first level-one
heading forms an untitled leading slide when it holds at least one block.

Open blocks live on a stack and the innermost one receives inline events.
Every block reserves its position in the slide when it opens, so a list item
that contains a nested list or a code fence still precedes them in the output.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from termdeck import logging_manager
from termdeck.markdown.events import INLINE_KINDS, EventKind, MarkdownEvent, iter_markdown_events
from termdeck.markdown.inline import InlineComposer

from .highlighting import CodeHighlighter, get_highlighter
from .models import (
    Block,
    CodeBlock,
    Deck,
    Heading,
    ListItem,
    Paragraph,
    Runs,
    Slide,
    Style,
    Table,
    ThematicBreak,
)
from .theme import DEFAULT_THEME, Theme

logger = logging_manager.get_logger()

DEFAULT_TAB_WIDTH = 4


class _OpenBlock:
    """Base class of the builders kept on the compiler's block stack."""

    slot: Optional[int] = None
    composer: Optional[InlineComposer] = None

    def inline_target(self) -> Optional[InlineComposer]:
        return self.composer

    def build(self) -> Optional[Block]:
        return None


class _TitleBuilder(_OpenBlock):
    def __init__(self, composer: InlineComposer) -> None:
        self.composer = composer


class _HeadingBuilder(_OpenBlock):
    def __init__(self, level: int, composer: InlineComposer, slot: int) -> None:
        self.level = level
        self.composer = composer
        self.slot = slot

    def build(self) -> Optional[Block]:
        return Heading(level=self.level, runs=self.composer.finish())


class _ParagraphBuilder(_OpenBlock):
    def __init__(self, composer: InlineComposer, slot: int) -> None:
        self.composer = composer
        self.slot = slot

    def build(self) -> Optional[Block]:
        runs = self.composer.finish()
        if not runs:
            return None
        return Paragraph(runs=runs)


class _ContinuationBuilder(_ParagraphBuilder):
    """A later paragraph of a list item placed after the item's nested blocks."""

    def __init__(self, item: "_ItemBuilder", composer: InlineComposer, slot: int) -> None:
        super().__init__(composer, slot)
        self.item = item

    def build(self) -> Optional[Block]:
        runs = self.composer.finish()
        if not runs:
            return None
        return ListItem(
            ordered=self.item.ordered,
            index=self.item.index,
            runs=runs,
            depth=self.item.depth,
            continuation=True,
        )


class _ItemBuilder(_OpenBlock):
    def __init__(self, event: MarkdownEvent, composer: InlineComposer, slot: int) -> None:
        self.ordered = event.ordered
        self.index = event.index
        self.depth = event.depth
        self.composer = composer
        self.slot = slot
        self._paragraphs = 0

    def start_paragraph(self) -> None:
        # Paragraphs after the first (loose items) continue on a new line.
        if self._paragraphs and not self.composer.is_empty:
            self.composer.line_break()
        self._paragraphs += 1

    def build(self) -> Optional[Block]:
        return ListItem(
            ordered=self.ordered,
            index=self.index,
            runs=self.composer.finish(),
            depth=self.depth,
        )


class _CodeBuilder(_OpenBlock):
    def __init__(
        self,
        language: Optional[str],
        slot: int,
        highlighter: CodeHighlighter,
        tab_width: int,
    ) -> None:
        self.language = language
        self.slot = slot
        self._highlighter = highlighter
        self._tab_width = tab_width
        self._parts: List[str] = []

    def add_text(self, value: str) -> None:
        self._parts.append(value)

    def source_lines(self) -> List[str]:
        content = "".join(self._parts)
        if not content:
            return []
        if content.endswith("\n"):
            content = content[:-1]
        return [line.expandtabs(self._tab_width) for line in content.split("\n")]

    def build(self) -> Optional[Block]:
        lines = self.source_lines()
        return CodeBlock(language=self.language, lines=self._highlighter.highlight(self.language, lines))


class _TableBuilder(_OpenBlock):
    def __init__(
        self,
        slot: int,
        make_composer: Callable[[Style], InlineComposer],
        theme: Theme,
    ) -> None:
        self.slot = slot
        self._make_composer = make_composer
        self._theme = theme
        self._in_head = False
        self._header: Optional[Tuple[Runs, ...]] = None
        self._body: List[Tuple[Runs, ...]] = []
        self._row: Optional[List[Runs]] = None
        self._cell: Optional[InlineComposer] = None

    def inline_target(self) -> Optional[InlineComposer]:
        return self._cell

    def start_head(self) -> None:
        self._in_head = True

    def end_head(self) -> None:
        self._in_head = False

    def start_row(self) -> None:
        self._row = []

    def start_cell(self) -> None:
        if self._row is None:
            self._row = []
        base = self._theme.table_header if self._in_head else self._theme.table
        self._cell = self._make_composer(base)

    def end_cell(self) -> None:
        if self._cell is None:
            return
        if self._row is None:
            self._row = []
        self._row.append(self._cell.finish())
        self._cell = None

    def end_row(self) -> None:
        self.end_cell()
        if self._row is None:
            return
        row = tuple(self._row)
        self._row = None
        if self._in_head and self._header is None:
            self._header = row
        else:
            self._body.append(row)

    def build(self) -> Optional[Block]:
        self.end_row()
        header = self._header
        body = list(self._body)
        if header is None:
            if not body:
                return None
            header = body.pop(0)
        column_count = len(header) or max((len(row) for row in body), default=0)
        if column_count == 0:
            return None
        return Table(
            header_row=_normalize_row(header, column_count),
            body_rows=tuple(_normalize_row(row, column_count) for row in body),
            column_count=column_count,
        )


def _normalize_row(row: Tuple[Runs, ...], column_count: int) -> Tuple[Runs, ...]:
    """Pad a short row with empty cells and drop cells beyond ``column_count``."""

    if len(row) >= column_count:
        return tuple(row[:column_count])
    return tuple(row) + ((),) * (column_count - len(row))


class SlideCompiler:
    """Incremental event consumer producing a :class:`Deck`.

    Feed events with :meth:`feed` (or :meth:`feed_all`) and call
    :meth:`finish` once the stream is exhausted.
    """

    def __init__(
        self,
        theme: Theme = DEFAULT_THEME,
        highlighter: Optional[CodeHighlighter] = None,
        *,
        tab_width: int = DEFAULT_TAB_WIDTH,
        softbreak_as_newline: bool = True,
    ) -> None:
        self.theme = theme
        self.highlighter = highlighter or get_highlighter()
        self.tab_width = max(1, tab_width)
        self.softbreak_as_newline = softbreak_as_newline
        self._slides: List[Slide] = []
        self._title: Runs = ()
        self._blocks: List[Optional[Block]] = []
        self._implicit = True
        self._stack: List[_OpenBlock] = []
        self._finished = False
        self._handlers: Dict[EventKind, Callable[[MarkdownEvent], None]] = {
            EventKind.HEADING_START: self._on_heading_start,
            EventKind.HEADING_END: self._on_heading_end,
            EventKind.PARAGRAPH_START: self._on_paragraph_start,
            EventKind.PARAGRAPH_END: self._on_paragraph_end,
            EventKind.ITEM_START: self._on_item_start,
            EventKind.ITEM_END: self._on_item_end,
            EventKind.CODE_START: self._on_code_start,
            EventKind.CODE_END: self._on_code_end,
            EventKind.TABLE_START: self._on_table_start,
            EventKind.TABLE_HEAD_START: self._on_table_head_start,
            EventKind.TABLE_HEAD_END: self._on_table_head_end,
            EventKind.ROW_START: self._on_row_start,
            EventKind.ROW_END: self._on_row_end,
            EventKind.CELL_START: self._on_cell_start,
            EventKind.CELL_END: self._on_cell_end,
            EventKind.TABLE_END: self._on_table_end,
            EventKind.THEMATIC_BREAK: self._on_thematic_break,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def feed(self, event: MarkdownEvent) -> None:
        if self._finished:
            raise RuntimeError("SlideCompiler.finish() was already called")
        handler = self._handlers.get(event.kind)
        if handler is not None:
            handler(event)
        elif event.kind in INLINE_KINDS:
            self._on_inline(event)
        else:
            logger.debug(
                "Ignoring unsupported event %s",
                event.kind.value,
                extra={"event": "compiler.event.skipped", "console_suppress": True},
            )

    def feed_all(self, events: Iterable[MarkdownEvent]) -> None:
        for event in events:
            self.feed(event)

    def finish(self) -> Deck:
        if not self._finished:
            self._close_all()
            self._close_slide()
            if not self._slides:
                self._slides.append(Slide())
            self._finished = True
        return Deck(slides=tuple(self._slides))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _composer(self, base_style: Style) -> InlineComposer:
        return InlineComposer(
            base_style,
            self.theme.inline_code,
            softbreak_as_newline=self.softbreak_as_newline,
        )

    def _reserve_slot(self) -> int:
        self._blocks.append(None)
        return len(self._blocks) - 1

    def _top(self) -> Optional[_OpenBlock]:
        return self._stack[-1] if self._stack else None

    def _close_block(self, builder: _OpenBlock) -> None:
        if isinstance(builder, _TitleBuilder):
            self._title = builder.composer.finish()
            return
        block = builder.build()
        if builder.slot is not None:
            self._blocks[builder.slot] = block

    def _close_through(self, builder_type: type) -> bool:
        """Close blocks down to and including the innermost ``builder_type``."""

        for position in range(len(self._stack) - 1, -1, -1):
            if isinstance(self._stack[position], builder_type):
                while len(self._stack) > position:
                    self._close_block(self._stack.pop())
                return True
        logger.debug(
            "Ignoring unmatched end event for %s",
            builder_type.__name__,
            extra={"event": "compiler.unmatched_end", "console_suppress": True},
        )
        return False

    def _close_all(self) -> None:
        while self._stack:
            self._close_block(self._stack.pop())

    def _close_slide(self) -> None:
        blocks = tuple(block for block in self._blocks if block is not None)
        if not self._implicit or blocks:
            self._slides.append(Slide(title=self._title, blocks=blocks))
        self._title = ()
        self._blocks = []

    def _close_open_paragraph(self) -> None:
        if isinstance(self._top(), _ParagraphBuilder):
            self._close_block(self._stack.pop())

    def _innermost(self, builder_type: type) -> Optional[_OpenBlock]:
        for builder in reversed(self._stack):
            if isinstance(builder, builder_type):
                return builder
        return None

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def _on_heading_start(self, event: MarkdownEvent) -> None:
        self._close_open_paragraph()
        if event.level <= 1:
            self._close_all()
            self._close_slide()
            self._implicit = False
            self._stack.append(_TitleBuilder(self._composer(self.theme.title)))
            return
        composer = self._composer(self.theme.heading(event.level))
        self._stack.append(_HeadingBuilder(event.level, composer, self._reserve_slot()))

    def _on_heading_end(self, event: MarkdownEvent) -> None:
        top = self._top()
        if isinstance(top, _TitleBuilder):
            self._close_block(self._stack.pop())
            return
        self._close_through(_HeadingBuilder)

    def _on_paragraph_start(self, event: MarkdownEvent) -> None:
        self._close_open_paragraph()
        top = self._top()
        if isinstance(top, _ItemBuilder):
            if len(self._blocks) - 1 > top.slot:
                # A nested block already follows the item.
                composer = self._composer(self.theme.text)
                self._stack.append(_ContinuationBuilder(top, composer, self._reserve_slot()))
                return
            top.start_paragraph()
            return
        self._stack.append(_ParagraphBuilder(self._composer(self.theme.text), self._reserve_slot()))

    def _on_paragraph_end(self, event: MarkdownEvent) -> None:
        self._close_open_paragraph()

    def _on_item_start(self, event: MarkdownEvent) -> None:
        self._close_open_paragraph()
        composer = self._composer(self.theme.text)
        self._stack.append(_ItemBuilder(event, composer, self._reserve_slot()))

    def _on_item_end(self, event: MarkdownEvent) -> None:
        self._close_through(_ItemBuilder)

    def _on_code_start(self, event: MarkdownEvent) -> None:
        self._close_open_paragraph()
        self._stack.append(
            _CodeBuilder(event.language, self._reserve_slot(), self.highlighter, self.tab_width)
        )

    def _on_code_end(self, event: MarkdownEvent) -> None:
        self._close_through(_CodeBuilder)

    def _on_table_start(self, event: MarkdownEvent) -> None:
        self._close_open_paragraph()
        self._stack.append(_TableBuilder(self._reserve_slot(), self._composer, self.theme))

    def _table(self) -> Optional[_TableBuilder]:
        table = self._innermost(_TableBuilder)
        return table if isinstance(table, _TableBuilder) else None

    def _on_table_head_start(self, event: MarkdownEvent) -> None:
        table = self._table()
        if table is not None:
            table.start_head()

    def _on_table_head_end(self, event: MarkdownEvent) -> None:
        table = self._table()
        if table is not None:
            table.end_head()

    def _on_row_start(self, event: MarkdownEvent) -> None:
        table = self._table()
        if table is not None:
            table.start_row()

    def _on_row_end(self, event: MarkdownEvent) -> None:
        table = self._table()
        if table is not None:
            table.end_row()

    def _on_cell_start(self, event: MarkdownEvent) -> None:
        table = self._table()
        if table is not None:
            table.start_cell()

    def _on_cell_end(self, event: MarkdownEvent) -> None:
        table = self._table()
        if table is not None:
            table.end_cell()

    def _on_table_end(self, event: MarkdownEvent) -> None:
        self._close_through(_TableBuilder)

    def _on_thematic_break(self, event: MarkdownEvent) -> None:
        self._close_open_paragraph()
        slot = self._reserve_slot()
        self._blocks[slot] = ThematicBreak()

    def _on_inline(self, event: MarkdownEvent) -> None:
        top = self._top()
        if isinstance(top, _CodeBuilder):
            if event.kind is EventKind.TEXT:
                top.add_text(event.text)
            return
        target = top.inline_target() if top is not None else None
        if target is None:
            # Text outside any block gets a paragraph of its own.
            paragraph = _ParagraphBuilder(self._composer(self.theme.text), self._reserve_slot())
            self._stack.append(paragraph)
            target = paragraph.composer
        target.feed(event)


def compile_events(
    events: Iterable[MarkdownEvent],
    *,
    theme: Theme = DEFAULT_THEME,
    highlighter: Optional[CodeHighlighter] = None,
    tab_width: int = DEFAULT_TAB_WIDTH,
    softbreak_as_newline: bool = True,
) -> Deck:
    """Compile a complete event stream into a deck of at least one slide."""

    compiler = SlideCompiler(
        theme,
        highlighter,
        tab_width=tab_width,
        softbreak_as_newline=softbreak_as_newline,
    )
    compiler.feed_all(events)
    return compiler.finish()


def compile_markdown(
    source: str,
    *,
    theme: Theme = DEFAULT_THEME,
    highlighter: Optional[CodeHighlighter] = None,
    tab_width: int = DEFAULT_TAB_WIDTH,
    softbreak_as_newline: bool = True,
) -> Deck:
    """Parse ``source`` with markdown-it and compile it into a deck."""

    return compile_events(
        iter_markdown_events(source),
        theme=theme,
        highlighter=highlighter,
        tab_width=tab_width,
        softbreak_as_newline=softbreak_as_newline,
    )


__all__ = ["SlideCompiler", "compile_events", "compile_markdown"]
