"""Flatten markdown-it tokens into the structural event stream used by the compiler.

markdown-it produces a list of block tokens whose ``inline`` entries carry
child tokens. The compiler only needs a fixed vocabulary (headings, paragraphs,
list items, code fences, tables, emphasis), so this module walks both levels
and yields :class:`MarkdownEvent` records in document order.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

from termdeck import logging_manager

logger = logging_manager.get_logger()


class EventKind(enum.Enum):
    HEADING_START = "heading_start"
    HEADING_END = "heading_end"
    PARAGRAPH_START = "paragraph_start"
    PARAGRAPH_END = "paragraph_end"
    ITEM_START = "item_start"
    ITEM_END = "item_end"
    CODE_START = "code_start"
    CODE_END = "code_end"
    TABLE_START = "table_start"
    TABLE_HEAD_START = "table_head_start"
    TABLE_HEAD_END = "table_head_end"
    ROW_START = "row_start"
    ROW_END = "row_end"
    CELL_START = "cell_start"
    CELL_END = "cell_end"
    TABLE_END = "table_end"
    THEMATIC_BREAK = "thematic_break"
    TEXT = "text"
    CODE_SPAN = "code_span"
    STRONG_START = "strong_start"
    STRONG_END = "strong_end"
    EMPHASIS_START = "emphasis_start"
    EMPHASIS_END = "emphasis_end"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"


INLINE_KINDS = frozenset(
    {
        EventKind.TEXT,
        EventKind.CODE_SPAN,
        EventKind.STRONG_START,
        EventKind.STRONG_END,
        EventKind.EMPHASIS_START,
        EventKind.EMPHASIS_END,
        EventKind.SOFT_BREAK,
        EventKind.HARD_BREAK,
    }
)


@dataclass(frozen=True, slots=True)
class MarkdownEvent:
    """One structural event.

    ``level`` is set for headings, ``text`` for text/code payloads,
    ``language`` for code starts and ``ordered``/``index``/``depth`` for list
    items.
    """

    kind: EventKind
    level: int = 0
    text: str = ""
    language: Optional[str] = None
    ordered: bool = False
    index: Optional[int] = None
    depth: int = 0


def heading_start(level: int) -> MarkdownEvent:
    return MarkdownEvent(EventKind.HEADING_START, level=level)


def text(value: str) -> MarkdownEvent:
    return MarkdownEvent(EventKind.TEXT, text=value)


def code_start(language: Optional[str] = None) -> MarkdownEvent:
    return MarkdownEvent(EventKind.CODE_START, language=language)


def item_start(ordered: bool = False, index: Optional[int] = None, depth: int = 0) -> MarkdownEvent:
    return MarkdownEvent(EventKind.ITEM_START, ordered=ordered, index=index, depth=depth)


def marker(kind: EventKind) -> MarkdownEvent:
    return MarkdownEvent(kind)


def create_parser() -> MarkdownIt:
    """Return a CommonMark parser with the GitHub table and strikethrough rules."""

    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


_SIMPLE_BLOCK_EVENTS = {
    "paragraph_open": EventKind.PARAGRAPH_START,
    "paragraph_close": EventKind.PARAGRAPH_END,
    "heading_close": EventKind.HEADING_END,
    "list_item_close": EventKind.ITEM_END,
    "table_open": EventKind.TABLE_START,
    "table_close": EventKind.TABLE_END,
    "thead_open": EventKind.TABLE_HEAD_START,
    "thead_close": EventKind.TABLE_HEAD_END,
    "tr_open": EventKind.ROW_START,
    "tr_close": EventKind.ROW_END,
    "th_open": EventKind.CELL_START,
    "td_open": EventKind.CELL_START,
    "th_close": EventKind.CELL_END,
    "td_close": EventKind.CELL_END,
    "hr": EventKind.THEMATIC_BREAK,
}

_SIMPLE_INLINE_EVENTS = {
    "strong_open": EventKind.STRONG_START,
    "strong_close": EventKind.STRONG_END,
    "em_open": EventKind.EMPHASIS_START,
    "em_close": EventKind.EMPHASIS_END,
    "softbreak": EventKind.SOFT_BREAK,
    "hardbreak": EventKind.HARD_BREAK,
}

# Tokens whose content has no terminal rendering; their children (if any) are
# still visited, only the token itself is skipped.
_TRANSPARENT_TOKENS = {
    "blockquote_open",
    "blockquote_close",
    "tbody_open",
    "tbody_close",
    "link_open",
    "link_close",
    "s_open",
    "s_close",
    "html_inline",
}


@dataclass(slots=True)
class _ListFrame:
    ordered: bool
    next_index: int


def _fence_language(info: str) -> Optional[str]:
    words = info.strip().split()
    if not words:
        return None
    return words[0]


def _list_start(token: Token) -> int:
    raw = token.attrGet("start")
    try:
        return int(raw) if raw is not None else 1
    except (TypeError, ValueError):
        return 1


def _iter_inline(children: Sequence[Token]) -> Iterator[MarkdownEvent]:
    for child in children:
        kind = _SIMPLE_INLINE_EVENTS.get(child.type)
        if kind is not None:
            yield MarkdownEvent(kind)
        elif child.type == "text":
            if child.content:
                yield text(child.content)
        elif child.type == "code_inline":
            yield MarkdownEvent(EventKind.CODE_SPAN, text=child.content)
        elif child.type == "image":
            # Images are not rendered; their alt text stands in.
            if child.content:
                yield text(child.content)
        elif child.type in _TRANSPARENT_TOKENS:
            continue
        else:
            logger.debug(
                "Skipping unsupported inline token %s",
                child.type,
                extra={"event": "markdown.token.skipped", "console_suppress": True},
            )


def tokens_to_events(tokens: Iterable[Token]) -> Iterator[MarkdownEvent]:
    """Translate markdown-it block tokens into :class:`MarkdownEvent` records."""

    lists: List[_ListFrame] = []
    for token in tokens:
        kind = _SIMPLE_BLOCK_EVENTS.get(token.type)
        if kind is not None:
            yield MarkdownEvent(kind)
        elif token.type == "inline":
            yield from _iter_inline(token.children or [])
        elif token.type == "heading_open":
            yield heading_start(int(token.tag[1:]))
        elif token.type == "bullet_list_open":
            lists.append(_ListFrame(ordered=False, next_index=0))
        elif token.type == "ordered_list_open":
            lists.append(_ListFrame(ordered=True, next_index=_list_start(token)))
        elif token.type in ("bullet_list_close", "ordered_list_close"):
            if lists:
                lists.pop()
        elif token.type == "list_item_open":
            frame = lists[-1] if lists else _ListFrame(ordered=False, next_index=0)
            index: Optional[int] = None
            if frame.ordered:
                index = frame.next_index
                frame.next_index += 1
            yield item_start(ordered=frame.ordered, index=index, depth=max(0, len(lists) - 1))
        elif token.type == "fence":
            yield code_start(_fence_language(token.info))
            yield text(token.content)
            yield marker(EventKind.CODE_END)
        elif token.type == "code_block":
            yield code_start(None)
            yield text(token.content)
            yield marker(EventKind.CODE_END)
        elif token.type in _TRANSPARENT_TOKENS:
            continue
        else:
            logger.debug(
                "Skipping unsupported block token %s",
                token.type,
                extra={"event": "markdown.token.skipped", "console_suppress": True},
            )


def iter_markdown_events(source: str, parser: Optional[MarkdownIt] = None) -> Iterator[MarkdownEvent]:
    """Parse ``source`` and yield its structural events in document order."""

    md = parser or create_parser()
    return tokens_to_events(md.parse(source))


__all__ = [
    "EventKind",
    "INLINE_KINDS",
    "MarkdownEvent",
    "code_start",
    "create_parser",
    "heading_start",
    "item_start",
    "iter_markdown_events",
    "marker",
    "text",
    "tokens_to_events",
]
