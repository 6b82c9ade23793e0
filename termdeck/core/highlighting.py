"""Syntax highlighting of fenced code through pygments."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from pygments import lex
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.style import Style as PygmentsStyle
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from termdeck import logging_manager

from .models import PLAIN, Runs, Style, StyledRun

logger = logging_manager.get_logger()

FALLBACK_THEME = "default"


@dataclass(slots=True)
class _HighlighterTables:
    """Resolved pygments style plus per-process lookup caches."""

    style: Type[PygmentsStyle]
    token_styles: Dict[Any, Style] = field(default_factory=dict)
    lexers: Dict[str, Optional[Lexer]] = field(default_factory=dict)


def _load_style(theme: str) -> Type[PygmentsStyle]:
    try:
        return get_style_by_name(theme)
    except ClassNotFound:
        logging_manager.console_warning(
            "Unknown code theme %r; using %r instead.",
            theme,
            FALLBACK_THEME,
            logger_obj=logger,
        )
        return get_style_by_name(FALLBACK_THEME)


class CodeHighlighter:
    """Highlight code blocks, degrading to plain text when no lexer applies.

    The pygments style and the lexer/token caches are built on first use and
    published only once fully built; a concurrent first call waits on the
    lock and then reuses them.
    """

    def __init__(self, theme: str = "monokai") -> None:
        self.theme = theme
        self._tables: Optional[_HighlighterTables] = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._tables is not None

    def _ensure_tables(self) -> _HighlighterTables:
        tables = self._tables
        if tables is not None:
            return tables
        with self._lock:
            if self._tables is None:
                built = _HighlighterTables(style=_load_style(self.theme))
                self._tables = built
                logger.debug(
                    "Initialized highlighter tables for theme %s",
                    self.theme,
                    extra={"event": "highlight.tables.ready", "console_suppress": True},
                )
            return self._tables

    def _lexer_for(self, tables: _HighlighterTables, language: str) -> Optional[Lexer]:
        key = language.strip().lower()
        if key in tables.lexers:
            return tables.lexers[key]
        try:
            lexer: Optional[Lexer] = get_lexer_by_name(key, stripnl=False, ensurenl=True)
        except ClassNotFound:
            logger.debug(
                "No highlighter for language %r",
                language,
                extra={"event": "highlight.language.unknown", "console_suppress": True},
            )
            lexer = None
        tables.lexers[key] = lexer
        return lexer

    def _style_for(self, tables: _HighlighterTables, token_type: Any) -> Style:
        cached = tables.token_styles.get(token_type)
        if cached is not None:
            return cached
        details = tables.style.style_for_token(token_type)
        color = details.get("color")
        style = Style(
            fg=f"#{color.lower()}" if color else None,
            bold=bool(details.get("bold")),
            italic=bool(details.get("italic")),
        )
        tables.token_styles[token_type] = style
        return style

    def supports(self, language: Optional[str]) -> bool:
        if not language:
            return False
        return self._lexer_for(self._ensure_tables(), language) is not None

    def highlight(self, language: Optional[str], source_lines: Sequence[str]) -> Tuple[Runs, ...]:
        """Return one run sequence per entry of ``source_lines``."""

        lines = list(source_lines)
        if not lines:
            return ()
        if not language:
            return plain_lines(lines)

        tables = self._ensure_tables()
        lexer = self._lexer_for(tables, language)
        if lexer is None:
            return plain_lines(lines)

        try:
            highlighted = self._lex_lines(tables, lexer, lines)
        except Exception:  # pragma: no cover - lexer bugs must not break a deck
            logger.warning(
                "Highlighting failed for language %r; showing plain code.",
                language,
                exc_info=True,
                extra={"event": "highlight.failed", "console_suppress": True},
            )
            return plain_lines(lines)
        return highlighted

    def _lex_lines(
        self, tables: _HighlighterTables, lexer: Lexer, lines: List[str]
    ) -> Tuple[Runs, ...]:
        output: List[List[StyledRun]] = [[]]
        for token_type, value in lex("\n".join(lines), lexer):
            style = self._style_for(tables, token_type)
            parts = value.split("\n")
            for position, part in enumerate(parts):
                if part:
                    current = output[-1]
                    if current and current[-1].style == style:
                        current[-1] = StyledRun(current[-1].text + part, style)
                    else:
                        current.append(StyledRun(part, style))
                if position < len(parts) - 1:
                    output.append([])

        # The lexer appends a final newline; keep exactly one entry per source line.
        output = output[: len(lines)]
        while len(output) < len(lines):
            output.append([])
        return tuple(tuple(runs) for runs in output)


def plain_lines(lines: Sequence[str]) -> Tuple[Runs, ...]:
    """Return ``lines`` as unstyled runs, one (possibly empty) entry per line."""

    return tuple((StyledRun(line, PLAIN),) if line else () for line in lines)


@lru_cache(maxsize=None)
def get_highlighter(theme: str = "monokai") -> CodeHighlighter:
    """Return the process-wide highlighter for ``theme``."""

    return CodeHighlighter(theme)


__all__ = ["CodeHighlighter", "get_highlighter", "plain_lines"]
