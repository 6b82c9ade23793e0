"""Compose inline markdown events into styled runs."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from termdeck.core.models import LINE_BREAK_TEXT, PLAIN, Runs, Style, StyledRun

from .events import EventKind, MarkdownEvent

_STRONG = "strong"
_EMPHASIS = "emphasis"


class InlineComposer:
    """Collect inline events for one block and emit its :class:`StyledRun` sequence.

    Active spans live on an explicit stack; an end event removes the most
    recent matching entry, so ``**a *b* c**`` and mismatched closers both
    resolve without recursion. Whatever is still open when :meth:`finish` runs
    is closed at the block boundary.
    """

    def __init__(
        self,
        base_style: Style = PLAIN,
        code_style: Optional[Style] = None,
        *,
        softbreak_as_newline: bool = True,
    ) -> None:
        self._base_style = base_style
        self._code_style = code_style or Style(fg="green", code=True)
        self._softbreak_as_newline = softbreak_as_newline
        self._stack: List[str] = []
        self._runs: List[StyledRun] = []

    @property
    def is_empty(self) -> bool:
        return not self._runs

    def current_style(self) -> Style:
        return self._base_style.add(
            bold=_STRONG in self._stack,
            italic=_EMPHASIS in self._stack,
        )

    def _append(self, value: str, style: Style) -> None:
        if not value:
            return
        if self._runs:
            last = self._runs[-1]
            if last.style == style and not last.is_line_break and value != LINE_BREAK_TEXT:
                self._runs[-1] = StyledRun(last.text + value, style)
                return
        self._runs.append(StyledRun(value, style))

    def add_text(self, value: str) -> None:
        self._append(value, self.current_style())

    def add_code_span(self, value: str) -> None:
        # Code style replaces emphasis entirely inside the span.
        self._append(f"`{value}`", self._code_style)

    def open_span(self, name: str) -> None:
        self._stack.append(name)

    def close_span(self, name: str) -> None:
        for position in range(len(self._stack) - 1, -1, -1):
            if self._stack[position] == name:
                del self._stack[position]
                return

    def line_break(self) -> None:
        self._append(LINE_BREAK_TEXT, self._base_style)

    def soft_break(self) -> None:
        if self._softbreak_as_newline:
            self.line_break()
        else:
            self.add_text(" ")

    def feed(self, event: MarkdownEvent) -> None:
        kind = event.kind
        if kind is EventKind.TEXT:
            self.add_text(event.text)
        elif kind is EventKind.CODE_SPAN:
            self.add_code_span(event.text)
        elif kind is EventKind.STRONG_START:
            self.open_span(_STRONG)
        elif kind is EventKind.STRONG_END:
            self.close_span(_STRONG)
        elif kind is EventKind.EMPHASIS_START:
            self.open_span(_EMPHASIS)
        elif kind is EventKind.EMPHASIS_END:
            self.close_span(_EMPHASIS)
        elif kind is EventKind.SOFT_BREAK:
            self.soft_break()
        elif kind is EventKind.HARD_BREAK:
            self.line_break()
        else:
            raise ValueError(f"{kind.value} is not an inline event")

    def finish(self) -> Runs:
        """Return the composed runs; trailing line breaks are dropped."""

        self._stack.clear()
        runs = list(self._runs)
        while runs and runs[-1].is_line_break:
            runs.pop()
        return tuple(runs)


def compose_inline(
    events: Iterable[MarkdownEvent],
    base_style: Style = PLAIN,
    code_style: Optional[Style] = None,
    *,
    softbreak_as_newline: bool = True,
) -> Tuple[StyledRun, ...]:
    """Compose ``events`` (inline kinds only) into styled runs."""

    composer = InlineComposer(base_style, code_style, softbreak_as_newline=softbreak_as_newline)
    for event in events:
        composer.feed(event)
    return composer.finish()


__all__ = ["InlineComposer", "compose_inline"]
