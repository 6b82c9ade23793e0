"""Slide navigation and in-slide scrolling state machine."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple, Union

from .layout import DeckLayout, body_size
from .models import Deck


class NavEvent(enum.Enum):
    NEXT = "next"
    PREV = "prev"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    QUIT = "quit"


@dataclass(frozen=True, slots=True)
class Resize:
    width: int
    height: int


NavInput = Union[NavEvent, Resize]


@dataclass(slots=True)
class ViewportState:
    slide_index: int = 0
    scroll_offset: int = 0
    terminal_width: int = 80
    terminal_height: int = 24


class NavigationController:
    """Apply navigation input to a :class:`ViewportState`.

    Every transition is total: moving past either end of the deck stays on
    the boundary slide and the scroll offset is always clamped to
    ``[0, max_scroll]`` for the current terminal size.
    """

    def __init__(
        self,
        deck: Deck,
        layout: DeckLayout,
        width: int,
        height: int,
        margin: int = 2,
    ) -> None:
        self.deck = deck
        self.layout = layout
        self.margin = margin
        self.state = ViewportState(terminal_width=width, terminal_height=height)
        self.finished = False

    @property
    def body_size(self) -> Tuple[int, int]:
        return body_size(self.state.terminal_width, self.state.terminal_height, self.margin)

    def max_scroll(self) -> int:
        body_width, body_height = self.body_size
        content_height = self.layout.content_height(self.state.slide_index, body_width)
        return max(0, content_height - body_height)

    def apply(self, event: NavInput) -> bool:
        """Apply ``event``; return ``False`` once the session should end."""

        if self.finished:
            return False
        state = self.state
        if isinstance(event, Resize):
            state.terminal_width = max(0, event.width)
            state.terminal_height = max(0, event.height)
            state.scroll_offset = min(state.scroll_offset, self.max_scroll())
        elif event is NavEvent.NEXT:
            state.slide_index = min(state.slide_index + 1, len(self.deck) - 1)
            state.scroll_offset = 0
        elif event is NavEvent.PREV:
            state.slide_index = max(state.slide_index - 1, 0)
            state.scroll_offset = 0
        elif event is NavEvent.SCROLL_DOWN:
            state.scroll_offset = min(state.scroll_offset + 1, self.max_scroll())
        elif event is NavEvent.SCROLL_UP:
            state.scroll_offset = max(state.scroll_offset - 1, 0)
        elif event is NavEvent.QUIT:
            self.finished = True
            return False
        return True


__all__ = ["NavEvent", "NavInput", "NavigationController", "Resize", "ViewportState"]
