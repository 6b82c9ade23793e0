"""The interactive curses session driving a compiled deck."""

from __future__ import annotations

import curses
import os
from typing import Any, Callable, Optional

from termdeck import logging_manager
from termdeck.config_manager import TermDeckSettings
from termdeck.core.frame import render_screen
from termdeck.core.layout import DeckLayout
from termdeck.core.models import Deck
from termdeck.core.navigation import NavInput, NavigationController, Resize
from termdeck.core.theme import DEFAULT_THEME, Theme

from .keys import translate_key
from .painter import CursesPainter

logger = logging_manager.get_logger()


def read_event(screen: Any) -> Optional[NavInput]:
    """Block for one key press and translate it; unbound keys yield ``None``."""

    try:
        key = screen.get_wch()
    except curses.error:
        return None
    if key == curses.KEY_RESIZE:
        height, width = screen.getmaxyx()
        return Resize(width=width, height=height)
    return translate_key(key)


def run_event_loop(
    controller: NavigationController,
    painter: Any,
    next_event: Callable[[], Optional[NavInput]],
    *,
    theme: Theme = DEFAULT_THEME,
) -> None:
    """Repaint, read one event, apply it; repeat until the controller finishes."""

    while True:
        frame = render_screen(
            controller.deck,
            controller.layout,
            controller.state,
            controller.margin,
            theme,
        )
        painter.paint(frame)
        event = next_event()
        if event is None:
            continue
        if not controller.apply(event):
            break
        logger.debug(
            "Applied %s",
            event,
            extra={
                "event": "session.navigation",
                "slide": controller.state.slide_index + 1,
                "console_suppress": True,
            },
        )


def _prepare_screen() -> None:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    if curses.has_colors():
        curses.start_color()
        try:
            curses.use_default_colors()
        except curses.error:
            pass


def run_presentation(deck: Deck, settings: TermDeckSettings, theme: Theme = DEFAULT_THEME) -> None:
    """Present ``deck`` full screen until the user quits."""

    def _session(screen: Any) -> None:
        _prepare_screen()
        height, width = screen.getmaxyx()
        controller = NavigationController(
            deck,
            DeckLayout(deck, theme),
            width,
            height,
            settings.horizontal_margin,
        )
        painter = CursesPainter(screen, colors=getattr(curses, "COLORS", 8))
        run_event_loop(controller, painter, lambda: read_event(screen), theme=theme)

    # Escape should quit promptly instead of waiting for a key sequence.
    os.environ.setdefault("ESCDELAY", "25")
    logger.info(
        "Starting presentation with %d slides",
        len(deck),
        extra={"event": "session.start", "console_suppress": True},
    )
    with logging_manager.suppress_console():
        curses.wrapper(_session)
    logger.info(
        "Presentation closed",
        extra={"event": "session.end", "console_suppress": True},
    )


__all__ = ["read_event", "run_event_loop", "run_presentation"]
