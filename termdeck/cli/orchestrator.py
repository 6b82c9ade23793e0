"""Unified orchestration for the termdeck console script."""

from __future__ import annotations

import time
from typing import Optional, Sequence

from .. import config_manager
from .. import logging_manager as log_mgr
from ..core.compiler import compile_markdown
from ..core.highlighting import get_highlighter
from ..core.theme import DEFAULT_THEME
from ..document import load_document
from ..errors import ConfigurationError, DocumentLoadError
from ..terminal.session import run_presentation
from .args import parse_cli_args

logger = log_mgr.get_logger()

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    """Primary console script entry point."""

    args = parse_cli_args(argv)
    log_mgr.configure_logging_level(debug_enabled=args.debug)

    try:
        settings = config_manager.load_configuration(
            args.config,
            overrides={
                "code_theme": args.code_theme,
                "debug": True if args.debug else None,
            },
        )
    except ConfigurationError as exc:
        log_mgr.console_error(str(exc), logger_obj=logger)
        return EXIT_FAILURE
    log_mgr.configure_logging_level(debug_enabled=settings.debug)

    try:
        source = load_document(args.path)
    except DocumentLoadError as exc:
        log_mgr.console_error(str(exc), logger_obj=logger)
        return EXIT_FAILURE

    with log_mgr.log_context(document=args.path):
        start = time.perf_counter()
        deck = compile_markdown(
            source,
            theme=DEFAULT_THEME,
            highlighter=get_highlighter(settings.code_theme),
            tab_width=settings.tab_width,
            softbreak_as_newline=settings.softbreak_as_newline,
        )
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(
            "Compiled %d slides",
            len(deck),
            extra={
                "event": "deck.compiled",
                "duration_ms": duration_ms,
                "status": "ok",
                "console_suppress": True,
            },
        )

        try:
            run_presentation(deck, settings, DEFAULT_THEME)
        except KeyboardInterrupt:
            log_mgr.console_info("Presentation interrupted.", logger_obj=logger)
            return EXIT_INTERRUPTED
    return EXIT_OK


__all__ = ["EXIT_FAILURE", "EXIT_INTERRUPTED", "EXIT_OK", "run_cli"]
