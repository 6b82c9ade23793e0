from __future__ import annotations

import json
import logging

from termdeck import logging_manager


def _record(message="hello", **extra):
    record = logging.LogRecord("termdeck", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_known_fields_and_extras():
    record = _record(event="deck.compiled", duration_ms=1.5, custom="value")

    payload = json.loads(logging_manager.JSONLogFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["event"] == "deck.compiled"
    assert payload["duration_ms"] == 1.5
    assert payload["extra"]["custom"] == "value"


def test_log_context_is_injected_and_restored():
    context_filter = logging_manager.LogContextFilter()

    with logging_manager.log_context(document="deck.md", slide=None):
        record = _record()
        context_filter.filter(record)
        assert record.document == "deck.md"
        assert logging_manager.get_log_context() == {"document": "deck.md"}

    assert logging_manager.get_log_context() == {}


def test_console_filter_honours_suppression():
    console_filter = logging_manager.ConsoleFilter()

    assert console_filter.filter(_record()) is True
    assert console_filter.filter(_record(console_suppress=True)) is False
    with logging_manager.suppress_console():
        assert console_filter.filter(_record()) is False
    assert console_filter.filter(_record()) is True


def test_debug_level_toggle():
    logger = logging_manager.get_logger()
    try:
        assert logging_manager.configure_logging_level(debug_enabled=True) == logging.DEBUG
        assert logger.level == logging.DEBUG
    finally:
        logging_manager.configure_logging_level(debug_enabled=False)
    assert logger.level == logging.INFO
