from __future__ import annotations

import threading

from termdeck.core import highlighting
from termdeck.core.highlighting import CodeHighlighter, get_highlighter, plain_lines
from termdeck.core.models import PLAIN, StyledRun


def _line_texts(lines):
    return ["".join(run.text for run in runs) for runs in lines]


def test_no_language_returns_plain_lines(highlighter):
    source = ["first", "", "  third"]

    lines = highlighter.highlight(None, source)

    assert len(lines) == len(source)
    assert _line_texts(lines) == source
    assert lines[1] == ()
    assert all(run.style == PLAIN for runs in lines for run in runs)


def test_unknown_language_falls_back_to_plain(highlighter):
    source = ["some text", "more"]

    assert highlighter.highlight("definitely-not-a-language", source) == plain_lines(source)
    assert not highlighter.supports("definitely-not-a-language")


def test_python_is_highlighted_line_by_line(highlighter):
    source = ["def answer():", "", "    return 42"]

    lines = highlighter.highlight("python", source)

    assert len(lines) == 3
    assert _line_texts(lines) == source
    colours = {run.style.fg for runs in lines for run in runs}
    assert any(colour and colour.startswith("#") for colour in colours)


def test_language_lookup_is_case_insensitive(highlighter):
    assert highlighter.supports("Python")


def test_tables_are_built_on_first_use():
    highlighter = CodeHighlighter("monokai")
    assert not highlighter.initialized

    highlighter.highlight("python", ["x = 1"])

    assert highlighter.initialized


def test_unknown_theme_falls_back_to_default_style(monkeypatch):
    warnings = []
    monkeypatch.setattr(
        highlighting.logging_manager,
        "console_warning",
        lambda message, *args, logger_obj=None: warnings.append(message % args),
    )
    highlighter = CodeHighlighter("no-such-theme")

    lines = highlighter.highlight("python", ["x = 1"])

    assert _line_texts(lines) == ["x = 1"]
    assert warnings == ["Unknown code theme 'no-such-theme'; using 'default' instead."]


def test_empty_input_gives_no_lines(highlighter):
    assert highlighter.highlight("python", []) == ()


def test_shared_instance_per_theme():
    assert get_highlighter("monokai") is get_highlighter("monokai")
    assert get_highlighter("monokai") is not get_highlighter("default")


def test_concurrent_first_use_produces_identical_output():
    highlighter = CodeHighlighter("monokai")
    source = ["import os", "print(os.getcwd())"]
    results = []
    lock = threading.Lock()

    def worker():
        lines = highlighter.highlight("python", source)
        with lock:
            results.append(lines)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 8
    assert all(result == results[0] for result in results)


def test_plain_lines_keeps_text():
    assert plain_lines(["a", ""]) == ((StyledRun("a", PLAIN),), ())
