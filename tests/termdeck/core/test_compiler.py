from __future__ import annotations

import textwrap

import pytest

from termdeck.core.compiler import SlideCompiler, compile_events, compile_markdown
from termdeck.core.models import (
    CodeBlock,
    Deck,
    Heading,
    PLAIN,
    ListItem,
    Paragraph,
    StyledRun,
    Table,
    ThematicBreak,
    runs_text,
)
from termdeck.core.theme import DEFAULT_THEME
from termdeck.markdown.events import EventKind, heading_start, marker, text


def _compile(source: str, **kwargs) -> Deck:
    return compile_markdown(textwrap.dedent(source), **kwargs)


def test_each_h1_starts_a_slide():
    deck = compile_markdown("# A\ntext1\n# B\ntext2\n# C\ntext3\n")

    assert [slide.title_text for slide in deck] == ["A", "B", "C"]
    for slide, expected in zip(deck, ["text1", "text2", "text3"]):
        assert len(slide.blocks) == 1
        assert isinstance(slide.blocks[0], Paragraph)
        assert runs_text(slide.blocks[0].runs) == expected


def test_content_before_first_h1_forms_leading_slide():
    deck = compile_markdown("intro\n# A\nbody\n")

    assert len(deck) == 2
    assert deck[0].title == ()
    assert [runs_text(block.runs) for block in deck[0].blocks] == ["intro"]
    assert deck[1].title_text == "A"
    assert [runs_text(block.runs) for block in deck[1].blocks] == ["body"]


@pytest.mark.parametrize("source", ["", "   \n\n", "<!-- only a comment -->\n"])
def test_empty_document_gives_one_empty_slide(source):
    deck = compile_markdown(source)

    assert len(deck) == 1
    assert deck[0].title == ()
    assert deck[0].blocks == ()


def test_document_without_h1_is_a_single_slide():
    deck = _compile(
        """\
        ## Sub

        text
        """
    )

    assert len(deck) == 1
    assert isinstance(deck[0].blocks[0], Heading)
    assert deck[0].blocks[0].level == 2


def test_consecutive_h1_give_title_only_slide():
    deck = compile_markdown("# One\n# Two\nbody\n")

    assert [slide.title_text for slide in deck] == ["One", "Two"]
    assert deck[0].blocks == ()


@pytest.mark.parametrize(
    "source, expected",
    [
        ("# A\n# B\n", 2),
        ("lead\n\n# A\n\n# B\n", 3),
        ("no headings at all\n", 1),
        ("## only h2\n\n### h3\n", 1),
        ("lead\n\n# A\n\nx\n\n## sub\n\n# B\n", 3),
    ],
)
def test_slide_count_matches_h1_count(source, expected):
    deck = compile_markdown(source)

    assert len(deck) == expected
    for slide in deck:
        assert not any(isinstance(block, Heading) and block.level == 1 for block in slide.blocks)


def test_title_uses_title_style():
    deck = compile_markdown("# Hello **there**\n")

    assert deck[0].title[0].style == DEFAULT_THEME.title
    assert deck[0].title[-1].style.bold


def test_heading_levels_take_theme_styles():
    deck = compile_markdown("## two\n\n### three\n\n##### five\n")

    styles = [block.runs[0].style for block in deck[0].blocks]
    assert styles == [DEFAULT_THEME.heading(2), DEFAULT_THEME.heading(3), DEFAULT_THEME.heading(5)]


def test_list_items_keep_order_and_nesting():
    deck = _compile(
        """\
        # L

        - first
          - nested
        - second
        """
    )

    items = deck[0].blocks
    assert all(isinstance(item, ListItem) for item in items)
    assert [(runs_text(item.runs), item.depth) for item in items] == [
        ("first", 0),
        ("nested", 1),
        ("second", 0),
    ]


def test_ordered_list_numbers():
    deck = compile_markdown("2. two\n3. three\n")

    assert [(item.ordered, item.index) for item in deck[0].blocks] == [(True, 2), (True, 3)]


def test_loose_item_paragraphs_join_with_a_line_break():
    deck = _compile(
        """\
        - first paragraph

          second paragraph
        """
    )

    (item,) = deck[0].blocks
    assert runs_text(item.runs) == "first paragraph\nsecond paragraph"


def test_code_inside_list_item_follows_the_item():
    deck = _compile(
        """\
        - run this:

          ```
          make
          ```
        """
    )

    kinds = [type(block) for block in deck[0].blocks]
    assert kinds == [ListItem, CodeBlock]


def test_item_text_after_a_nested_fence_stays_below_it():
    deck = _compile(
        """\
        - run this:

          ```
          make
          ```

          then check the output
        """
    )

    item, code, tail = deck[0].blocks
    assert isinstance(code, CodeBlock)
    assert runs_text(item.runs) == "run this:"
    assert not item.continuation
    assert runs_text(tail.runs) == "then check the output"
    assert (tail.continuation, tail.depth, tail.ordered) == (True, 0, False)


def test_item_text_after_a_nested_list_stays_below_it():
    deck = _compile(
        """\
        1. outer

           - inner

           closing words
        """
    )

    assert [
        (runs_text(item.runs), item.depth, item.continuation) for item in deck[0].blocks
    ] == [
        ("outer", 0, False),
        ("inner", 1, False),
        ("closing words", 0, True),
    ]
    assert deck[0].blocks[2].index == 1


def test_code_block_lines_and_tabs(highlighter):
    deck = compile_events(
        [marker(EventKind.CODE_START), text("a\tb\n\nend\n"), marker(EventKind.CODE_END)],
        highlighter=highlighter,
        tab_width=4,
    )

    (block,) = deck[0].blocks
    assert isinstance(block, CodeBlock)
    assert ["".join(run.text for run in line) for line in block.lines] == ["a   b", "", "end"]


def test_fenced_code_is_highlighted(highlighter):
    deck = _compile(
        """\
        ```python
        def f():
            return 1
        ```
        """,
        highlighter=highlighter,
    )

    (block,) = deck[0].blocks
    assert block.language == "python"
    assert len(block.lines) == 2
    assert any(run.style.fg for line in block.lines for run in line)


def test_unknown_language_stays_plain(highlighter):
    deck = compile_markdown("```nosuchlang\nhello\n```\n", highlighter=highlighter)

    (block,) = deck[0].blocks
    assert block.lines == ((StyledRun("hello", PLAIN),),)


def test_table_short_row_is_padded():
    deck = _compile(
        """\
        | H1 | H2 |
        |----|----|
        | a |
        """
    )

    (table,) = deck[0].blocks
    assert isinstance(table, Table)
    assert table.column_count == 2
    assert runs_text(table.body_rows[0][0]) == "a"
    assert table.body_rows[0][1] == ()


def test_table_rows_are_normalized_to_header_width():
    events = [
        marker(EventKind.TABLE_START),
        marker(EventKind.TABLE_HEAD_START),
        marker(EventKind.ROW_START),
        marker(EventKind.CELL_START), text("a"), marker(EventKind.CELL_END),
        marker(EventKind.CELL_START), text("b"), marker(EventKind.CELL_END),
        marker(EventKind.ROW_END),
        marker(EventKind.TABLE_HEAD_END),
        marker(EventKind.ROW_START),
        marker(EventKind.CELL_START), text("1"), marker(EventKind.CELL_END),
        marker(EventKind.CELL_START), text("2"), marker(EventKind.CELL_END),
        marker(EventKind.CELL_START), text("3"), marker(EventKind.CELL_END),
        marker(EventKind.ROW_END),
        marker(EventKind.TABLE_END),
    ]

    (table,) = compile_events(events)[0].blocks

    assert table.column_count == 2
    assert [runs_text(cell) for cell in table.body_rows[0]] == ["1", "2"]


def test_table_header_cells_use_header_style():
    deck = compile_markdown("| K |\n|---|\n| v |\n")

    (table,) = deck[0].blocks
    assert table.header_row[0][0].style == DEFAULT_THEME.table_header
    assert table.body_rows[0][0][0].style == DEFAULT_THEME.table


def test_thematic_break_block():
    deck = compile_markdown("above\n\n---\n\nbelow\n")

    assert [type(block) for block in deck[0].blocks] == [Paragraph, ThematicBreak, Paragraph]


def test_inline_code_keeps_backticks_and_code_style():
    deck = compile_markdown("use `pip` here\n")

    runs = deck[0].blocks[0].runs
    assert runs_text(runs) == "use `pip` here"
    assert runs[1].style == DEFAULT_THEME.inline_code


def test_stray_text_opens_a_paragraph():
    deck = compile_events([text("loose")])

    assert [runs_text(block.runs) for block in deck[0].blocks] == ["loose"]


def test_unmatched_end_events_are_ignored():
    deck = compile_events(
        [
            marker(EventKind.ITEM_END),
            marker(EventKind.CODE_END),
            heading_start(1),
            text("T"),
            marker(EventKind.HEADING_END),
            marker(EventKind.TABLE_END),
        ]
    )

    assert len(deck) == 1
    assert deck[0].title_text == "T"


def test_unclosed_blocks_are_closed_at_end_of_stream():
    deck = compile_events([marker(EventKind.PARAGRAPH_START), text("dangling")])

    assert runs_text(deck[0].blocks[0].runs) == "dangling"


def test_finish_is_idempotent_and_feed_after_finish_fails():
    compiler = SlideCompiler()
    compiler.feed(text("x"))
    first = compiler.finish()

    assert compiler.finish() == first
    with pytest.raises(RuntimeError):
        compiler.feed(text("y"))
