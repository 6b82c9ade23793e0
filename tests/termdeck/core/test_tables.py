from __future__ import annotations

from termdeck.core.models import StyledRun, Table
from termdeck.core.tables import (
    MIN_COLUMN_WIDTH,
    border_overhead,
    compute_column_widths,
    natural_column_widths,
    render_table,
)
from termdeck.core.theme import DEFAULT_THEME
from termdeck.core.wrapping import line_text, line_width


def _cell(value: str):
    return (StyledRun(value),) if value else ()


def _table(header, *rows):
    return Table(
        header_row=tuple(_cell(value) for value in header),
        body_rows=tuple(tuple(_cell(value) for value in row) for row in rows),
        column_count=len(header),
    )


def test_natural_widths_fit_unchanged():
    assert compute_column_widths([5, 5], 100) == [5, 5]
    assert compute_column_widths([5, 5], 5 + 5 + border_overhead(2)) == [5, 5]


def test_shrinking_distributes_remainder_deterministically():
    # Nine cells for two equal columns: the tie goes to the leftmost column.
    assert compute_column_widths([5, 5], 16) == [5, 4]


def test_shrinking_is_proportional():
    widths = compute_column_widths([30, 10], 27)

    assert sum(widths) + border_overhead(2) == 27
    assert widths == [15, 5]


def test_small_columns_keep_their_floor():
    assert compute_column_widths([20, 2], 15) == [6, 2]


def test_columns_never_shrink_below_the_minimum():
    assert compute_column_widths([10, 10], 5) == [MIN_COLUMN_WIDTH, MIN_COLUMN_WIDTH]


def test_widths_are_idempotent():
    for natural, max_width in (([30, 10], 27), ([5, 5], 16), ([20, 2], 15), ([8, 9, 40], 30)):
        first = compute_column_widths(natural, max_width)
        assert compute_column_widths(natural, max_width) == first
        assert compute_column_widths(first, max_width) == first


def test_natural_widths_use_display_width():
    table = _table(["名前", "x"], ["a", "long"])

    assert natural_column_widths(table) == [4, 4]


def test_render_table_box_drawing():
    table = _table(["Name", "Qty"], ["apple", "3"])

    lines = [line_text(line) for line in render_table(table, 40, DEFAULT_THEME)]

    assert lines == [
        "┌───────┬─────┐",
        "│ Name  │ Qty │",
        "├───────┼─────┤",
        "│ apple │ 3   │",
        "└───────┴─────┘",
    ]


def test_cells_wrap_and_rows_grow():
    table = _table(["h"], ["alpha beta gamma"])

    lines = render_table(table, 10, DEFAULT_THEME)

    assert [line_text(line) for line in lines[3:6]] == [
        "│ alpha  │",
        "│ beta   │",
        "│ gamma  │",
    ]
    assert len(lines) == 7
    assert {line_width(line) for line in lines} == {10}


def test_missing_cells_render_empty():
    table = Table(
        header_row=(_cell("H1"), _cell("H2")),
        body_rows=(((StyledRun("a"),),),),
        column_count=2,
    )

    lines = [line_text(line) for line in render_table(table, 40, DEFAULT_THEME)]

    assert lines[3] == "│ a  │    │"


def test_header_cells_keep_their_style():
    header_style = DEFAULT_THEME.table_header
    table = Table(
        header_row=((StyledRun("Key", header_style),),),
        body_rows=(),
        column_count=1,
    )

    header_line = render_table(table, 20, DEFAULT_THEME)[1]

    assert StyledRun("Key", header_style) in header_line
