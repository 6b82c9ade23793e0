"""Column sizing and box-drawing rendering of markdown tables.

Column widths are measured in terminal cells (see :mod:`termdeck.text.width`).
A table with ``n`` columns spends ``3 * n + 1`` cells on borders and padding:
one border character per column edge plus a space on each side of every cell.
When the natural widths do not fit, columns shrink in proportion to their
natural width, never below :data:`MIN_COLUMN_WIDTH` (or their natural width
when that is smaller). Integer shares are computed exactly and the remaining
cells go to the largest fractional parts first, then to the leftmost columns,
so the same table and width always produce the same layout.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from termdeck.text import take_width, text_width

from .models import Line, Runs, Style, StyledRun, Table
from .theme import Theme
from .wrapping import wrap_runs

MIN_COLUMN_WIDTH = 3


def border_overhead(column_count: int) -> int:
    return 3 * column_count + 1


def _cell_width(cell: Runs) -> int:
    widest = 0
    current = 0
    for run in cell:
        if run.is_line_break:
            widest = max(widest, current)
            current = 0
            continue
        current += text_width(run.text)
    return max(widest, current)


def natural_column_widths(table: Table) -> List[int]:
    """Return the widest cell of every column, at least one cell wide."""

    widths = [1] * table.column_count
    for row in table.rows():
        for position, cell in enumerate(row[: table.column_count]):
            widths[position] = max(widths[position], _cell_width(cell))
    return widths


def compute_column_widths(natural: Sequence[int], max_width: int) -> List[int]:
    """Fit ``natural`` column widths into ``max_width`` cells including borders."""

    widths = [max(1, int(value)) for value in natural]
    if not widths:
        return []
    available = max_width - border_overhead(len(widths))
    if sum(widths) <= available:
        return widths

    floors = [min(MIN_COLUMN_WIDTH, value) for value in widths]
    if available <= sum(floors):
        return floors

    fixed: Dict[int, int] = {}
    while True:
        free = [position for position in range(len(widths)) if position not in fixed]
        budget = available - sum(fixed.values())
        free_total = sum(widths[position] for position in free)
        below_floor = [
            position
            for position in free
            if budget * widths[position] < floors[position] * free_total
        ]
        if not below_floor:
            break
        for position in below_floor:
            fixed[position] = floors[position]

    result = list(floors)
    for position, value in fixed.items():
        result[position] = value
    if not free:
        return result

    remainders = []
    assigned = 0
    for position in free:
        share, remainder = divmod(budget * widths[position], free_total)
        result[position] = share
        assigned += share
        remainders.append((-remainder, position))
    for _, position in sorted(remainders)[: budget - assigned]:
        result[position] += 1
    return [min(value, natural_value) for value, natural_value in zip(result, widths)]


def _fit_line(line: Line, width: int, pad_style: Style) -> List[StyledRun]:
    """Truncate ``line`` to ``width`` cells and pad it with spaces."""

    fitted: List[StyledRun] = []
    used = 0
    for run in line:
        if used >= width:
            break
        head, _ = take_width(run.text, width - used)
        if head:
            fitted.append(StyledRun(head, run.style))
            used += text_width(head)
    if used < width:
        fitted.append(StyledRun(" " * (width - used), pad_style))
    return fitted


def _border_line(widths: Sequence[int], left: str, middle: str, right: str, theme: Theme) -> Line:
    segments = middle.join("─" * (width + 2) for width in widths)
    return (StyledRun(f"{left}{segments}{right}", theme.table_border),)


def _row_lines(row: Sequence[Runs], widths: Sequence[int], theme: Theme) -> List[Line]:
    wrapped_cells = []
    for position, width in enumerate(widths):
        cell = row[position] if position < len(row) else ()
        wrapped_cells.append(wrap_runs(cell, width))
    height = max(len(lines) for lines in wrapped_cells)

    lines: List[Line] = []
    for line_index in range(height):
        runs: List[StyledRun] = [StyledRun("│", theme.table_border)]
        for width, cell_lines in zip(widths, wrapped_cells):
            content = cell_lines[line_index] if line_index < len(cell_lines) else ()
            runs.append(StyledRun(" ", theme.table))
            runs.extend(_fit_line(content, width, theme.table))
            runs.append(StyledRun(" ", theme.table))
            runs.append(StyledRun("│", theme.table_border))
        lines.append(tuple(runs))
    return lines


def render_table(table: Table, max_width: int, theme: Theme) -> List[Line]:
    """Lay out ``table`` as bordered lines no wider than ``max_width`` when possible.

    When even the minimum column widths do not fit, the lines are wider than
    ``max_width`` and the frame renderer truncates them.
    """

    if table.column_count <= 0:
        return []
    widths = compute_column_widths(natural_column_widths(table), max_width)

    lines: List[Line] = [_border_line(widths, "┌", "┬", "┐", theme)]
    lines.extend(_row_lines(table.header_row, widths, theme))
    lines.append(_border_line(widths, "├", "┼", "┤", theme))
    for row in table.body_rows:
        lines.extend(_row_lines(row, widths, theme))
    lines.append(_border_line(widths, "└", "┴", "┘", theme))
    return lines


__all__ = [
    "MIN_COLUMN_WIDTH",
    "border_overhead",
    "compute_column_widths",
    "natural_column_widths",
    "render_table",
]
