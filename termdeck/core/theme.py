"""Colour assignments for the rendered deck."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .models import Style


@dataclass(frozen=True, slots=True)
class Theme:
    text: Style = Style(fg="white")
    title: Style = Style(fg="cyan", bold=True)
    # Levels 2, 3 and 4+; level 1 only ever appears as a slide title.
    headings: Tuple[Style, ...] = (
        Style(fg="blue", bold=True),
        Style(fg="green", bold=True),
        Style(fg="yellow", bold=True),
    )
    inline_code: Style = Style(fg="green", code=True)
    bullet: Style = Style(fg="yellow")
    table: Style = Style(fg="cyan")
    table_header: Style = Style(fg="cyan", bold=True)
    table_border: Style = Style(fg="gray")
    code_gutter: Style = Style(fg="gray")
    rule: Style = Style(fg="gray")
    footer: Style = Style(fg="yellow")

    def heading(self, level: int) -> Style:
        if level <= 1:
            return self.title
        position = min(level - 2, len(self.headings) - 1)
        return self.headings[position]


DEFAULT_THEME = Theme()

__all__ = ["DEFAULT_THEME", "Theme"]
