"""Slide deck compilation and layout."""

from .models import (
    Block,
    CodeBlock,
    Deck,
    Heading,
    ListItem,
    Paragraph,
    Slide,
    Style,
    StyledRun,
    Table,
    ThematicBreak,
)
from .theme import DEFAULT_THEME, Theme

__all__ = [
    "Block",
    "CodeBlock",
    "DEFAULT_THEME",
    "Deck",
    "Heading",
    "ListItem",
    "Paragraph",
    "Slide",
    "Style",
    "StyledRun",
    "Table",
    "Theme",
    "ThematicBreak",
]
