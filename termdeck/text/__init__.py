"""Text helpers."""

from .width import grapheme_width, split_graphemes, take_width, text_width

__all__ = [
    "grapheme_width",
    "split_graphemes",
    "take_width",
    "text_width",
]
