"""Terminal display width of Unicode text.

Widths are computed per extended grapheme cluster so that combining marks,
zero-width joiner sequences and variation selectors stay attached to their
base character:

* East Asian Wide and Fullwidth characters occupy two cells.
* Combining marks, format characters and control characters occupy none.
* A cluster carrying the emoji presentation selector (U+FE0F) occupies two.
"""

from __future__ import annotations

import unicodedata
from functools import lru_cache
from typing import List, Tuple

import regex

_GRAPHEME_PATTERN = regex.compile(r"\X")
_EMOJI_PRESENTATION = "\ufe0f"
_ZERO_WIDTH_CATEGORIES = {"Mn", "Me", "Cf", "Cc", "Cs"}
_WIDE_EAST_ASIAN = {"W", "F"}


def split_graphemes(text: str) -> List[str]:
    """Return the extended grapheme clusters of ``text``."""

    if not text:
        return []
    return _GRAPHEME_PATTERN.findall(text)


@lru_cache(maxsize=4096)
def grapheme_width(grapheme: str) -> int:
    """Return the number of terminal cells used by a single grapheme cluster."""

    if not grapheme:
        return 0
    base = grapheme[0]
    if unicodedata.category(base) in _ZERO_WIDTH_CATEGORIES:
        # A cluster that starts with a mark still renders whatever follows it.
        rest = grapheme[1:]
        return grapheme_width(rest) if rest else 0
    if unicodedata.east_asian_width(base) in _WIDE_EAST_ASIAN:
        return 2
    if _EMOJI_PRESENTATION in grapheme:
        return 2
    return 1


def text_width(text: str) -> int:
    """Return the terminal display width of ``text``."""

    if not text:
        return 0
    if text.isascii():
        return sum(1 for char in text if char.isprintable())
    return sum(grapheme_width(grapheme) for grapheme in split_graphemes(text))


def take_width(text: str, width: int) -> Tuple[str, str]:
    """Split ``text`` so the head fits in ``width`` cells.

    A grapheme that would straddle the limit goes to the tail. Zero-width
    clusters stay with the head.
    """

    if width <= 0:
        return "", text
    used = 0
    head: List[str] = []
    graphemes = split_graphemes(text)
    for position, grapheme in enumerate(graphemes):
        cells = grapheme_width(grapheme)
        if used + cells > width:
            return "".join(head), "".join(graphemes[position:])
        head.append(grapheme)
        used += cells
    return "".join(head), ""


__all__ = ["grapheme_width", "split_graphemes", "take_width", "text_width"]
