"""Markdown parsing into structural events and styled inline runs."""

from .events import EventKind, MarkdownEvent, create_parser, iter_markdown_events
from .inline import InlineComposer, compose_inline

__all__ = [
    "EventKind",
    "InlineComposer",
    "MarkdownEvent",
    "compose_inline",
    "create_parser",
    "iter_markdown_events",
]
