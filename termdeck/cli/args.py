"""Argument parsing helpers for the termdeck CLI."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from termdeck import __version__


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termdeck",
        description="Present a markdown document as full-screen terminal slides.",
    )
    parser.add_argument("path", help="Markdown document to present; every H1 heading starts a slide.")
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "Path to a configuration override JSON file (defaults to conf/config.local.json "
            "if present)."
        ),
    )
    parser.add_argument("--code-theme", help="Pygments style used to highlight fenced code.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging output.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse ``argv``; argparse exits with status 2 on invalid usage."""

    return build_cli_parser().parse_args(argv)


__all__ = ["build_cli_parser", "parse_cli_args"]
