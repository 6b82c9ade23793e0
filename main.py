"""Compatibility bootstrap that forwards to the termdeck CLI orchestrator."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from termdeck.cli.orchestrator import run_cli


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Execute the CLI with the supplied ``argv`` sequence."""

    return run_cli(argv)


if __name__ == "__main__":
    sys.exit(main())
