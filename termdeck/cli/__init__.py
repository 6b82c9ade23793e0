"""Command line interface for termdeck.

* :mod:`termdeck.cli.args` builds the argument parser.
* :mod:`termdeck.cli.orchestrator` loads configuration and the document,
  compiles the deck and hands it to the terminal session.
* :mod:`termdeck.cli.main` is the console script entry point.
"""

from . import args, main, orchestrator

__all__ = ["args", "main", "orchestrator"]
