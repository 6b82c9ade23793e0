"""Reading markdown documents from disk."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from . import logging_manager
from .errors import DocumentLoadError

logger = logging_manager.get_logger()


def load_document(path: Union[str, Path]) -> str:
    """Return the text of the UTF-8 document at ``path``.

    A leading byte-order mark is dropped. Missing files, unreadable files and
    invalid UTF-8 all raise :class:`DocumentLoadError`.
    """

    document_path = Path(path).expanduser()
    try:
        raw = document_path.read_bytes()
    except FileNotFoundError as exc:
        raise DocumentLoadError(f"Failed to read file '{path}': file not found") from exc
    except IsADirectoryError as exc:
        raise DocumentLoadError(f"Failed to read file '{path}': is a directory") from exc
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read file '{path}': {exc.strerror or exc}") from exc

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DocumentLoadError(
            f"Failed to read file '{path}': not valid UTF-8 (byte {exc.start})"
        ) from exc

    logger.debug(
        "Loaded %d characters from %s",
        len(text),
        document_path,
        extra={"event": "document.loaded", "document": str(document_path), "console_suppress": True},
    )
    return text


__all__ = ["load_document"]
