import os
import tempfile

import pytest

# Keep the rotating log file out of the user's state directory; the logger is
# configured as soon as the package is imported.
os.environ.setdefault("TERMDECK_LOG_DIR", tempfile.mkdtemp(prefix="termdeck-tests-"))

from termdeck.config_manager import loader as cfg_loader  # noqa: E402
from termdeck.core.highlighting import CodeHighlighter  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    monkeypatch.setattr(cfg_loader, "_ACTIVE_SETTINGS", None)
    for name in (
        "TERMDECK_CODE_THEME",
        "TERMDECK_TAB_WIDTH",
        "TERMDECK_MARGIN",
        "TERMDECK_DEBUG",
        "TERMDECK_SOFTBREAK_AS_NEWLINE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def highlighter() -> CodeHighlighter:
    return CodeHighlighter("monokai")
