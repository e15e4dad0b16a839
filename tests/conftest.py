"""Shared fixtures.

Qt tests run on the offscreen platform so the suite works without a display.
"""

import logging
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from gui.services.logging_service import CONSOLE_HANDLER_NAME  # noqa: E402
from gui.services.shortcut_registry import ShortcutRegistry  # noqa: E402
from tests.factories import scenario_projects  # noqa: E402


@pytest.fixture
def registry():
    reg = ShortcutRegistry()
    yield reg
    reg.close()


@pytest.fixture
def projects():
    return scenario_projects()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            root.removeHandler(handler)
    root.setLevel(level)
