import io
import logging

import pytest

from gui.app.bootstrap import create_app
from gui.services.logging_service import configure_logging
from gui.services.shortcut_registry import ShortcutRegistryError


def test_headless_context_owns_registry_and_logging():
    ctx = create_app(headless=True)
    try:
        assert ctx.qt_app is None and ctx.listener is None
        assert ctx.logging_service.attached
        token = ctx.shortcuts.register("Escape", lambda e: None)
        ctx.shortcuts.unregister("Escape", token)
    finally:
        ctx.shutdown()
    assert not ctx.logging_service.attached
    with pytest.raises(ShortcutRegistryError):
        ctx.shortcuts.register("Escape", lambda e: None)


def test_shutdown_is_idempotent():
    ctx = create_app(headless=True)
    ctx.shutdown()
    ctx.shutdown()
    assert ctx.shortcuts.closed


def test_qt_context_attaches_listener(qtbot):
    ctx = create_app(headless=False, platform="linux")
    try:
        assert ctx.qt_app is not None
        assert ctx.listener is not None and ctx.listener.attached
    finally:
        ctx.shutdown()
    assert not ctx.listener.attached


def test_console_level_survives_debug_capture():
    stream = io.StringIO()
    configure_logging("WARNING", stream=stream)
    ctx = create_app(headless=True)
    try:
        token = ctx.shortcuts.register("Escape", lambda e: None)
        ctx.shortcuts.dispatch("Escape")
        ctx.shortcuts.unregister("Escape", token)
        logging.getLogger("gui.app").warning("visible")
    finally:
        ctx.shutdown()
    console = stream.getvalue()
    assert "DEBUG" not in console
    assert "visible" in console
    captured = ctx.logging_service.filter(name_contains="shortcut_registry")
    assert any(e.level == "DEBUG" for e in captured)
