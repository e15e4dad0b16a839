"""Application bootstrap for the desktop summary tool.

Responsibilities:
 - Create (or reuse) the QApplication unless running headless
 - Own the single ShortcutRegistry and install its root key listener once
 - Attach the in-process logging ring buffer
 - Provide a shutdown path that detaches everything again

The registry is an explicitly owned object handed to views through the
returned context, not a module-level global. PyQt6 is imported lazily so
headless callers (tests, CLI) never need a display.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Optional

from gui.services.logging_service import LoggingService
from gui.services.shortcut_registry import QtShortcutListener, ShortcutRegistry

__all__ = ["AppContext", "create_app"]

_log = logging.getLogger(__name__)


@dataclass
class AppContext:
    """References created during bootstrap.

    Attributes
    ----------
    qt_app: The QApplication instance (None when headless)
    headless: Whether headless bootstrap was used
    shortcuts: Application-wide shortcut registry
    listener: Root key listener (None when headless)
    logging_service: Ring-buffer log capture attached to the root logger
    """

    qt_app: Optional[Any]
    headless: bool
    shortcuts: ShortcutRegistry
    listener: Optional[QtShortcutListener]
    logging_service: LoggingService
    _shut_down: bool = field(default=False, repr=False)

    def shutdown(self) -> None:
        """Detach the key listener, close the registry and stop log capture."""
        if self._shut_down:
            return
        self._shut_down = True
        if self.listener is not None:
            self.listener.detach()
        self.shortcuts.close()
        self.logging_service.detach_root()
        _log.debug("Application context shut down")


def create_app(
    *,
    headless: bool | None = None,
    platform: str | None = None,
    log_capacity: int = 500,
) -> AppContext:
    """Create the application context.

    Parameters
    ----------
    headless: Skip Qt entirely. Defaults to True when the
        ``PRODTALLY_HEADLESS`` environment variable is set.
    platform: Override for the shortcut platform remap (defaults to sys.platform).
    log_capacity: Ring buffer size of the logging service.
    """
    if headless is None:
        headless = bool(os.environ.get("PRODTALLY_HEADLESS"))
    logging_service = LoggingService(capacity=log_capacity)
    logging_service.attach_root()
    shortcuts = ShortcutRegistry()
    qt_app = None
    listener = None
    if not headless:
        from PyQt6.QtWidgets import QApplication  # type: ignore

        qt_app = QApplication.instance() or QApplication(sys.argv)
        listener = QtShortcutListener(shortcuts, platform=platform)
        listener.attach(qt_app)
    ctx = AppContext(
        qt_app=qt_app,
        headless=headless,
        shortcuts=shortcuts,
        listener=listener,
        logging_service=logging_service,
    )
    atexit.register(ctx.shutdown)
    _log.debug("Application context created (headless=%s)", headless)
    return ctx
