"""prodtally GUI public API.

Curated, intentionally small surface for the CLI and tests:
- Shortcut dispatch (registry, bindings, key combo codec)
- Bootstrap helpers

Importing this package never creates a QApplication.
"""

from __future__ import annotations

from .services.key_combo import KeyEvent, encode  # noqa: F401
from .services.shortcut_registry import (  # noqa: F401
    ShortcutBinding,
    ShortcutRegistry,
    ShortcutRegistryError,
)
from .app.bootstrap import AppContext, create_app  # noqa: F401

__all__ = [
    "KeyEvent",
    "encode",
    "ShortcutBinding",
    "ShortcutRegistry",
    "ShortcutRegistryError",
    "AppContext",
    "create_app",
]
