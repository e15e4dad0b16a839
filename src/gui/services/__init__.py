"""Service layer exports.

Responsibilities:
 - Key combo encoding and shortcut dispatch
 - Project selection state and memoized summary computations
 - In-process log capture
"""

from .key_combo import KeyEvent, encode  # noqa: F401
from .shortcut_registry import ShortcutBinding, ShortcutRegistry  # noqa: F401
from .selection_filter import SelectionFilter  # noqa: F401
from .stats_cache_service import StatsCacheService  # noqa: F401

__all__ = [
    "KeyEvent",
    "encode",
    "ShortcutBinding",
    "ShortcutRegistry",
    "SelectionFilter",
    "StatsCacheService",
]
