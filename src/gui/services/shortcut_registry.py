"""Shortcut Registry Service

Routes key combos to handlers with last-registered-wins semantics so nested,
dynamically shown regions (dialogs, panels) can take and release the same
physical chord without central coordination.

Model:
 - combo id -> ordered stack of registration tokens; token -> handler.
 - ``register`` pushes and returns a token; the newest registration shadows
   (does not remove) older ones for the same combo.
 - ``unregister`` removes one token wherever it sits; visibility falls back to
   the next most recent live registration.
 - ``dispatch`` invokes only the top handler; an empty stack is a no-op so the
   platform default for the chord is left alone.

Handler identity is the token, never the callable, so re-supplying an equal
(or the same) function twice yields two independent registrations.

Thread-safety: stacks are guarded by a re-entrant lock; dispatch snapshots
the top handler under the lock and calls it outside, so a handler may
register/unregister without deadlock and never observes a half-updated stack.
"""

from __future__ import annotations

import itertools
import logging
from threading import RLock
from typing import Any, Callable, Dict, List, Optional

from .key_combo import KeyEvent, encode, key_event_from_qt

try:  # pragma: no cover - only executed when PyQt6 present
    from PyQt6.QtCore import QEvent, QObject
except Exception:  # pragma: no cover
    QEvent = None  # type: ignore
    QObject = object  # type: ignore

__all__ = [
    "ShortcutToken",
    "ShortcutHandler",
    "ShortcutRegistryError",
    "ShortcutRegistry",
    "ShortcutBinding",
    "QtShortcutListener",
]

_log = logging.getLogger(__name__)

ShortcutToken = int
ShortcutHandler = Callable[[Any], Any]


class ShortcutRegistryError(RuntimeError):
    """Raised on lifecycle misuse (unknown token, closed registry, stale binding)."""


class ShortcutRegistry:
    def __init__(self) -> None:
        self._lock = RLock()
        self._stacks: Dict[str, List[ShortcutToken]] = {}
        self._handlers: Dict[ShortcutToken, ShortcutHandler] = {}
        self._tokens = itertools.count(1)
        self._closed = False

    # Registration -------------------------------------------------
    def register(self, combo: str, handler: ShortcutHandler) -> ShortcutToken:
        with self._lock:
            self._ensure_open()
            token = next(self._tokens)
            self._handlers[token] = handler
            self._stacks.setdefault(combo, []).append(token)
            depth = len(self._stacks[combo])
        _log.debug("register: %s token=%d depth=%d", combo, token, depth)
        return token

    def unregister(self, combo: str, token: ShortcutToken) -> None:
        with self._lock:
            stack = self._stacks.get(combo)
            if not stack or token not in stack:
                raise ShortcutRegistryError(f"Token {token} is not registered for {combo!r}")
            stack.remove(token)
            del self._handlers[token]
            if not stack:
                del self._stacks[combo]
        _log.debug("unregister: %s token=%d", combo, token)

    # Dispatch -----------------------------------------------------
    def dispatch(self, combo: str, event: Any = None) -> bool:
        """Invoke the most recent handler for *combo*. Returns True if one ran."""
        handler = self.active_handler(combo)
        if handler is None:
            return False
        _log.debug("dispatch: %s", combo)
        handler(event)
        return True

    def dispatch_event(self, event: KeyEvent, platform: Optional[str] = None) -> bool:
        return self.dispatch(encode(event, platform), event)

    # Introspection ------------------------------------------------
    def active_handler(self, combo: str) -> Optional[ShortcutHandler]:
        with self._lock:
            stack = self._stacks.get(combo)
            return self._handlers[stack[-1]] if stack else None

    def depth(self, combo: str) -> int:
        with self._lock:
            return len(self._stacks.get(combo, ()))

    def combos(self) -> List[str]:
        with self._lock:
            return list(self._stacks.keys())

    def is_registered(self, combo: str, token: ShortcutToken) -> bool:
        with self._lock:
            return token in self._stacks.get(combo, ())

    # Lifecycle ----------------------------------------------------
    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop accepting registrations; leftover entries are logged and dropped."""
        with self._lock:
            leftovers = {combo: len(stack) for combo, stack in self._stacks.items()}
            self._stacks.clear()
            self._handlers.clear()
            self._closed = True
        if leftovers:
            _log.warning("Shortcut registry closed with live registrations: %s", leftovers)

    def _ensure_open(self) -> None:
        if self._closed:
            raise ShortcutRegistryError("Shortcut registry used outside an active scope")


class ShortcutBinding:
    """Long-lived owner of one registration.

    The registry sees a single stable wrapper; ``set_handler`` swaps the
    callable behind it without a register/unregister cycle. Each invocation
    prevents the chord's default behaviour before calling the handler.

    Usage
    -----
    with ShortcutBinding(registry, "Ctrl+KeyS", save):
        ...  # Ctrl+S routed to ``save`` until the block exits (even on error)
    """

    def __init__(self, registry: ShortcutRegistry, combo: str, handler: ShortcutHandler):
        if registry is None:
            raise ShortcutRegistryError("ShortcutBinding requires a ShortcutRegistry")
        self._registry = registry
        self._combo = combo
        self._handler = handler
        self._token: Optional[ShortcutToken] = None

    @property
    def combo(self) -> str:
        return self._combo

    @property
    def active(self) -> bool:
        return self._token is not None

    def set_handler(self, handler: ShortcutHandler) -> None:
        self._handler = handler

    def set_combo(self, combo: str) -> None:
        if combo == self._combo:
            return
        if self.active:
            self.stop()
            self._combo = combo
            self.start()
        else:
            self._combo = combo

    def start(self) -> "ShortcutBinding":
        if self.active:
            raise ShortcutRegistryError(f"Binding for {self._combo!r} already started")
        self._token = self._registry.register(self._combo, self._invoke)
        return self

    def stop(self) -> None:
        if not self.active:
            raise ShortcutRegistryError(f"Binding for {self._combo!r} is not active")
        token, self._token = self._token, None
        self._registry.unregister(self._combo, token)

    def _invoke(self, event: Any) -> Any:
        prevent = getattr(event, "prevent_default", None)
        if callable(prevent):
            prevent()
        return self._handler(event)

    def __enter__(self) -> "ShortcutBinding":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.active:
            self.stop()


class QtShortcutListener(QObject):  # type: ignore[misc]
    """Application-wide key listener feeding a ``ShortcutRegistry``.

    Installed once on the QApplication as an event filter. ShortcutOverride
    events for combos with a live handler are accepted so Qt delivers the
    KeyPress here instead of firing a competing QShortcut. A KeyPress that
    reached a handler is consumed at the first receiver, so Qt's parent
    propagation never dispatches the same press twice.
    """

    def __init__(self, registry: ShortcutRegistry, *, platform: Optional[str] = None):
        super().__init__()
        self._registry = registry
        self._platform = platform
        self._app = None

    @property
    def attached(self) -> bool:
        return self._app is not None

    def attach(self, app) -> None:
        if self._app is not None:
            return
        app.installEventFilter(self)
        self._app = app

    def detach(self) -> None:
        if self._app is None:
            return
        self._app.removeEventFilter(self)
        self._app = None

    def eventFilter(self, obj, event):  # noqa: N802 - Qt override
        etype = event.type()
        if etype == QEvent.Type.ShortcutOverride:
            key_event = key_event_from_qt(event, self._platform)
            if self._registry.active_handler(encode(key_event, self._platform)) is not None:
                event.accept()
                return True
            return False
        if etype == QEvent.Type.KeyPress:
            key_event = key_event_from_qt(event, self._platform)
            return self._registry.dispatch_event(key_event, self._platform)
        return False
