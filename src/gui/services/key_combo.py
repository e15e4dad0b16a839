"""Key combo codec.

Turns a physical key event into a canonical combo id such as ``Ctrl+KeyC`` or
``Ctrl+Alt+Shift+F5``. Prefix tokens always appear in the order
Ctrl, Win, Alt, Shift, followed by the physical key code.

Platform remap: on Apple platforms the primary modifier ("Ctrl+") is the
Command/Meta key and the secondary modifier ("Win+") is Control; everywhere
else primary is Control and secondary is Meta/Super. One combo id therefore
means the OS-idiomatic chord on both families.

Qt notes: the key code comes from the native scan code (or the macOS
virtual key) so it names the key position whatever the keyboard layout; the
layout-mapped ``Qt.Key`` is only a fallback for synthetic events without
native data. Qt reports Command as ``ControlModifier`` on macOS (and Control as
``MetaModifier``). ``key_event_from_qt`` undoes that swap so ``KeyEvent.meta``
always means the physical Command/Super key before ``encode`` applies the
remap above.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

__all__ = [
    "KeyEvent",
    "encode",
    "is_apple_platform",
    "is_windows_platform",
    "key_event_from_qt",
    "physical_code",
    "qt_key_to_code",
]

_APPLE_MARKERS = ("darwin", "mac", "ios")


def is_apple_platform(platform: Optional[str] = None) -> bool:
    name = (platform if platform is not None else sys.platform).lower()
    return any(marker in name for marker in _APPLE_MARKERS)


@dataclass
class KeyEvent:
    """Toolkit-neutral key-down event.

    ``ctrl`` / ``meta`` describe the physical Control and Command/Super keys.
    ``native`` optionally carries the originating toolkit event.
    """

    code: str
    ctrl: bool = False
    meta: bool = False
    alt: bool = False
    shift: bool = False
    native: Any = field(default=None, repr=False, compare=False)
    default_prevented: bool = field(default=False, compare=False)

    def prevent_default(self) -> None:
        self.default_prevented = True
        accept = getattr(self.native, "accept", None)
        if callable(accept):
            accept()


def encode(event: KeyEvent, platform: Optional[str] = None) -> str:
    apple = is_apple_platform(platform)
    primary = event.meta if apple else event.ctrl
    secondary = event.ctrl if apple else event.meta
    return (
        ("Ctrl+" if primary else "")
        + ("Win+" if secondary else "")
        + ("Alt+" if event.alt else "")
        + ("Shift+" if event.shift else "")
        + event.code
    )


# Physical key tables ------------------------------------------------------
#
# Qt hands over the native key position alongside the layout-mapped key:
# X11/Wayland report the xkb keycode (evdev code + 8), Windows the set-1 scan
# code with 0x100 marking the E0-extended keys, and macOS the kVK virtual key.

_XKB_KEYCODE_OFFSET = 8
_WINDOWS_EXTENDED = 0x100


def _set1_codes() -> Dict[int, str]:
    codes: Dict[int, str] = {
        0x01: "Escape",
        0x0C: "Minus",
        0x0D: "Equal",
        0x0E: "Backspace",
        0x0F: "Tab",
        0x1A: "BracketLeft",
        0x1B: "BracketRight",
        0x1C: "Enter",
        0x1D: "ControlLeft",
        0x27: "Semicolon",
        0x28: "Quote",
        0x29: "Backquote",
        0x2A: "ShiftLeft",
        0x2B: "Backslash",
        0x33: "Comma",
        0x34: "Period",
        0x35: "Slash",
        0x36: "ShiftRight",
        0x37: "NumpadMultiply",
        0x38: "AltLeft",
        0x39: "Space",
        0x3A: "CapsLock",
        0x45: "NumLock",
        0x46: "ScrollLock",
        0x4A: "NumpadSubtract",
        0x4E: "NumpadAdd",
        0x53: "NumpadDecimal",
        0x56: "IntlBackslash",
        0x57: "F11",
        0x58: "F12",
    }
    rows = (
        (0x02, "Digit", "1234567890"),
        (0x10, "Key", "QWERTYUIOP"),
        (0x1E, "Key", "ASDFGHJKL"),
        (0x2C, "Key", "ZXCVBNM"),
        (0x47, "Numpad", "789"),
        (0x4B, "Numpad", "456"),
        (0x4F, "Numpad", "1230"),
    )
    for start, prefix, keys in rows:
        for offset, key in enumerate(keys):
            codes[start + offset] = prefix + key
    for n in range(10):
        codes[0x3B + n] = f"F{n + 1}"
    return codes


_EVDEV_CODES: Dict[int, str] = {
    **_set1_codes(),
    96: "NumpadEnter",
    97: "ControlRight",
    98: "NumpadDivide",
    99: "PrintScreen",
    100: "AltRight",
    102: "Home",
    103: "ArrowUp",
    104: "PageUp",
    105: "ArrowLeft",
    106: "ArrowRight",
    107: "End",
    108: "ArrowDown",
    109: "PageDown",
    110: "Insert",
    111: "Delete",
    117: "NumpadEqual",
    119: "Pause",
    125: "MetaLeft",
    126: "MetaRight",
    127: "ContextMenu",
    **{183 + n: f"F{13 + n}" for n in range(12)},
}

_WINDOWS_SCAN_CODES: Dict[int, str] = {
    **_set1_codes(),
    # Windows reports Pause as plain 0x45 and NumLock as the extended variant.
    0x45: "Pause",
    0x59: "NumpadEqual",
    **{0x64 + n: f"F{13 + n}" for n in range(11)},
    **{
        _WINDOWS_EXTENDED | code: name
        for code, name in {
            0x1C: "NumpadEnter",
            0x1D: "ControlRight",
            0x35: "NumpadDivide",
            0x37: "PrintScreen",
            0x38: "AltRight",
            0x45: "NumLock",
            0x47: "Home",
            0x48: "ArrowUp",
            0x49: "PageUp",
            0x4B: "ArrowLeft",
            0x4D: "ArrowRight",
            0x4F: "End",
            0x50: "ArrowDown",
            0x51: "PageDown",
            0x52: "Insert",
            0x53: "Delete",
            0x5B: "MetaLeft",
            0x5C: "MetaRight",
            0x5D: "ContextMenu",
        }.items()
    },
}

_MAC_VIRTUAL_KEYS: Dict[int, str] = {
    0x00: "KeyA", 0x01: "KeyS", 0x02: "KeyD", 0x03: "KeyF", 0x04: "KeyH",
    0x05: "KeyG", 0x06: "KeyZ", 0x07: "KeyX", 0x08: "KeyC", 0x09: "KeyV",
    0x0A: "IntlBackslash", 0x0B: "KeyB", 0x0C: "KeyQ", 0x0D: "KeyW", 0x0E: "KeyE",
    0x0F: "KeyR", 0x10: "KeyY", 0x11: "KeyT", 0x12: "Digit1", 0x13: "Digit2",
    0x14: "Digit3", 0x15: "Digit4", 0x16: "Digit6", 0x17: "Digit5", 0x18: "Equal",
    0x19: "Digit9", 0x1A: "Digit7", 0x1B: "Minus", 0x1C: "Digit8", 0x1D: "Digit0",
    0x1E: "BracketRight", 0x1F: "KeyO", 0x20: "KeyU", 0x21: "BracketLeft", 0x22: "KeyI",
    0x23: "KeyP", 0x24: "Enter", 0x25: "KeyL", 0x26: "KeyJ", 0x27: "Quote",
    0x28: "KeyK", 0x29: "Semicolon", 0x2A: "Backslash", 0x2B: "Comma", 0x2C: "Slash",
    0x2D: "KeyN", 0x2E: "KeyM", 0x2F: "Period", 0x30: "Tab", 0x31: "Space",
    0x32: "Backquote", 0x33: "Backspace", 0x35: "Escape", 0x36: "MetaRight",
    0x37: "MetaLeft", 0x38: "ShiftLeft", 0x39: "CapsLock", 0x3A: "AltLeft",
    0x3B: "ControlLeft", 0x3C: "ShiftRight", 0x3D: "AltRight", 0x3E: "ControlRight",
    0x40: "F17", 0x41: "NumpadDecimal", 0x43: "NumpadMultiply", 0x45: "NumpadAdd",
    0x47: "NumLock", 0x4B: "NumpadDivide", 0x4C: "NumpadEnter", 0x4E: "NumpadSubtract",
    0x4F: "F18", 0x50: "F19", 0x51: "NumpadEqual", 0x52: "Numpad0", 0x53: "Numpad1",
    0x54: "Numpad2", 0x55: "Numpad3", 0x56: "Numpad4", 0x57: "Numpad5", 0x58: "Numpad6",
    0x59: "Numpad7", 0x5A: "F20", 0x5B: "Numpad8", 0x5C: "Numpad9", 0x60: "F5",
    0x61: "F6", 0x62: "F7", 0x63: "F3", 0x64: "F8", 0x65: "F9", 0x67: "F11",
    0x69: "F13", 0x6A: "F16", 0x6B: "F14", 0x6D: "F10", 0x6F: "F12", 0x71: "F15",
    0x72: "Insert", 0x73: "Home", 0x74: "PageUp", 0x75: "Delete", 0x76: "F4",
    0x77: "End", 0x78: "F2", 0x79: "PageDown", 0x7A: "F1", 0x7B: "ArrowLeft",
    0x7C: "ArrowRight", 0x7D: "ArrowDown", 0x7E: "ArrowUp",
}


def is_windows_platform(platform: Optional[str] = None) -> bool:
    name = (platform if platform is not None else sys.platform).lower()
    return name.startswith(("win", "cygwin", "msys"))


def physical_code(
    scan_code: int, virtual_key: int = 0, platform: Optional[str] = None
) -> Optional[str]:
    """DOM-style code for a native key position, or None when unknown.

    Zero means "no native data" (synthetic events). On macOS that includes
    ``kVK_ANSI_A``, which callers then resolve through the key name.
    """
    if is_apple_platform(platform):
        return _MAC_VIRTUAL_KEYS.get(virtual_key) if virtual_key else None
    if is_windows_platform(platform):
        return _WINDOWS_SCAN_CODES.get(scan_code) if scan_code else None
    if scan_code <= _XKB_KEYCODE_OFFSET:
        return None
    return _EVDEV_CODES.get(scan_code - _XKB_KEYCODE_OFFSET)


# Qt key name fallback -----------------------------------------------------
#
# Used only when the event carries no native position; the Qt key is the
# layout-mapped character, so shifted symbols assume a US layout.

_SHIFTED_SYMBOLS: Dict[str, str] = {
    "Exclam": "Digit1",
    "At": "Digit2",
    "NumberSign": "Digit3",
    "Dollar": "Digit4",
    "Percent": "Digit5",
    "AsciiCircum": "Digit6",
    "Ampersand": "Digit7",
    "Asterisk": "Digit8",
    "ParenLeft": "Digit9",
    "ParenRight": "Digit0",
    "Underscore": "Minus",
    "Plus": "Equal",
    "BraceLeft": "BracketLeft",
    "BraceRight": "BracketRight",
    "Bar": "Backslash",
    "Colon": "Semicolon",
    "QuoteDbl": "Quote",
    "Less": "Comma",
    "Greater": "Period",
    "Question": "Slash",
    "AsciiTilde": "Backquote",
}

_NAMED_KEYS: Dict[str, str] = {
    "Escape": "Escape",
    "Return": "Enter",
    "Enter": "NumpadEnter",
    "Tab": "Tab",
    "Backtab": "Tab",
    "Backspace": "Backspace",
    "Delete": "Delete",
    "Insert": "Insert",
    "Space": "Space",
    "Home": "Home",
    "End": "End",
    "PageUp": "PageUp",
    "PageDown": "PageDown",
    "Left": "ArrowLeft",
    "Right": "ArrowRight",
    "Up": "ArrowUp",
    "Down": "ArrowDown",
    "Minus": "Minus",
    "Equal": "Equal",
    "BracketLeft": "BracketLeft",
    "BracketRight": "BracketRight",
    "Backslash": "Backslash",
    "Semicolon": "Semicolon",
    "Apostrophe": "Quote",
    "Comma": "Comma",
    "Period": "Period",
    "Slash": "Slash",
    "QuoteLeft": "Backquote",
    "Shift": "ShiftLeft",
    "Control": "ControlLeft",
    "Meta": "MetaLeft",
    "Alt": "AltLeft",
    "CapsLock": "CapsLock",
    "Menu": "ContextMenu",
}


def qt_key_to_code(key_name: str) -> str:
    """Map a Qt key enum name (``Key_C``) to a DOM-style code (``KeyC``)."""
    name = key_name[4:] if key_name.startswith("Key_") else key_name
    if len(name) == 1 and name.isalpha():
        return f"Key{name.upper()}"
    if len(name) == 1 and name.isdigit():
        return f"Digit{name}"
    if name.startswith("F") and name[1:].isdigit():
        return name
    if name in _SHIFTED_SYMBOLS:
        return _SHIFTED_SYMBOLS[name]
    return _NAMED_KEYS.get(name, name or "Unidentified")


def key_event_from_qt(event: Any, platform: Optional[str] = None) -> KeyEvent:
    """Adapt a ``QKeyEvent`` into a ``KeyEvent`` (PyQt6 imported lazily)."""
    from PyQt6.QtCore import Qt  # type: ignore

    mods = event.modifiers()
    ctrl_flag = bool(mods & Qt.KeyboardModifier.ControlModifier)
    meta_flag = bool(mods & Qt.KeyboardModifier.MetaModifier)
    if is_apple_platform(platform):
        ctrl_flag, meta_flag = meta_flag, ctrl_flag
    code = physical_code(event.nativeScanCode(), event.nativeVirtualKey(), platform)
    if code is None:
        try:
            code = qt_key_to_code(Qt.Key(event.key()).name)
        except ValueError:
            code = "Unidentified"
    return KeyEvent(
        code=code,
        ctrl=ctrl_flag,
        meta=meta_flag,
        alt=bool(mods & Qt.KeyboardModifier.AltModifier),
        shift=bool(mods & Qt.KeyboardModifier.ShiftModifier),
        native=event,
    )
