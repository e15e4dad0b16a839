"""Tests for the LIFO shortcut registry and bindings."""

from __future__ import annotations

import logging

import pytest

from gui.services.key_combo import KeyEvent
from gui.services.shortcut_registry import (
    ShortcutBinding,
    ShortcutRegistry,
    ShortcutRegistryError,
)


def _recorder(calls, name):
    return lambda event: calls.append(name)


def test_lifo_visibility():
    reg = ShortcutRegistry()
    calls = []
    t1 = reg.register("Ctrl+KeyC", _recorder(calls, "h1"))
    t2 = reg.register("Ctrl+KeyC", _recorder(calls, "h2"))
    assert reg.dispatch("Ctrl+KeyC")
    assert calls == ["h2"]
    reg.unregister("Ctrl+KeyC", t2)
    reg.dispatch("Ctrl+KeyC")
    assert calls == ["h2", "h1"]
    reg.unregister("Ctrl+KeyC", t1)
    assert reg.dispatch("Ctrl+KeyC") is False
    assert calls == ["h2", "h1"]
    assert reg.combos() == []


def test_unregister_from_middle_keeps_top_active():
    reg = ShortcutRegistry()
    calls = []
    reg.register("Escape", _recorder(calls, "a"))
    mid = reg.register("Escape", _recorder(calls, "b"))
    reg.register("Escape", _recorder(calls, "c"))
    reg.unregister("Escape", mid)
    assert reg.depth("Escape") == 2
    reg.dispatch("Escape")
    assert calls == ["c"]


def test_same_callable_registered_twice_is_two_registrations():
    reg = ShortcutRegistry()
    calls = []
    handler = _recorder(calls, "x")
    t1 = reg.register("KeyA", handler)
    t2 = reg.register("KeyA", handler)
    assert t1 != t2
    reg.unregister("KeyA", t2)
    assert reg.depth("KeyA") == 1
    assert reg.is_registered("KeyA", t1)


def test_combos_are_independent():
    reg = ShortcutRegistry()
    calls = []
    reg.register("Ctrl+KeyC", _recorder(calls, "copy"))
    reg.register("Ctrl+KeyV", _recorder(calls, "paste"))
    reg.dispatch("Ctrl+KeyV")
    assert calls == ["paste"]


def test_unknown_token_fails_loudly():
    reg = ShortcutRegistry()
    token = reg.register("KeyA", lambda e: None)
    with pytest.raises(ShortcutRegistryError):
        reg.unregister("KeyB", token)
    reg.unregister("KeyA", token)
    with pytest.raises(ShortcutRegistryError):
        reg.unregister("KeyA", token)


def test_closed_registry_rejects_registration(caplog):
    reg = ShortcutRegistry()
    reg.register("KeyA", lambda e: None)
    with caplog.at_level(logging.WARNING):
        reg.close()
    assert "live registrations" in caplog.text
    assert reg.closed
    with pytest.raises(ShortcutRegistryError):
        reg.register("KeyA", lambda e: None)
    assert reg.dispatch("KeyA") is False


def test_dispatch_event_encodes_for_platform():
    reg = ShortcutRegistry()
    seen = []
    reg.register("Ctrl+KeyS", seen.append)
    mac_event = KeyEvent("KeyS", meta=True)
    assert reg.dispatch_event(mac_event, platform="darwin")
    assert seen == [mac_event]
    assert reg.dispatch_event(KeyEvent("KeyS", meta=True), platform="linux") is False


def test_handler_may_unregister_itself_during_dispatch():
    reg = ShortcutRegistry()
    calls = []
    tokens = {}

    def once(event):
        calls.append("once")
        reg.unregister("KeyQ", tokens["once"])

    reg.register("KeyQ", _recorder(calls, "base"))
    tokens["once"] = reg.register("KeyQ", once)
    reg.dispatch("KeyQ")
    reg.dispatch("KeyQ")
    assert calls == ["once", "base"]


# Bindings ---------------------------------------------------------------


def test_binding_prevents_default_and_invokes_latest_handler():
    reg = ShortcutRegistry()
    calls = []
    binding = ShortcutBinding(reg, "Ctrl+KeyS", _recorder(calls, "v1"))
    binding.start()
    handler_before = reg.active_handler("Ctrl+KeyS")
    binding.set_handler(_recorder(calls, "v2"))
    assert reg.active_handler("Ctrl+KeyS") is handler_before
    assert reg.depth("Ctrl+KeyS") == 1
    event = KeyEvent("KeyS", ctrl=True)
    reg.dispatch("Ctrl+KeyS", event)
    assert calls == ["v2"]
    assert event.default_prevented
    binding.stop()
    assert reg.depth("Ctrl+KeyS") == 0


def test_binding_context_releases_on_error():
    reg = ShortcutRegistry()
    with pytest.raises(ValueError):
        with ShortcutBinding(reg, "Escape", lambda e: None):
            assert reg.depth("Escape") == 1
            raise ValueError("boom")
    assert reg.depth("Escape") == 0


def test_nested_bindings_shadow_and_restore():
    reg = ShortcutRegistry()
    calls = []
    with ShortcutBinding(reg, "Escape", _recorder(calls, "window")):
        with ShortcutBinding(reg, "Escape", _recorder(calls, "dialog")):
            reg.dispatch("Escape", KeyEvent("Escape"))
        reg.dispatch("Escape", KeyEvent("Escape"))
    assert calls == ["dialog", "window"]


def test_binding_set_combo_reregisters_only_when_changed():
    reg = ShortcutRegistry()
    binding = ShortcutBinding(reg, "KeyA", lambda e: None).start()
    binding.set_combo("KeyA")
    assert reg.depth("KeyA") == 1
    binding.set_combo("KeyB")
    assert reg.depth("KeyA") == 0 and reg.depth("KeyB") == 1
    binding.stop()


def test_binding_misuse_raises():
    reg = ShortcutRegistry()
    binding = ShortcutBinding(reg, "KeyA", lambda e: None)
    with pytest.raises(ShortcutRegistryError):
        binding.stop()
    binding.start()
    with pytest.raises(ShortcutRegistryError):
        binding.start()
    with pytest.raises(ShortcutRegistryError):
        ShortcutBinding(None, "KeyA", lambda e: None)  # type: ignore[arg-type]
    reg.close()
    with pytest.raises(ShortcutRegistryError):
        ShortcutBinding(reg, "KeyB", lambda e: None).start()
