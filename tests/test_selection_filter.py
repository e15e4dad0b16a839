"""Tests for the project selection filter."""

from __future__ import annotations

from gui.services.selection_filter import SelectionFilter
from tests.factories import scenario_projects


def test_everything_included_by_default():
    sel = SelectionFilter()
    projects = scenario_projects()
    assert sel.filter(projects) == projects
    assert sel.is_included("A")
    assert not sel.all_excluded(projects)


def test_toggle_flips_and_bumps_version():
    sel = SelectionFilter()
    assert sel.toggle("A") is False
    assert sel.excluded_ids == frozenset({"A"})
    assert sel.version == 1
    assert sel.toggle("A") is True
    assert sel.version == 2


def test_select_all_and_deselect_all():
    sel = SelectionFilter()
    projects = scenario_projects()
    sel.deselect_all(p.id for p in projects)
    assert sel.filter(projects) == []
    assert sel.all_excluded(projects)
    sel.select_all()
    assert sel.excluded_ids == frozenset()


def test_noop_changes_keep_version_and_skip_listeners():
    sel = SelectionFilter()
    seen = []
    sel.add_listener(lambda s: seen.append(s.version))
    sel.select_all()
    assert sel.version == 0 and seen == []
    sel.toggle("A")
    sel.deselect_all(["A"])
    assert seen == [1]


def test_all_excluded_is_false_without_projects():
    sel = SelectionFilter()
    sel.deselect_all([])
    assert not sel.all_excluded([])


def test_remove_listener():
    sel = SelectionFilter()
    seen = []
    cb = lambda s: seen.append(s.version)  # noqa: E731
    sel.add_listener(cb)
    sel.remove_listener(cb)
    sel.toggle("A")
    assert seen == []
