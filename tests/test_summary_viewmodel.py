"""Tests for SummaryViewModel (selection + memoized aggregation)."""

from __future__ import annotations

from decimal import Decimal

from gui.viewmodels.summary_viewmodel import SummaryViewModel
from tests.factories import make_node, make_phase, make_project, scenario_projects


def test_rows_group_sources_per_person():
    vm = SummaryViewModel(scenario_projects())
    rows = vm.rows()
    assert [r.person for r in rows] == ["甲"]
    assert rows[0].total == Decimal(1150)
    assert [(g.project_name, g.total) for g in rows[0].groups] == [
        ("Beta", Decimal(1000)),
        ("Alpha", Decimal(150)),
    ]


def test_exclusion_recomputes_and_keeps_names():
    vm = SummaryViewModel(scenario_projects())
    vm.toggle_project("B")
    rows = vm.rows()
    assert rows[0].total == Decimal(150)
    assert "B" in vm.lookup()


def test_repeated_reads_are_memoized():
    vm = SummaryViewModel(scenario_projects())
    first = vm.stats()
    assert vm.stats() is first
    vm.rows()
    misses = vm.cache_stats()["misses"]
    vm.rows()
    assert vm.cache_stats()["misses"] == misses
    vm.toggle_project("A")
    assert vm.stats() is not first


def test_new_projects_snapshot_triggers_recompute():
    vm = SummaryViewModel(scenario_projects())
    before = vm.stats()
    extra = make_project("C", "Gamma", [make_phase("C1", "P", make_node("root", [("乙", 7)]))])
    vm.set_projects(scenario_projects() + [extra])
    assert [s.person for s in vm.stats()] == ["甲", "乙"]
    assert vm.stats() is not before


def test_empty_messages_distinguish_selection_from_no_data():
    vm = SummaryViewModel([])
    assert vm.empty_message() == "No data"
    vm = SummaryViewModel(scenario_projects())
    assert vm.empty_message() is None
    vm.deselect_all()
    assert vm.rows() == []
    assert vm.empty_message() == "Select at least one project"
    vm.select_all()
    assert vm.empty_message() is None


def test_projects_without_contributions_report_no_data():
    vm = SummaryViewModel([make_project("E", "Empty", [make_phase("E1", "P", make_node("root"))])])
    assert vm.empty_message() == "No data"


def test_project_choices_and_close_resets_selection():
    vm = SummaryViewModel(scenario_projects())
    vm.toggle_project("A")
    assert [(c.project_id, c.included) for c in vm.project_choices()] == [("A", False), ("B", True)]
    vm.close()
    assert all(c.included for c in vm.project_choices())


def test_amount_edit_beyond_float_precision_recomputes():
    def projects(amount):
        root = make_node("root", [("甲", amount)])
        return [make_project("P", "Plant", [make_phase("P1", "Civil", root)])]

    vm = SummaryViewModel(projects("12345678901234567890.5"))
    assert vm.stats()[0].total_amount == Decimal("12345678901234567890.5")
    vm.set_projects(projects("12345678901234567890.25"))
    assert vm.stats()[0].total_amount == Decimal("12345678901234567890.25")
