"""Tests for project document validation, loading and saving."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from domain.aggregation import aggregate_stats
from domain.errors import ProjectLoadError, ProjectParseError, ProjectValidationError
from domain.project_io import (
    load_project,
    load_projects,
    parse_project,
    save_project,
    validate_project_document,
)
from tests.factories import project_document


def test_valid_document_parses_to_model():
    project = parse_project(project_document())
    assert project.id == "p1"
    assert project.phases[0].root.children[0].label == "Pit"
    stats = aggregate_stats([project])
    assert [(s.person, s.total_amount) for s in stats] == [("Li", Decimal(100)), ("Wang", Decimal("25.5"))]


def test_validation_reports_paths():
    doc = project_document()
    doc["phases"][0]["root"]["children"][0]["label"] = ""
    doc["phases"][0]["root"]["contributions"][0]["amount"] = -1
    issues = validate_project_document(doc)
    assert "phases[0].root.children[0].label: expected non-empty string" in issues
    assert "phases[0].root.contributions[0].amount: must not be negative" in issues


@pytest.mark.parametrize("amount", ["100", None, True, float("inf"), float("nan")])
def test_non_numeric_or_non_finite_amounts_rejected(amount):
    issues = validate_project_document(project_document(amount=amount))
    assert any(i.startswith("phases[0].root.contributions[0].amount") for i in issues)


def test_ids_may_contain_group_separator():
    doc = project_document(project_id="site_a")
    doc["phases"][0]["id"] = "phase_1"
    assert validate_project_document(doc) == []
    assert parse_project(doc).phases[0].id == "phase_1"


def test_non_object_document_rejected():
    assert validate_project_document([]) == ["$: expected object"]
    with pytest.raises(ProjectValidationError) as info:
        parse_project({"id": "x"})
    assert info.value.issues


def test_duplicate_phase_ids_rejected():
    doc = project_document()
    doc["phases"].append(dict(doc["phases"][0]))
    assert any("duplicate phase id" in i for i in validate_project_document(doc))


def test_save_then_load(tmp_path):
    project = parse_project(project_document())
    written = save_project(project, tmp_path / "tower")
    assert written.name == "tower.prod"
    data = json.loads(written.read_text(encoding="utf-8"))
    assert data["phases"][0]["root"]["children"][0]["contributions"][0]["amount"] == 25.5
    assert load_project(written) == project


def test_save_keeps_non_ascii(tmp_path):
    doc = project_document()
    doc["name"] = "基坑工程"
    written = save_project(parse_project(doc), tmp_path / "p.prod")
    assert "基坑工程" in written.read_text(encoding="utf-8")


def test_load_errors_are_typed(tmp_path):
    bad_json = tmp_path / "bad.prod"
    bad_json.write_text("{not json", encoding="utf-8")
    with pytest.raises(ProjectParseError) as info:
        load_project(bad_json)
    assert info.value.context["path"] == str(bad_json)
    with pytest.raises(ProjectLoadError):
        load_project(tmp_path / "missing.prod")
    wrong = tmp_path / "wrong.prod"
    wrong.write_text(json.dumps({"id": "x", "name": "n", "phases": "nope"}), encoding="utf-8")
    with pytest.raises(ProjectValidationError) as vinfo:
        load_project(wrong)
    assert vinfo.value.context["path"] == str(wrong)


def test_load_projects_collects_failures(tmp_path):
    good = save_project(parse_project(project_document()), tmp_path / "good.prod")
    bad = tmp_path / "bad.prod"
    bad.write_text("[]", encoding="utf-8")
    projects, failures = load_projects([good, bad])
    assert [p.id for p in projects] == ["p1"]
    assert failures and failures[0][0] == str(bad)
