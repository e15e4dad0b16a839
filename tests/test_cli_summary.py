"""Tests for the `summary` CLI command."""

from __future__ import annotations

import json

import main
from domain.project_io import parse_project, save_project
from tests.factories import project_document


def _write(tmp_path, project_id):
    doc = project_document(project_id=project_id)
    doc["name"] = f"Project {project_id}"
    return str(save_project(parse_project(doc), tmp_path / f"{project_id}.prod"))


def test_summary_text(tmp_path, capsys):
    path = _write(tmp_path, "p1")
    assert main.main(["summary", path]) == 0
    out = capsys.readouterr().out
    assert "Li\t¥100" in out
    assert "Project p1 / Foundation" in out
    assert "Base item" in out and "Pit" in out
    assert out.strip().endswith("Total\t¥126")


def test_summary_json_with_exclusion(tmp_path, capsys):
    paths = [_write(tmp_path, "p1"), _write(tmp_path, "p2")]
    assert main.main(["summary", *paths, "--exclude", "p2", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    li = payload["people"][0]
    assert li["person"] == "Li" and li["total"] == "100"
    assert [g["project"] for g in li["groups"]] == ["Project p1"]


def test_summary_all_excluded_message(tmp_path, capsys):
    path = _write(tmp_path, "p1")
    assert main.main(["summary", path, "--exclude", "p1"]) == 0
    assert capsys.readouterr().out.strip() == "Select at least one project"


def test_summary_reports_bad_files(tmp_path, capsys):
    bad = tmp_path / "bad.prod"
    bad.write_text("nope", encoding="utf-8")
    good = _write(tmp_path, "p1")
    assert main.main(["summary", str(bad), good]) == 0
    captured = capsys.readouterr()
    assert "bad.prod" in captured.err
    assert main.main(["summary", str(bad)]) == 2
