"""Project document loading, validation and saving.

A project document (``*.prod``) is UTF-8 JSON:

    {"id": "...", "name": "...", "phases": [
        {"id": "...", "name": "...", "root": {
            "id": "...", "label": "...",
            "contributions": [{"person": "...", "amount": 100}],
            "children": [ ...nodes... ]}}]}

Validation is strict: a document with any issue is rejected as a whole and
never reaches the aggregation engine.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Tuple

from config import settings
from core import filesystem

from .errors import ProjectLoadError, ProjectParseError, ProjectValidationError
from .models import Project, to_amount

__all__ = [
    "validate_project_document",
    "parse_project",
    "load_project",
    "load_projects",
    "save_project",
    "dumps_project",
]

_log = logging.getLogger(__name__)


def _check_str(value: Any, where: str, issues: List[str], *, allow_empty: bool = False) -> None:
    if not isinstance(value, str) or (not allow_empty and not value):
        issues.append(f"{where}: expected {'string' if allow_empty else 'non-empty string'}")


def _check_node(node: Any, where: str, issues: List[str], *, is_root: bool) -> None:
    if not isinstance(node, dict):
        issues.append(f"{where}: expected object")
        return
    _check_str(node.get("id"), f"{where}.id", issues)
    # Root labels never appear in paths.
    _check_str(node.get("label"), f"{where}.label", issues, allow_empty=is_root)
    contributions = node.get("contributions", [])
    if not isinstance(contributions, list):
        issues.append(f"{where}.contributions: expected list")
    else:
        for i, c in enumerate(contributions):
            cw = f"{where}.contributions[{i}]"
            if not isinstance(c, dict):
                issues.append(f"{cw}: expected object")
                continue
            _check_str(c.get("person"), f"{cw}.person", issues)
            raw = c.get("amount")
            # Numeric strings are accepted by the model but not in documents.
            amount = None if isinstance(raw, str) else to_amount(raw)
            if amount is None or not amount.is_finite():
                issues.append(f"{cw}.amount: expected finite number")
            elif amount < 0:
                issues.append(f"{cw}.amount: must not be negative")
    children = node.get("children", [])
    if not isinstance(children, list):
        issues.append(f"{where}.children: expected list")
        return
    for i, child in enumerate(children):
        _check_node(child, f"{where}.children[{i}]", issues, is_root=False)


def validate_project_document(data: Any) -> List[str]:
    """Return a list of schema issues (empty when *data* is a valid project)."""
    issues: List[str] = []
    if not isinstance(data, dict):
        return ["$: expected object"]
    _check_str(data.get("id"), "id", issues)
    _check_str(data.get("name"), "name", issues)
    phases = data.get("phases")
    if not isinstance(phases, list):
        issues.append("phases: expected list")
        return issues
    seen: set[str] = set()
    for i, phase in enumerate(phases):
        where = f"phases[{i}]"
        if not isinstance(phase, dict):
            issues.append(f"{where}: expected object")
            continue
        _check_str(phase.get("id"), f"{where}.id", issues)
        if phase.get("id") in seen:
            issues.append(f"{where}.id: duplicate phase id {phase.get('id')!r}")
        elif isinstance(phase.get("id"), str):
            seen.add(phase["id"])
        _check_str(phase.get("name"), f"{where}.name", issues)
        if "root" not in phase:
            issues.append(f"{where}.root: missing")
        else:
            _check_node(phase["root"], f"{where}.root", issues, is_root=True)
    return issues


def parse_project(data: Any) -> Project:
    issues = validate_project_document(data)
    if issues:
        raise ProjectValidationError(
            f"Invalid project document ({len(issues)} issue(s)): {issues[0]}",
            context={"issues": issues},
        )
    return Project.from_dict(data)


def load_project(path: str | Path) -> Project:
    try:
        text = filesystem.read_text(path)
    except OSError as exc:
        raise ProjectLoadError(f"Cannot read {path}: {exc}", context={"path": str(path)}) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProjectParseError(
            f"File format error in {path}: {exc.msg}",
            context={"path": str(path), "line": exc.lineno, "column": exc.colno},
        ) from exc
    try:
        project = parse_project(data)
    except ProjectValidationError as exc:
        exc.context["path"] = str(path)
        raise
    _log.info("Loaded project %s (%s) from %s", project.name, project.id, path)
    return project


def load_projects(paths: Iterable[str | Path]) -> Tuple[List[Project], List[Tuple[str, str]]]:
    """Load several documents; bad files are reported, not fatal to the batch."""
    projects: List[Project] = []
    failures: List[Tuple[str, str]] = []
    for path in paths:
        try:
            projects.append(load_project(path))
        except (ProjectLoadError, ProjectParseError, ProjectValidationError) as exc:
            _log.warning("Rejected project file %s: %s", path, exc)
            failures.append((str(path), str(exc)))
    return projects, failures


def dumps_project(project: Project) -> str:
    return json.dumps(project.to_dict(), indent=2, ensure_ascii=False)


def save_project(project: Project, path: str | Path) -> Path:
    target = Path(path)
    if target.suffix != settings.PROJECT_FILE_EXTENSION:
        target = target.with_name(target.name + settings.PROJECT_FILE_EXTENSION)
    written = filesystem.write_text_atomic(target, dumps_project(project))
    _log.info("Saved project %s to %s", project.id, written)
    return written
