"""CLI entry point for the production value summary."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Sequence

from config import settings
from core import filesystem
from domain.aggregation import aggregate_stats, total_contribution_amount
from domain.grouping import build_project_lookup, format_money, format_path, group_sources
from domain.errors import ProjectFormatError
from domain.models import Project
from domain.project_io import dumps_project, load_project, load_projects, save_project
from gui.services.logging_service import configure_logging
from gui.services.selection_filter import SelectionFilter


def _summary_payload(projects: Sequence[Project], selection: SelectionFilter) -> Dict[str, Any]:
    lookup = build_project_lookup(projects)
    people: List[Dict[str, Any]] = []
    for stats in aggregate_stats(selection.filter(projects)):
        groups = group_sources(stats.sources, lookup)
        people.append(
            {
                "person": stats.person,
                "total": str(stats.total_amount),
                "groups": [
                    {
                        "project": g.project_name,
                        "phase": g.phase_name,
                        "total": str(g.total),
                        "details": [
                            {"path": list(d.path), "amount": str(d.amount)} for d in g.details
                        ],
                    }
                    for g in groups
                ],
            }
        )
    return {"people": people}


def _print_text(projects: Sequence[Project], selection: SelectionFilter) -> None:
    included = selection.filter(projects)
    people = aggregate_stats(included)
    if not people:
        if selection.all_excluded(projects):
            print(settings.EMPTY_SELECTION_MESSAGE)
        else:
            print(settings.NO_DATA_MESSAGE)
        return
    lookup = build_project_lookup(projects)
    for stats in people:
        print(f"{stats.person}\t{format_money(stats.total_amount)}")
        for group in group_sources(stats.sources, lookup):
            print(f"  {group.project_name} / {group.phase_name}\t{format_money(group.total)}")
            for detail in group.details:
                print(f"    {format_path(detail.path)}\t{format_money(detail.amount)}")
    total = total_contribution_amount(included)
    print(f"Total\t{format_money(total)}")


def cmd_summary(args: argparse.Namespace) -> int:
    projects, failures = load_projects(args.files)
    for path, message in failures:
        print(f"error: {path}: {message}", file=sys.stderr)
    if not projects:
        return 2
    selection = SelectionFilter()
    known = {p.id for p in projects}
    for project_id in args.exclude or []:
        if project_id not in known:
            print(f"warning: unknown project id {project_id}", file=sys.stderr)
        elif selection.is_included(project_id):
            selection.toggle(project_id)
    if args.json:
        print(json.dumps(_summary_payload(projects, selection), indent=2, ensure_ascii=False))
    else:
        _print_text(projects, selection)
    return 0


def cmd_normalize(args: argparse.Namespace) -> int:
    """Rewrite project files in canonical form (or only report with --check)."""
    status = 0
    for path in args.files:
        try:
            project = load_project(path)
        except ProjectFormatError as exc:
            print(f"error: {path}: {exc}", file=sys.stderr)
            status = 2
            continue
        if args.check:
            if filesystem.read_text(path) != dumps_project(project):
                print(f"would rewrite {path}")
                status = max(status, 1)
            continue
        target = Path(args.output_dir) / Path(path).name if args.output_dir else Path(path)
        print(save_project(project, target))
    return status


def cmd_gui(args: argparse.Namespace) -> int:  # pragma: no cover - runtime
    from gui import launcher

    return launcher.main(args.files)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=settings.APP_NAME, description="Production value summary")
    p.add_argument("--log-level", default=settings.LOG_LEVEL)
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("summary", help="Print per-person totals for project files")
    s.add_argument("files", nargs="+", help=f"Project files ({settings.PROJECT_FILE_EXTENSION})")
    s.add_argument("--exclude", action="append", metavar="PROJECT_ID", help="Skip a project")
    s.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    s.set_defaults(func=cmd_summary)

    n = sub.add_parser("normalize", help="Validate project files and rewrite them canonically")
    n.add_argument("files", nargs="+")
    n.add_argument("--output-dir", help="Write copies here instead of in place")
    n.add_argument("--check", action="store_true", help="Only report files that would change")
    n.set_defaults(func=cmd_normalize)

    g = sub.add_parser("gui", help="Open the summary window")
    g.add_argument("files", nargs="*")
    g.set_defaults(func=cmd_gui)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
