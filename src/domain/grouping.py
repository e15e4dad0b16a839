"""Grouping / sorting of one person's sources for display.

Sources are bucketed by (project, phase), sub-totalled and ordered by
sub-total descending. Display names come from a lookup built over the full,
unfiltered project list so names never depend on the current selection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Sequence, Tuple

from config import settings

from .models import Project, SourceData

__all__ = [
    "ProjectInfo",
    "GroupedSource",
    "build_project_lookup",
    "group_key",
    "group_sources",
    "format_path",
    "format_money",
]


@dataclass(frozen=True)
class ProjectInfo:
    name: str
    phases: Dict[str, str]


@dataclass
class GroupedSource:
    key: str
    project_name: str
    phase_name: str
    total: Decimal = Decimal(0)
    details: List[SourceData] = field(default_factory=list)


def build_project_lookup(projects: Iterable[Project]) -> Dict[str, ProjectInfo]:
    lookup: Dict[str, ProjectInfo] = {}
    for project in projects:
        phases = {ph.id: ph.name for ph in project.phases or []}
        lookup[project.id] = ProjectInfo(name=project.name, phases=phases)
    return lookup


def group_key(project_id: str, phase_id: str) -> str:
    """Display key of a group. Grouping itself uses the (project, phase) pair."""
    return f"{project_id}{settings.GROUP_KEY_SEPARATOR}{phase_id}"


def group_sources(
    sources: Sequence[SourceData], lookup: Dict[str, ProjectInfo]
) -> List[GroupedSource]:
    """Partition *sources* by (project, phase), largest sub-total first.

    Details keep encounter order; equal totals keep first-seen group order.
    """
    groups: Dict[Tuple[str, str], GroupedSource] = {}
    for src in sources:
        pair = (src.project_id, src.phase_id)
        group = groups.get(pair)
        if group is None:
            info = lookup.get(src.project_id)
            project_name = (info.name if info else None) or settings.UNKNOWN_PROJECT_LABEL
            phase_name = (
                info.phases.get(src.phase_id) if info else None
            ) or settings.UNKNOWN_PHASE_LABEL
            group = groups[pair] = GroupedSource(
                key=group_key(*pair), project_name=project_name, phase_name=phase_name
            )
        group.total += src.amount
        group.details.append(src)
    return sorted(groups.values(), key=lambda g: g.total, reverse=True)


def format_path(path: Sequence[str]) -> str:
    return settings.PATH_JOINER.join(path) if path else settings.BASE_ITEM_LABEL


def format_money(amount) -> str:
    """Integer-rounded currency text, e.g. ``¥1,235``."""
    value = Decimal(str(amount)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{settings.CURRENCY_SYMBOL}{abs(int(value)):,}"
