"""Summary ViewModel

Bridges the project list, the selection filter and the aggregation engine to
the summary dialog. Keeps widgets free of aggregation details.

Design:
 - Person stats are memoized on (projects, excluded ids) and recomputed from
   scratch whenever either changes; unrelated repaints hit the cache.
 - Name lookup is memoized on projects only and always covers the full,
   unfiltered list.
 - Exposes plain dataclasses for easy testing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from config import settings
from domain.aggregation import aggregate_stats
from domain.grouping import GroupedSource, ProjectInfo, build_project_lookup, group_sources
from domain.models import PersonStats, Project
from gui.services.selection_filter import SelectionFilter
from gui.services.stats_cache_service import StatsCacheService, snapshot_key


@dataclass
class SummaryRow:
    person: str
    total: Decimal
    groups: List[GroupedSource] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectChoice:
    project_id: str
    name: str
    included: bool


class SummaryViewModel:
    STATS_NAMESPACE = "summary.stats"
    LOOKUP_NAMESPACE = "summary.lookup"

    def __init__(
        self,
        projects: Sequence[Project] = (),
        selection: SelectionFilter | None = None,
        cache: StatsCacheService | None = None,
    ):
        self._projects: List[Project] = list(projects)
        self.selection = selection or SelectionFilter()
        self._cache = cache or StatsCacheService()

    @property
    def projects(self) -> List[Project]:
        return list(self._projects)

    def set_projects(self, projects: Sequence[Project]) -> None:
        self._projects = list(projects)

    # Derived views ----------------------------------------------------
    def stats(self) -> List[PersonStats]:
        return self._cache.get_or_compute(
            self.STATS_NAMESPACE,
            snapshot_key(self._projects, self.selection.excluded_ids),
            lambda: aggregate_stats(self.selection.filter(self._projects)),
        )

    def lookup(self) -> Dict[str, ProjectInfo]:
        inputs = [(p.id, p.name, [(ph.id, ph.name) for ph in p.phases]) for p in self._projects]
        return self._cache.get_or_compute(
            self.LOOKUP_NAMESPACE, inputs, lambda: build_project_lookup(self._projects)
        )

    def groups_for(self, person: PersonStats) -> List[GroupedSource]:
        return group_sources(person.sources, self.lookup())

    def rows(self) -> List[SummaryRow]:
        return [
            SummaryRow(person=s.person, total=s.total_amount, groups=self.groups_for(s))
            for s in self.stats()
        ]

    def empty_message(self) -> Optional[str]:
        """Message for an empty table, or None when there is something to show.

        Everything excluded and no projects at all both yield no rows but need
        different wording.
        """
        if self.stats():
            return None
        if self.selection.all_excluded(self._projects):
            return settings.EMPTY_SELECTION_MESSAGE
        return settings.NO_DATA_MESSAGE

    def project_choices(self) -> List[ProjectChoice]:
        return [
            ProjectChoice(p.id, p.name, self.selection.is_included(p.id)) for p in self._projects
        ]

    # Selection passthrough ----------------------------------------------
    def toggle_project(self, project_id: str) -> bool:
        return self.selection.toggle(project_id)

    def select_all(self) -> None:
        self.selection.select_all()

    def deselect_all(self) -> None:
        self.selection.deselect_all(p.id for p in self._projects)

    def close(self) -> None:
        self.selection.reset()

    def cache_stats(self) -> Dict[str, int]:
        return self._cache.stats()


__all__ = ["SummaryViewModel", "SummaryRow", "ProjectChoice"]
