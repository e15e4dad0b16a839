"""Project selection filter for the summary view.

Holds the set of *excluded* project ids (everything else is included, so
newly added projects are counted by default). The state is ephemeral UI
state; it is never persisted and is reset when the summary closes.

``version`` increases on every effective change so memoized consumers can key
on it cheaply; no-op operations leave it untouched.
"""

from __future__ import annotations

import logging
from typing import Callable, FrozenSet, Iterable, List, Sequence

from domain.models import Project

__all__ = ["SelectionFilter"]

_log = logging.getLogger(__name__)

SelectionListener = Callable[["SelectionFilter"], None]


class SelectionFilter:
    def __init__(self) -> None:
        self._excluded: FrozenSet[str] = frozenset()
        self._version = 0
        self._listeners: List[SelectionListener] = []

    # State ------------------------------------------------------------
    @property
    def excluded_ids(self) -> FrozenSet[str]:
        return self._excluded

    @property
    def version(self) -> int:
        return self._version

    def is_included(self, project_id: str) -> bool:
        return project_id not in self._excluded

    # Operations -------------------------------------------------------
    def toggle(self, project_id: str) -> bool:
        """Flip inclusion of *project_id*; returns the new included state."""
        if project_id in self._excluded:
            self._set(self._excluded - {project_id})
        else:
            self._set(self._excluded | {project_id})
        return self.is_included(project_id)

    def select_all(self) -> None:
        self._set(frozenset())

    def deselect_all(self, project_ids: Iterable[str]) -> None:
        self._set(frozenset(project_ids))

    def reset(self) -> None:
        self.select_all()

    def filter(self, projects: Sequence[Project]) -> List[Project]:
        return [p for p in projects if p.id not in self._excluded]

    def all_excluded(self, projects: Sequence[Project]) -> bool:
        """True when projects exist and none of them is included."""
        return bool(projects) and all(p.id in self._excluded for p in projects)

    # Listeners --------------------------------------------------------
    def add_listener(self, callback: SelectionListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: SelectionListener) -> None:
        self._listeners.remove(callback)

    def _set(self, excluded: FrozenSet[str]) -> None:
        if excluded == self._excluded:
            return
        self._excluded = excluded
        self._version += 1
        _log.debug("Selection changed (v%d): %d excluded", self._version, len(excluded))
        for callback in list(self._listeners):
            callback(self)
