"""Contribution aggregation engine.

Walks every phase tree of the supplied projects and folds each contribution
into per-person totals.

Design:
 - Filter-agnostic: callers hand in only the projects they want counted.
 - Depth-first pre-order walk; a contribution's path is the chain of node
   labels below the phase root (root contributions have an empty path).
 - One dict keyed by the exact person string; insertion order gives the
   output order (first person seen comes first).
 - Tolerates hand-edited data: malformed nodes/contributions are skipped and
   logged, the walk never raises for partial data.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .models import Node, PersonStats, Phase, Project, SourceData, to_amount

__all__ = ["aggregate_stats", "iter_sources", "total_contribution_amount"]

_log = logging.getLogger(__name__)


def _valid_amount(value) -> Optional[Decimal]:
    amount = to_amount(value)
    if amount is None or not amount.is_finite() or amount < 0:
        return None
    return amount


def _walk_phase(project_id: str, phase: Phase) -> Iterator[SourceData]:
    root = phase.root
    if not isinstance(root, Node):
        _log.warning("Skipping phase %s/%s without root node", project_id, phase.id)
        return
    stack: List[Tuple[Node, Tuple[str, ...]]] = [(root, ())]
    while stack:
        node, path = stack.pop()
        for contrib in node.contributions:
            amount = _valid_amount(getattr(contrib, "amount", None))
            person = getattr(contrib, "person", None)
            if amount is None or not isinstance(person, str) or not person:
                _log.debug(
                    "Skipping malformed contribution at %s/%s node %s",
                    project_id,
                    phase.id,
                    node.id,
                )
                continue
            yield SourceData(project_id, phase.id, path, person, amount)
        # Reverse push keeps children in document order (pre-order walk).
        for child in reversed(node.children):
            if not isinstance(child, Node) or not isinstance(child.label, str) or not child.label:
                _log.debug(
                    "Skipping unlabeled node under %s/%s node %s",
                    project_id,
                    phase.id,
                    node.id,
                )
                continue
            stack.append((child, path + (child.label,)))


def iter_sources(projects: Iterable[Project]) -> Iterator[SourceData]:
    """Yield every valid contribution of *projects* in walk order."""
    for project in projects:
        for phase in project.phases:
            yield from _walk_phase(project.id, phase)


def aggregate_stats(projects: Iterable[Project]) -> List[PersonStats]:
    """Return per-person totals with their path-qualified sources.

    Order is first-seen: projects in input order, phases in order, nodes in
    pre-order, contributions in stored order.
    """
    by_person: Dict[str, PersonStats] = {}
    count = 0
    for source in iter_sources(projects):
        stats = by_person.get(source.person)
        if stats is None:
            stats = by_person[source.person] = PersonStats(person=source.person)
        stats.add(source)
        count += 1
    _log.debug("Aggregated %d contributions into %d people", count, len(by_person))
    return list(by_person.values())


def total_contribution_amount(projects: Iterable[Project]) -> Decimal:
    return sum((s.amount for s in iter_sources(projects)), Decimal(0))
