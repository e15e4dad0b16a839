"""Stats Cache Service

Memoizes summary computations (person aggregation, name lookups) so they run
only when their structural inputs change, not on every repaint.

Design Goals:
 - Whole-scope recomputation: one live entry per namespace; a changed input
   replaces it (no partial reuse of earlier results).
 - Deterministic hash of inputs (sorted JSON serialization) so equal project
   snapshots hit the cache even when rebuilt as new objects.
 - Manual `invalidate(prefix=None)` for targeted eviction.
 - GUI single-thread usage expected; no locking.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from domain.models import Node, Project

__all__ = ["StatsCacheService", "CacheEntry", "snapshot_key"]

_log = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    key: str
    value: Any
    created_at: datetime


def _stable_hash(obj: Any) -> str:
    try:
        data = json.dumps(obj, sort_keys=True, default=str, separators=(",", ":"))
    except TypeError:
        data = repr(obj)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def _amount_token(amount: Any) -> Any:
    # str() keeps every digit.
    if isinstance(amount, Decimal):
        return ["decimal", str(amount)]
    return ["raw", amount]


def _node_snapshot(node: Optional[Node]) -> Any:
    if not isinstance(node, Node):
        return ["raw", node]
    return [
        node.id,
        node.label,
        [[c.person, _amount_token(c.amount)] for c in node.contributions],
        [_node_snapshot(child) for child in node.children],
    ]


def _project_snapshot(project: Project) -> Any:
    return [
        project.id,
        project.name,
        [[ph.id, ph.name, _node_snapshot(ph.root)] for ph in project.phases],
    ]


def snapshot_key(
    projects: Sequence[Project], excluded_ids: Optional[Iterable[str]] = None
) -> Dict[str, Any]:
    """Structural cache input for (projects, excluded ids).

    Amounts are captured exactly, so any edit that can change a total
    changes the key.
    """
    key: Dict[str, Any] = {"projects": [_project_snapshot(p) for p in projects]}
    if excluded_ids is not None:
        key["excluded"] = sorted(excluded_ids)
    return key


class StatsCacheService:
    """Single-entry-per-namespace result cache."""

    def __init__(self) -> None:
        self._store: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def get_or_compute(self, namespace: str, inputs: Any, compute_fn: Callable[[], Any]) -> Any:
        """Return the cached value for (namespace, inputs) or compute & cache it.

        Args:
            namespace: Logical group (e.g. 'summary.stats').
            inputs: JSON-serializable structure describing every input.
            compute_fn: Zero-arg callable run on a miss.
        """
        key = _stable_hash(inputs)
        entry = self._store.get(namespace)
        if entry is not None and entry.key == key:
            self._hits += 1
            return entry.value
        self._misses += 1
        value = compute_fn()
        self._store[namespace] = CacheEntry(
            key=key, value=value, created_at=datetime.now(timezone.utc)
        )
        _log.debug("Recomputed %s (miss #%d)", namespace, self._misses)
        return value

    def invalidate(self, prefix: Optional[str] = None) -> int:
        """Drop entries whose namespace starts with *prefix* (all when None)."""
        if prefix is None:
            removed = len(self._store)
            self._store.clear()
            return removed
        to_delete = [k for k in self._store if k.startswith(prefix)]
        for k in to_delete:
            del self._store[k]
        return len(to_delete)

    def stats(self) -> Dict[str, Any]:
        return {"entries": len(self._store), "hits": self._hits, "misses": self._misses}
