"""Domain models for the work-breakdown contribution tracker.

A project owns ordered phases; each phase owns exactly one root node of a
work-breakdown tree. Contributions (person, amount) hang off any node,
including the root. The aggregation layer only reads these objects.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple


def new_id() -> str:
    """Return a fresh identifier safe for use in group keys (no separator)."""
    return uuid.uuid4().hex


def to_amount(value: Any) -> Optional[Decimal]:
    """Convert a JSON-ish number to ``Decimal``.

    Returns None for values that are not numbers (bools, strings that do not
    parse, None). Non-finite values are converted and left for callers to
    reject so validation can report them precisely.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return None
    return None


def _amount_to_json(amount: Any) -> Any:
    if isinstance(amount, Decimal):
        if not amount.is_finite():
            return float(amount)
        return int(amount) if amount == amount.to_integral_value() else float(amount)
    return amount


@dataclass(slots=True)
class Contribution:
    person: str
    amount: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"person": self.person, "amount": _amount_to_json(self.amount)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Contribution":
        raw = data.get("amount")
        amount = to_amount(raw)
        return cls(person=data.get("person", ""), amount=amount if amount is not None else raw)


@dataclass(slots=True)
class Node:
    id: str
    label: Optional[str]
    children: List["Node"] = field(default_factory=list)
    contributions: List[Contribution] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "children": [c.to_dict() for c in self.children],
            "contributions": [c.to_dict() for c in self.contributions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        return cls(
            id=data.get("id") or new_id(),
            label=data.get("label"),
            children=[cls.from_dict(c) for c in data.get("children") or [] if isinstance(c, dict)],
            contributions=[
                Contribution.from_dict(c)
                for c in data.get("contributions") or []
                if isinstance(c, dict)
            ],
        )


@dataclass(slots=True)
class Phase:
    id: str
    name: str
    root: Optional[Node]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "root": self.root.to_dict() if self.root is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Phase":
        root = data.get("root")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            root=Node.from_dict(root) if isinstance(root, dict) else None,
        )


@dataclass(slots=True)
class Project:
    id: str
    name: str
    phases: List[Phase] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "phases": [p.to_dict() for p in self.phases]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            phases=[Phase.from_dict(p) for p in data.get("phases") or [] if isinstance(p, dict)],
        )


@dataclass(frozen=True, slots=True)
class SourceData:
    """One contribution flattened with its project/phase/path coordinates."""

    project_id: str
    phase_id: str
    path: Tuple[str, ...]
    person: str
    amount: Decimal


@dataclass(slots=True)
class PersonStats:
    person: str
    total_amount: Decimal = Decimal(0)
    sources: List[SourceData] = field(default_factory=list)

    def add(self, source: SourceData) -> None:
        self.sources.append(source)
        self.total_amount += source.amount


__all__ = [
    "Contribution",
    "Node",
    "Phase",
    "Project",
    "SourceData",
    "PersonStats",
    "new_id",
    "to_amount",
]
