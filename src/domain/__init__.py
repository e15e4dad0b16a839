"""Work-breakdown contribution model, aggregation and grouping."""

from .aggregation import aggregate_stats  # noqa: F401
from .grouping import GroupedSource, build_project_lookup, group_sources  # noqa: F401
from .models import Node, PersonStats, Phase, Project, SourceData  # noqa: F401

__all__ = [
    "aggregate_stats",
    "group_sources",
    "build_project_lookup",
    "GroupedSource",
    "Node",
    "Phase",
    "Project",
    "PersonStats",
    "SourceData",
]
