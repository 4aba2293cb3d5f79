"""Exact-match dimension filters and agent attribution."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Optional, TypeVar

from ..data.models import Contract, Project

T = TypeVar("T")

ALL = "all"


def is_active(value: Optional[str]) -> bool:
    """A dimension filter restricts records unless it is absent or "all"."""
    return value is not None and value != ALL


def filter_by_field(records: Iterable[T], field_name: str, value: Any) -> tuple[T, ...]:
    """Keep records whose ``field_name`` equals ``value`` exactly."""
    if not is_active(value):
        return tuple(records)
    return tuple(record for record in records if getattr(record, field_name) == value)


def index_projects(projects: Iterable[Project]) -> Mapping[str, Project]:
    """Read-only project lookup by id; the first project wins on duplicate ids."""
    index: dict[str, Project] = {}
    for project in projects:
        if project.id is not None and project.id not in index:
            index[project.id] = project
    return MappingProxyType(index)


def effective_agent(contract: Contract, projects_by_id: Mapping[str, Project]) -> Optional[str]:
    """
    Agent credited with a contract: the parent project's agent, else the contract's own.

    ``projects_by_id`` is meant to index every project of the snapshot, not
    only those inside the period window, so a contract keeps its agent even
    when its project was created before the cutoff.
    """
    project = projects_by_id.get(contract.project_id) if contract.project_id else None
    if project is not None and project.agent:
        return project.agent
    return contract.agent


def filter_contracts_by_agent(contracts: Iterable[Contract], agent: Optional[str],
                              projects_by_id: Mapping[str, Project]) -> tuple[Contract, ...]:
    """Keep contracts credited to ``agent``."""
    if not is_active(agent):
        return tuple(contracts)
    return tuple(c for c in contracts if effective_agent(c, projects_by_id) == agent)
