"""Sales funnel, pipeline stage and per-agent / per-origin project metrics"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType

from ..config.defaults import FunnelParams
from ..data.models import Contact, Contract, Project
from ..utils.time import days_between, month_key, subtract_months
from .ratios import conversion_rate, finite_sum, safe_ratio


@dataclass(frozen=True)
class FunnelStep:
    """One step of a funnel chart."""
    name: str
    value: int


@dataclass(frozen=True)
class ContactSegmentation:
    """Contact counts by lifecycle status."""
    prospects: int = 0
    clients: int = 0
    inactive: int = 0
    total: int = 0


@dataclass(frozen=True)
class StageSummary:
    """Projects whose status matches a pipeline stage."""
    stage: str
    count: int
    value: float


@dataclass(frozen=True)
class AgentPerformance:
    """Projects, linked contracts and revenue of one agent."""
    agent: str
    projects: int
    contracts: int
    revenue: float
    conversion_rate: float


@dataclass(frozen=True)
class OriginPerformance:
    """Conversion of the projects coming from one lead source."""
    origin: str
    total: int
    converted: int
    revenue: float
    conversion_rate: float


@dataclass(frozen=True)
class PipelineMonth:
    """Pipeline activity of one calendar month."""
    period: str                     # YYYY-MM
    new_projects: int
    signed_contracts: int
    revenue: float


def link_contracts(projects: Iterable[Project],
                   contracts: Iterable[Contract]) -> Mapping[str, tuple[Contract, ...]]:
    """
    Contracts grouped by the id of a selected parent project.

    Orphan contracts (no project id, or a project outside the selection)
    are left out.
    """
    project_ids = {project.id for project in projects if project.id is not None}
    linked: dict[str, list[Contract]] = {}
    for contract in contracts:
        if contract.project_id in project_ids:
            linked.setdefault(contract.project_id, []).append(contract)
    return MappingProxyType({key: tuple(value) for key, value in linked.items()})


def _premium_of(contracts: Iterable[Contract]) -> float:
    return finite_sum(contract.annual_premium for contract in contracts)


def segment_contacts(contacts: Sequence[Contact], params: FunnelParams) -> ContactSegmentation:
    """Count contacts per lifecycle status."""
    return ContactSegmentation(
        prospects=sum(1 for c in contacts if c.status == params.prospect_status),
        clients=sum(1 for c in contacts if c.status == params.client_status),
        inactive=sum(1 for c in contacts if c.status == params.inactive_status),
        total=len(contacts),
    )


def revenue_funnel(segmentation: ContactSegmentation, project_count: int,
                   contract_count: int) -> tuple[FunnelStep, ...]:
    """Prospects, projects, contracts and clients, in funnel order."""
    return (
        FunnelStep("Prospects", segmentation.prospects),
        FunnelStep("Projects", project_count),
        FunnelStep("Contracts", contract_count),
        FunnelStep("Clients", segmentation.clients),
    )


def _matches_stage(status: str, keywords: Sequence[str]) -> bool:
    lowered = status.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def pipeline_stages(projects: Sequence[Project],
                    contracts_by_project: Mapping[str, tuple[Contract, ...]],
                    params: FunnelParams) -> tuple[StageSummary, ...]:
    """
    Project count and linked premium per configured stage.

    A status is matched case-insensitively against each stage's keywords;
    a project whose status matches several stages counts in each. The
    value sums every contract linked to the stage's projects, not only the
    first one per project, so multi-contract projects are valued in full.
    """
    result = []
    for stage, keywords in params.stages:
        matched = [p for p in projects if p.status and _matches_stage(p.status, keywords)]
        value = finite_sum(
            _premium_of(contracts_by_project.get(p.id, ())) for p in matched
        )
        result.append(StageSummary(stage=stage, count=len(matched), value=value))
    return tuple(result)


def stage_funnel(stages: Iterable[StageSummary], lost_stages: Sequence[str]) -> tuple[FunnelStep, ...]:
    """Non-empty, non-lost stages as funnel steps."""
    return tuple(
        FunnelStep(stage.stage, stage.count)
        for stage in stages
        if stage.count > 0 and stage.stage not in lost_stages
    )


def agent_performance(projects: Sequence[Project],
                      contracts_by_project: Mapping[str, tuple[Contract, ...]],
                      unspecified: str = "unspecified") -> tuple[AgentPerformance, ...]:
    """Per-agent project conversion, by descending revenue (stable)."""
    grouped: dict[str, list[Project]] = {}
    for project in projects:
        grouped.setdefault(project.agent or unspecified, []).append(project)

    rows = []
    for agent, agent_projects in grouped.items():
        linked = [c for p in agent_projects for c in contracts_by_project.get(p.id, ())]
        rows.append(AgentPerformance(
            agent=agent,
            projects=len(agent_projects),
            contracts=len(linked),
            revenue=_premium_of(linked),
            conversion_rate=conversion_rate(len(linked), len(agent_projects)),
        ))

    return tuple(sorted(rows, key=lambda row: row.revenue, reverse=True))


def normalize_origin(origin: str, aliases: Sequence[tuple[str, str]], unspecified: str) -> str:
    """Collapse origin variants (for instance "FB Ads", "fb-lead") onto their alias."""
    if not origin:
        return unspecified
    lowered = origin.lower()
    for keyword, alias in aliases:
        if keyword.lower() in lowered:
            return alias
    return origin


def origin_performance(projects: Sequence[Project],
                       contracts_by_project: Mapping[str, tuple[Contract, ...]],
                       params: FunnelParams,
                       unspecified: str = "unspecified") -> tuple[OriginPerformance, ...]:
    """Per-origin conversion, by descending project count (stable)."""
    grouped: dict[str, list[Project]] = {}
    for project in projects:
        origin = normalize_origin(project.origin, params.origin_aliases, unspecified)
        grouped.setdefault(origin, []).append(project)

    rows = []
    for origin, origin_projects in grouped.items():
        converted = [p for p in origin_projects if contracts_by_project.get(p.id)]
        revenue = finite_sum(_premium_of(contracts_by_project[p.id]) for p in converted)
        rows.append(OriginPerformance(
            origin=origin,
            total=len(origin_projects),
            converted=len(converted),
            revenue=revenue,
            conversion_rate=conversion_rate(len(converted), len(origin_projects)),
        ))

    return tuple(sorted(rows, key=lambda row: row.total, reverse=True))


def average_conversion_days(projects: Sequence[Project], contracts: Iterable[Contract]) -> float:
    """
    Mean whole days from project creation to contract creation.

    Only contracts with a date whose selected parent project also has a
    date take part; 0.0 when there are none.
    """
    created = {}
    for project in projects:
        if project.id is not None and project.created_at is not None and project.id not in created:
            created[project.id] = project.created_at

    durations = [
        days_between(created[contract.project_id], contract.created_at)
        for contract in contracts
        if contract.created_at is not None and contract.project_id in created
    ]
    return safe_ratio(finite_sum(durations), len(durations))


def pipeline_evolution(projects: Iterable[Project], contracts: Iterable[Contract],
                       now: datetime, months: int = 12) -> tuple[PipelineMonth, ...]:
    """
    New projects, signed contracts and their premium for each of the last
    ``months`` calendar months, the month of ``now`` included.

    Months without activity are present with zero values. Undated records
    are not placed in any month.
    """
    keys = [month_key(subtract_months(now, offset)) for offset in range(months - 1, -1, -1)]

    new_projects = {key: 0 for key in keys}
    for project in projects:
        if project.created_at is not None:
            key = month_key(project.created_at)
            if key in new_projects:
                new_projects[key] += 1

    signed: dict[str, list[Contract]] = {key: [] for key in keys}
    for contract in contracts:
        if contract.created_at is not None:
            key = month_key(contract.created_at)
            if key in signed:
                signed[key].append(contract)

    return tuple(
        PipelineMonth(
            period=key,
            new_projects=new_projects[key],
            signed_contracts=len(signed[key]),
            revenue=_premium_of(signed[key]),
        )
        for key in keys
    )
