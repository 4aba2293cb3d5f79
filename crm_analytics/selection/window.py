"""
Loader/filter stage of the analytics pipeline.

Restricts a snapshot to the requested period window and dimension filters
without mutating it. Unknown period codes pass everything through.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..config.defaults import PERIOD_CODES, WindowParams
from ..data.models import Contact, Contract, DataSnapshot, EmailCampaign, Project
from ..logging.config import get_pipeline_logger, log_filter_decision
from ..utils.time import ensure_utc, utc_now
from .dimensions import filter_by_field, filter_contracts_by_agent, index_projects, is_active
from .period import filter_by_period, is_known_period, resolve_cutoff

logger = get_pipeline_logger(__name__)


@dataclass(frozen=True)
class Selection:
    """Filtered collections plus the parameters that produced them."""
    contacts: tuple[Contact, ...]
    projects: tuple[Project, ...]
    contracts: tuple[Contract, ...]
    campaigns: tuple[EmailCampaign, ...]
    now: datetime
    period: str                                 # Effective period, "all" when unrestricted
    cutoff: Optional[datetime]
    undated_policy: str
    agent: Optional[str] = None
    campaign_type: Optional[str] = None
    # Every project of the snapshot by id, used for agent attribution
    project_index: Optional[Mapping[str, Project]] = None
    # Campaigns of the period before the campaign-type filter
    period_campaigns: Optional[tuple[EmailCampaign, ...]] = None

    def __post_init__(self):
        if self.project_index is None:
            object.__setattr__(self, "project_index", index_projects(self.projects))
        if self.period_campaigns is None:
            object.__setattr__(self, "period_campaigns", self.campaigns)


def select_window(
    snapshot: DataSnapshot,
    period: Optional[str],
    now: Optional[datetime] = None,
    agent: Optional[str] = None,
    campaign_type: Optional[str] = None,
    params: Optional[WindowParams] = None,
) -> Selection:
    """
    Restrict a snapshot to a period window and dimension filters.

    Args:
        snapshot: Normalized collections
        period: Period code (1m, 3m, 6m, 1y, ytd); "all", None and unknown
            codes disable the window
        now: Reference time, defaults to wall-clock UTC
        agent: Commercial agent to keep, "all"/None for every agent
        campaign_type: Campaign type to keep, "all"/None for every type
        params: Window parameters (undated-record policy)

    Returns:
        Selection with new tuples; the snapshot is left untouched
    """
    params = params or WindowParams()
    now = ensure_utc(now) if now is not None else utc_now()
    policy = params.undated_policy

    cutoff = resolve_cutoff(period, now)
    if cutoff is None and period not in (None, "all"):
        log_filter_decision(
            logger, "period", applied=False, value=period,
            reason="unknown period code", context={"known": list(PERIOD_CODES)},
        )
    elif cutoff is not None:
        log_filter_decision(
            logger, "period", applied=True, value=period,
            reason="window restricted", context={"cutoff": cutoff.isoformat()},
        )

    contacts = filter_by_period(snapshot.contacts, cutoff, now, undated_policy=policy)
    projects = filter_by_period(snapshot.projects, cutoff, now, undated_policy=policy)
    contracts = filter_by_period(snapshot.contracts, cutoff, now, undated_policy=policy)
    campaigns = filter_by_period(snapshot.campaigns, cutoff, now, date_field="sent_at",
                                 undated_policy=policy)

    project_index = index_projects(snapshot.projects)
    period_campaigns = campaigns

    if is_active(agent):
        projects = filter_by_field(projects, "agent", agent)
        contracts = filter_contracts_by_agent(contracts, agent, project_index)
        log_filter_decision(logger, "agent", applied=True, value=agent, reason="exact match")

    if is_active(campaign_type):
        campaigns = filter_by_field(campaigns, "campaign_type", campaign_type)
        log_filter_decision(logger, "campaign_type", applied=True, value=campaign_type,
                            reason="exact match")

    return Selection(
        contacts=contacts,
        projects=projects,
        contracts=contracts,
        campaigns=campaigns,
        now=now,
        period=period if is_known_period(period) else "all",
        cutoff=cutoff,
        undated_policy=policy,
        agent=agent if is_active(agent) else None,
        campaign_type=campaign_type if is_active(campaign_type) else None,
        project_index=project_index,
        period_campaigns=period_campaigns,
    )
