"""
Analytics report model.

The report is the single output of one engine invocation. Every field is
always present with a zero or empty default, so consumers (dashboard,
PDF/Excel export) never need to test for missing keys. Values are raw
numbers; rounding and currency formatting belong to the consumer.
"""

from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime
from typing import Any

import orjson

from ..metrics.aggregation import GroupSummary
from ..metrics.email import (
    BenchmarkComparison,
    CampaignTimelinePoint,
    CampaignTotals,
    CampaignTypePerformance,
    EmailRates,
)
from ..metrics.pipeline import (
    AgentPerformance,
    ContactSegmentation,
    FunnelStep,
    OriginPerformance,
    PipelineMonth,
    StageSummary,
)


@dataclass(frozen=True)
class EvolutionPoint:
    """Revenue and commission of one month or quarter bucket."""
    period: str
    revenue: float
    commission: float
    contracts: int
    average_premium: float


@dataclass(frozen=True)
class AnalyticsReport:
    """Immutable analytics report for one period and filter combination."""

    # Selection
    period: str = "all"
    cutoff: str = ""
    generated_at: str = ""
    agent: str = ""
    campaign_type: str = ""
    undated_policy: str = "now"

    # Volumes
    contact_count: int = 0
    project_count: int = 0
    contract_count: int = 0
    campaign_count: int = 0

    # Revenue and commissions
    total_premium: float = 0.0
    total_monthly_premium: float = 0.0
    total_commission_year1: float = 0.0
    total_commission_recurring: float = 0.0
    average_premium: float = 0.0
    average_commission: float = 0.0
    average_monthly_premium: float = 0.0
    conversion_rate: float = 0.0
    global_margin: float = 0.0
    recurring_potential: float = 0.0
    portfolio_valuation: float = 0.0
    commission_premium_ratio: float = 0.0
    customer_lifetime_value: float = 0.0

    # Projections
    projected_annual_revenue: float = 0.0
    projected_annual_commission: float = 0.0
    revenue_growth: float = 0.0
    commission_growth: float = 0.0
    trend: str = "stable"
    performance_vs_target: float = 0.0
    best_month: str = ""
    best_month_revenue: float = 0.0

    # Breakdowns
    monthly_evolution: tuple[EvolutionPoint, ...] = ()
    quarterly_evolution: tuple[EvolutionPoint, ...] = ()
    top_companies: tuple[GroupSummary, ...] = ()
    top_products: tuple[GroupSummary, ...] = ()
    top_agents: tuple[GroupSummary, ...] = ()

    # Funnel and pipeline
    contact_segmentation: ContactSegmentation = ContactSegmentation()
    revenue_funnel: tuple[FunnelStep, ...] = ()
    pipeline_stages: tuple[StageSummary, ...] = ()
    stage_funnel: tuple[FunnelStep, ...] = ()
    agent_performance: tuple[AgentPerformance, ...] = ()
    origin_performance: tuple[OriginPerformance, ...] = ()
    average_conversion_days: float = 0.0
    pipeline_evolution: tuple[PipelineMonth, ...] = ()

    # Email
    email_totals: CampaignTotals = CampaignTotals()
    email_rates: EmailRates = EmailRates()
    health_score: int = 0
    health_status: str = "critical"
    benchmarks: tuple[BenchmarkComparison, ...] = ()
    campaign_type_performance: tuple[CampaignTypePerformance, ...] = ()
    campaign_timeline: tuple[CampaignTimelinePoint, ...] = ()

    @classmethod
    def empty(cls, period: str = "all") -> "AnalyticsReport":
        """Report of an empty selection."""
        return cls(period=period)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of JSON-compatible values (lists, dicts, str, int, float)."""
        return _plain(self)

    def to_json(self) -> bytes:
        """UTF-8 JSON with sorted keys; identical reports give identical bytes."""
        return orjson.dumps(self.to_dict(), option=orjson.OPT_SORT_KEYS)


def _plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted(_plain(item) for item in value)
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
