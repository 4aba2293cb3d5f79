"""Intermediate metric groups handed from the calculator to the assembler"""

from dataclasses import dataclass

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
from .report import EvolutionPoint


@dataclass(frozen=True)
class RevenueMetrics:
    contact_count: int = 0
    project_count: int = 0
    contract_count: int = 0
    campaign_count: int = 0
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


@dataclass(frozen=True)
class ProjectionMetrics:
    projected_annual_revenue: float = 0.0
    projected_annual_commission: float = 0.0
    revenue_growth: float = 0.0
    commission_growth: float = 0.0
    trend: str = "stable"
    performance_vs_target: float = 0.0
    best_month: str = ""
    best_month_revenue: float = 0.0


@dataclass(frozen=True)
class BreakdownMetrics:
    monthly_evolution: tuple[EvolutionPoint, ...] = ()
    quarterly_evolution: tuple[EvolutionPoint, ...] = ()
    top_companies: tuple[GroupSummary, ...] = ()
    top_products: tuple[GroupSummary, ...] = ()
    top_agents: tuple[GroupSummary, ...] = ()


@dataclass(frozen=True)
class FunnelMetrics:
    contact_segmentation: ContactSegmentation = ContactSegmentation()
    revenue_funnel: tuple[FunnelStep, ...] = ()
    pipeline_stages: tuple[StageSummary, ...] = ()
    stage_funnel: tuple[FunnelStep, ...] = ()
    agent_performance: tuple[AgentPerformance, ...] = ()
    origin_performance: tuple[OriginPerformance, ...] = ()
    average_conversion_days: float = 0.0
    pipeline_evolution: tuple[PipelineMonth, ...] = ()


@dataclass(frozen=True)
class EmailMetrics:
    email_totals: CampaignTotals = CampaignTotals()
    email_rates: EmailRates = EmailRates()
    health_score: int = 0
    health_status: str = "critical"
    benchmarks: tuple[BenchmarkComparison, ...] = ()
    campaign_type_performance: tuple[CampaignTypePerformance, ...] = ()
    campaign_timeline: tuple[CampaignTimelinePoint, ...] = ()
