"""
Metric building blocks.

Group-by aggregation, guarded ratios, trailing-window projections, email
campaign metrics and funnel/pipeline metrics. The coordinator that runs
them over a selection lives in ``crm_analytics.metrics.calculator``.
"""

from .aggregation import GroupSummary, GroupTotals, fold_groups, rank_groups, summarize, total_of
from .email import compute_rates, health_score, health_status, total_campaigns
from .evolution import growth_rate, projected_annual, trend_label
from .pipeline import agent_performance, link_contracts, origin_performance, pipeline_stages
from .ratios import conversion_rate, finite_sum, global_margin, percentage, safe_ratio

__all__ = [
    "GroupSummary",
    "GroupTotals",
    "fold_groups",
    "rank_groups",
    "summarize",
    "total_of",
    "compute_rates",
    "health_score",
    "health_status",
    "total_campaigns",
    "growth_rate",
    "projected_annual",
    "trend_label",
    "agent_performance",
    "link_contracts",
    "origin_performance",
    "pipeline_stages",
    "conversion_rate",
    "finite_sum",
    "global_margin",
    "percentage",
    "safe_ratio",
]
