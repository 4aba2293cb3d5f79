"""
Report assembly.

Composes the metric groups produced by the calculator and the selection
parameters into one immutable ``AnalyticsReport``. Nothing is computed
here; absent groups fall back to their zero defaults.
"""

from dataclasses import fields
from typing import Any, Optional

from .models.report import AnalyticsReport
from .models.sections import (
    BreakdownMetrics,
    EmailMetrics,
    FunnelMetrics,
    ProjectionMetrics,
    RevenueMetrics,
)
from .selection import Selection
from .utils.time import format_timestamp


def _fields_of(section: Any) -> dict[str, Any]:
    return {f.name: getattr(section, f.name) for f in fields(section)}


def assemble_report(
    selection: Selection,
    revenue: Optional[RevenueMetrics] = None,
    projections: Optional[ProjectionMetrics] = None,
    breakdowns: Optional[BreakdownMetrics] = None,
    funnel: Optional[FunnelMetrics] = None,
    email: Optional[EmailMetrics] = None,
) -> AnalyticsReport:
    """
    Build the report for a selection.

    Args:
        selection: Filtered collections and the parameters that produced them
        revenue: Volumes, totals and portfolio ratios
        projections: Trailing-window projections, growth and trend
        breakdowns: Time series and top-N rankings
        funnel: Contact, project and pipeline funnels
        email: Campaign totals, rates, health and benchmarks

    Returns:
        Immutable report with every field present
    """
    values = {
        "period": selection.period,
        "cutoff": format_timestamp(selection.cutoff),
        "generated_at": format_timestamp(selection.now),
        "agent": selection.agent or "",
        "campaign_type": selection.campaign_type or "",
        "undated_policy": selection.undated_policy,
    }
    for section in (
        revenue or RevenueMetrics(),
        projections or ProjectionMetrics(),
        breakdowns or BreakdownMetrics(),
        funnel or FunnelMetrics(),
        email or EmailMetrics(),
    ):
        values.update(_fields_of(section))

    return AnalyticsReport(**values)
