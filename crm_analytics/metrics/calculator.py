"""Main analytics calculator coordinating every metric over a selection"""

import math
from collections.abc import Sequence
from typing import Any, Optional

from ..assembler import assemble_report
from ..config.defaults import AnalyticsConfig, get_default_config
from ..errors import DataQualityError, MetricsCalculationError
from ..logging.config import get_logger
from ..models.report import AnalyticsReport, EvolutionPoint
from ..models.sections import (
    BreakdownMetrics,
    EmailMetrics,
    FunnelMetrics,
    ProjectionMetrics,
    RevenueMetrics,
)
from ..selection import Selection
from .aggregation import (
    GroupSummary,
    by_agent,
    by_company,
    by_product,
    monthly_series,
    quarterly_series,
    top_groups,
    total_of,
)
from .email import (
    campaign_timeline,
    compare_benchmarks,
    compute_rates,
    health_score,
    health_status,
    performance_by_type,
    total_campaigns,
)
from .evolution import best_bucket, growth_rate, performance_vs_target, projected_annual, trend_label
from .pipeline import (
    agent_performance,
    average_conversion_days,
    link_contracts,
    origin_performance,
    pipeline_evolution,
    pipeline_stages,
    revenue_funnel,
    segment_contacts,
    stage_funnel,
)
from .ratios import (
    conversion_rate,
    customer_lifetime_value,
    global_margin,
    portfolio_valuation,
    recurring_potential,
    safe_ratio,
)

logger = get_logger(__name__)


class AnalyticsCalculator:
    """
    Derives every report metric from a selection.

    The calculator holds only immutable configuration, so one instance can
    be shared across calls.
    """

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        self.config = config or get_default_config()

    def calculate(self, selection: Selection) -> AnalyticsReport:
        """
        Calculate all metrics for a selection.

        Args:
            selection: Filtered collections from ``select_window``

        Returns:
            AnalyticsReport with every field present and finite
        """
        try:
            try:
                revenue = self._revenue_metrics(selection)
            except Exception as e:
                raise MetricsCalculationError(
                    f"Revenue calculation failed: {str(e)}",
                    metric_name="revenue",
                    calculation_input=self._input_summary(selection),
                )

            try:
                monthly = monthly_series(selection.contracts, selection.now,
                                         self.config.commission.recurring_multiplier)
                projections = self._projection_metrics(monthly)
                breakdowns = self._breakdown_metrics(selection, monthly)
            except Exception as e:
                raise MetricsCalculationError(
                    f"Evolution calculation failed: {str(e)}",
                    metric_name="evolution",
                    calculation_input=self._input_summary(selection),
                )

            try:
                funnel = self._funnel_metrics(selection)
            except Exception as e:
                raise MetricsCalculationError(
                    f"Funnel calculation failed: {str(e)}",
                    metric_name="funnel",
                    calculation_input=self._input_summary(selection),
                )

            try:
                email = self._email_metrics(selection)
            except Exception as e:
                raise MetricsCalculationError(
                    f"Email calculation failed: {str(e)}",
                    metric_name="email",
                    calculation_input={"campaign_count": len(selection.campaigns)},
                )

            report = assemble_report(selection, revenue, projections, breakdowns, funnel, email)
            self._validate_finite(report.to_dict())
            return report

        except (DataQualityError, MetricsCalculationError):
            # Re-raise known error types
            raise
        except Exception as e:
            raise MetricsCalculationError(
                f"Unexpected error in analytics calculation: {str(e)}",
                metric_name="unknown",
                calculation_input=self._input_summary(selection),
            )

    def _revenue_metrics(self, selection: Selection) -> RevenueMetrics:
        multiplier = self.config.commission.recurring_multiplier
        totals = total_of(selection.contracts)
        recurring = recurring_potential(totals.sum_commission_recurring, multiplier)

        return RevenueMetrics(
            contact_count=len(selection.contacts),
            project_count=len(selection.projects),
            contract_count=totals.count,
            campaign_count=len(selection.campaigns),
            total_premium=totals.sum_premium,
            total_monthly_premium=totals.sum_monthly_premium,
            total_commission_year1=totals.sum_commission_year1,
            total_commission_recurring=totals.sum_commission_recurring,
            average_premium=safe_ratio(totals.sum_premium, totals.count),
            average_commission=safe_ratio(totals.sum_commission_year1, totals.count),
            average_monthly_premium=safe_ratio(totals.sum_monthly_premium, totals.count),
            conversion_rate=conversion_rate(totals.count, len(selection.projects)),
            global_margin=global_margin(totals.sum_commission_year1, totals.sum_premium),
            recurring_potential=recurring,
            portfolio_valuation=portfolio_valuation(totals.sum_premium, recurring),
            commission_premium_ratio=safe_ratio(totals.sum_commission_year1, totals.sum_premium),
            customer_lifetime_value=customer_lifetime_value(
                totals.sum_commission_year1, totals.sum_commission_recurring,
                totals.count, multiplier,
            ),
        )

    def _projection_metrics(self, monthly: Sequence[GroupSummary]) -> ProjectionMetrics:
        params = self.config.projection
        keys = [bucket.key for bucket in monthly]
        revenues = [bucket.sum_premium for bucket in monthly]
        commissions = [bucket.sum_commission_year1 for bucket in monthly]

        revenue_growth = growth_rate(revenues, params.trailing_months, params.growth_floor)
        best_month, best_revenue = best_bucket(keys, revenues)

        return ProjectionMetrics(
            projected_annual_revenue=projected_annual(
                revenues, params.trailing_months, params.months_per_year),
            projected_annual_commission=projected_annual(
                commissions, params.trailing_months, params.months_per_year),
            revenue_growth=revenue_growth,
            commission_growth=growth_rate(commissions, params.trailing_months, params.growth_floor),
            trend=trend_label(revenue_growth, params.positive_trend_pct, params.negative_trend_pct),
            performance_vs_target=performance_vs_target(
                revenues, params.monthly_revenue_target, params.trailing_months),
            best_month=best_month,
            best_month_revenue=best_revenue,
        )

    def _breakdown_metrics(self, selection: Selection,
                           monthly: Sequence[GroupSummary]) -> BreakdownMetrics:
        multiplier = self.config.commission.recurring_multiplier
        unspecified = self.config.aggregation.unspecified_label
        limit = self.config.aggregation.top_n
        contracts = selection.contracts

        return BreakdownMetrics(
            monthly_evolution=tuple(_evolution_point(bucket) for bucket in monthly),
            quarterly_evolution=tuple(
                _evolution_point(bucket)
                for bucket in quarterly_series(contracts, selection.now, multiplier)
            ),
            top_companies=top_groups(contracts, by_company(unspecified), multiplier, limit=limit),
            top_products=top_groups(contracts, by_product(unspecified), multiplier, limit=limit),
            top_agents=top_groups(
                contracts, by_agent(selection.project_index, unspecified), multiplier, limit=limit),
        )

    def _funnel_metrics(self, selection: Selection) -> FunnelMetrics:
        params = self.config.funnel
        unspecified = self.config.aggregation.unspecified_label
        linked = link_contracts(selection.projects, selection.contracts)
        segmentation = segment_contacts(selection.contacts, params)
        stages = pipeline_stages(selection.projects, linked, params)

        return FunnelMetrics(
            contact_segmentation=segmentation,
            revenue_funnel=revenue_funnel(
                segmentation, len(selection.projects), len(selection.contracts)),
            pipeline_stages=stages,
            stage_funnel=stage_funnel(stages, params.lost_stages),
            agent_performance=agent_performance(selection.projects, linked, unspecified),
            origin_performance=origin_performance(selection.projects, linked, params, unspecified),
            average_conversion_days=average_conversion_days(selection.projects, selection.contracts),
            pipeline_evolution=pipeline_evolution(
                selection.projects, selection.contracts, selection.now, params.evolution_months),
        )

    def _email_metrics(self, selection: Selection) -> EmailMetrics:
        totals = total_campaigns(selection.campaigns)
        rates = compute_rates(totals)
        score = health_score(rates, self.config.health)

        return EmailMetrics(
            email_totals=totals,
            email_rates=rates,
            health_score=score,
            health_status=health_status(score, self.config.health),
            benchmarks=compare_benchmarks(rates, self.config.benchmarks),
            campaign_type_performance=performance_by_type(
                selection.period_campaigns, self.config.funnel.campaign_types,
                self.config.aggregation.unspecified_label,
            ),
            campaign_timeline=campaign_timeline(selection.campaigns),
        )

    def _validate_finite(self, value: Any, path: str = "report") -> None:
        """Raise MetricsCalculationError on the first NaN or infinite number."""
        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                logger.error("Non-finite metric", metric=path, value=str(value))
                raise MetricsCalculationError(
                    f"Metric {path} is not finite: {value}",
                    metric_name=path,
                )
        elif isinstance(value, dict):
            for key, item in value.items():
                self._validate_finite(item, f"{path}.{key}")
        elif isinstance(value, list):
            for index, item in enumerate(value):
                self._validate_finite(item, f"{path}[{index}]")

    @staticmethod
    def _input_summary(selection: Selection) -> dict[str, Any]:
        return {
            "period": selection.period,
            "contacts": len(selection.contacts),
            "projects": len(selection.projects),
            "contracts": len(selection.contracts),
            "campaigns": len(selection.campaigns),
        }


def _evolution_point(bucket: GroupSummary) -> EvolutionPoint:
    return EvolutionPoint(
        period=bucket.key,
        revenue=bucket.sum_premium,
        commission=bucket.sum_commission_year1,
        contracts=bucket.count,
        average_premium=bucket.average_premium,
    )
