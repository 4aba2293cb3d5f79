"""Default configuration parameters for the analytics pipeline."""

from dataclasses import dataclass


# Period codes accepted by the window filter
PERIOD_CODES = ("1m", "3m", "6m", "1y", "ytd")

# Undated-record policies for the window filter
UNDATED_AS_NOW = "now"
UNDATED_EXCLUDE = "exclude"
UNDATED_POLICIES = (UNDATED_AS_NOW, UNDATED_EXCLUDE)


@dataclass(frozen=True)
class WindowParams:
    """Time-window filtering parameters."""
    default_period: str = "3m"                       # Period used when none is requested
    undated_policy: str = UNDATED_AS_NOW             # "now" keeps undated records in every window


@dataclass(frozen=True)
class AggregationParams:
    """Grouping parameters."""
    unspecified_label: str = "unspecified"           # Bucket for missing company/product/agent
    top_n: int = 0                                   # Ranked views length, 0 = unlimited


@dataclass(frozen=True)
class CommissionParams:
    """Commission valuation parameters."""
    # Flat multiplier on recurring commission, not a discounted value
    recurring_multiplier: float = 10.0


@dataclass(frozen=True)
class ProjectionParams:
    """Trailing-window projection and trend parameters."""
    trailing_months: int = 3                         # Monthly buckets used for projection/growth
    months_per_year: int = 12
    growth_floor: float = 1.0                        # Floor of the growth-rate denominator
    positive_trend_pct: float = 5.0
    negative_trend_pct: float = -5.0
    monthly_revenue_target: float = 50000.0


@dataclass(frozen=True)
class HealthScoreParams:
    """Email health-score tiers as (threshold, points), best tier first."""
    delivery_tiers: tuple = ((95.0, 25), (90.0, 20), (85.0, 15))
    open_tiers: tuple = ((25.0, 25), (20.0, 20), (15.0, 15))
    click_tiers: tuple = ((3.0, 25), (2.0, 20), (1.0, 15))
    bounce_tiers: tuple = ((2.0, 25), (5.0, 20), (10.0, 15))     # Lower is better
    good_score: int = 80
    warning_score: int = 60


@dataclass(frozen=True)
class BenchmarkParams:
    """Insurance-industry email benchmarks, in percent."""
    open_rate: float = 22.5
    click_rate: float = 2.8
    delivery_rate: float = 96.2
    bounce_rate: float = 3.1
    unsubscribe_rate: float = 0.8
    excellent_ratio: float = 1.1
    good_ratio: float = 0.9


@dataclass(frozen=True)
class FunnelParams:
    """Contact statuses, pipeline stages and campaign types."""
    prospect_status: str = "Prospect"
    client_status: str = "Client"
    inactive_status: str = "Inactif"

    # (stage, status keywords), matched case-insensitively as substrings
    stages: tuple = (
        ("Nouveau", ("Nouveau", "Contact initial")),
        ("Qualification", ("Qualification", "Analyse")),
        ("Proposition", ("Devis envoyé", "Proposition")),
        ("Négociation", ("Négociation", "En cours")),
        ("Closing", ("Signature", "Finalisation")),
        ("Gagné", ("Terminé", "Signé", "Actif")),
        ("Perdu", ("Perdu", "Annulé", "Refusé")),
    )
    lost_stages: tuple = ("Perdu",)

    # Origins containing one of these keywords are reported under the alias
    origin_aliases: tuple = (("fb", "Facebook"),)

    # Trailing months of the new-projects / signed-contracts series
    evolution_months: int = 12

    campaign_types: tuple = ("newsletter", "promotional", "transactional", "follow-up")


@dataclass(frozen=True)
class AnalyticsConfig:
    """Complete analytics configuration."""
    window: WindowParams
    aggregation: AggregationParams
    commission: CommissionParams
    projection: ProjectionParams
    health: HealthScoreParams
    benchmarks: BenchmarkParams
    funnel: FunnelParams


def get_default_config() -> AnalyticsConfig:
    """Get the default configuration instance."""
    return AnalyticsConfig(
        window=WindowParams(),
        aggregation=AggregationParams(),
        commission=CommissionParams(),
        projection=ProjectionParams(),
        health=HealthScoreParams(),
        benchmarks=BenchmarkParams(),
        funnel=FunnelParams(),
    )
