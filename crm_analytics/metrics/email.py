"""Email campaign delivery, engagement and health-score metrics"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..config.defaults import BenchmarkParams, HealthScoreParams
from ..data.models import EmailCampaign
from ..utils.time import format_timestamp
from .ratios import percentage

HEALTH_GOOD = "good"
HEALTH_WARNING = "warning"
HEALTH_CRITICAL = "critical"

BENCHMARK_EXCELLENT = "excellent"
BENCHMARK_GOOD = "good"
BENCHMARK_NEEDS_IMPROVEMENT = "needs-improvement"


@dataclass(frozen=True)
class CampaignTotals:
    """Summed counters over a set of campaigns."""
    campaigns: int = 0
    sent: int = 0
    delivered: int = 0
    opens: int = 0
    clicks: int = 0
    unsubscribes: int = 0
    bounces: int = 0
    complaints: int = 0


@dataclass(frozen=True)
class EmailRates:
    """Delivery and engagement rates, in percent."""
    delivery_rate: float = 0.0
    open_rate: float = 0.0
    click_rate: float = 0.0
    click_to_open_rate: float = 0.0
    unsubscribe_rate: float = 0.0
    bounce_rate: float = 0.0
    complaint_rate: float = 0.0


@dataclass(frozen=True)
class BenchmarkComparison:
    """One rate compared with its industry benchmark."""
    metric: str
    actual: float
    benchmark: float
    status: str


@dataclass(frozen=True)
class CampaignTypePerformance:
    """Counters and rates of every campaign of one type."""
    campaign_type: str
    campaigns: int
    sent: int
    delivered: int
    opens: int
    clicks: int
    delivery_rate: float
    open_rate: float
    click_rate: float
    click_to_open_rate: float


@dataclass(frozen=True)
class CampaignTimelinePoint:
    """Per-campaign engagement, for the timeline view."""
    campaign_id: str
    name: str
    sent_at: str
    sent: int
    delivered: int
    opens: int
    clicks: int
    open_rate: float
    click_rate: float


def total_campaigns(campaigns: Iterable[EmailCampaign]) -> CampaignTotals:
    """Sum campaign counters."""
    count = sent = delivered = opens = clicks = unsubscribes = bounces = complaints = 0
    for campaign in campaigns:
        count += 1
        sent += campaign.sent
        delivered += campaign.delivered
        opens += campaign.opens
        clicks += campaign.clicks
        unsubscribes += campaign.unsubscribes
        bounces += campaign.bounces
        complaints += campaign.complaints

    return CampaignTotals(
        campaigns=count, sent=sent, delivered=delivered, opens=opens, clicks=clicks,
        unsubscribes=unsubscribes, bounces=bounces, complaints=complaints,
    )


def compute_rates(totals: CampaignTotals) -> EmailRates:
    """
    Derive rates from counters.

    Delivery and bounce rates are relative to sends; open, click,
    unsubscribe and complaint rates to deliveries; click-to-open to opens.
    """
    return EmailRates(
        delivery_rate=percentage(totals.delivered, totals.sent),
        open_rate=percentage(totals.opens, totals.delivered),
        click_rate=percentage(totals.clicks, totals.delivered),
        click_to_open_rate=percentage(totals.clicks, totals.opens),
        unsubscribe_rate=percentage(totals.unsubscribes, totals.delivered),
        bounce_rate=percentage(totals.bounces, totals.sent),
        complaint_rate=percentage(totals.complaints, totals.delivered),
    )


def tier_points(value: float, tiers: Sequence[tuple[float, int]], lower_is_better: bool = False) -> int:
    """Points of the first tier whose threshold ``value`` reaches, 0 otherwise."""
    for threshold, points in tiers:
        if (value <= threshold) if lower_is_better else (value >= threshold):
            return int(points)
    return 0


def health_score(rates: EmailRates, params: HealthScoreParams) -> int:
    """
    Composite 0-100 score of delivery, open, click and bounce tiers.

    The tier table always applies: with nothing sent every rate is 0%, and
    a 0% bounce rate still earns the best bounce tier.
    """
    score = (
        tier_points(rates.delivery_rate, params.delivery_tiers)
        + tier_points(rates.open_rate, params.open_tiers)
        + tier_points(rates.click_rate, params.click_tiers)
        + tier_points(rates.bounce_rate, params.bounce_tiers, lower_is_better=True)
    )
    return max(0, min(100, score))


def health_status(score: int, params: HealthScoreParams) -> str:
    """Band of a health score."""
    if score >= params.good_score:
        return HEALTH_GOOD
    if score >= params.warning_score:
        return HEALTH_WARNING
    return HEALTH_CRITICAL


def benchmark_status(actual: float, benchmark: float, params: BenchmarkParams,
                     lower_is_better: bool = False) -> str:
    """
    Compare a rate with its benchmark.

    For lower-is-better rates the roles of actual and benchmark are
    swapped, so a bounce rate well under the benchmark is excellent.
    """
    if lower_is_better:
        actual, benchmark = benchmark, actual

    if actual >= benchmark * params.excellent_ratio:
        return BENCHMARK_EXCELLENT
    if actual >= benchmark * params.good_ratio:
        return BENCHMARK_GOOD
    return BENCHMARK_NEEDS_IMPROVEMENT


def compare_benchmarks(rates: EmailRates, params: BenchmarkParams) -> tuple[BenchmarkComparison, ...]:
    """Benchmark status of every tracked rate."""
    tracked = (
        ("open_rate", rates.open_rate, params.open_rate, False),
        ("click_rate", rates.click_rate, params.click_rate, False),
        ("delivery_rate", rates.delivery_rate, params.delivery_rate, False),
        ("bounce_rate", rates.bounce_rate, params.bounce_rate, True),
        ("unsubscribe_rate", rates.unsubscribe_rate, params.unsubscribe_rate, True),
    )
    return tuple(
        BenchmarkComparison(
            metric=metric,
            actual=actual,
            benchmark=benchmark,
            status=benchmark_status(actual, benchmark, params, lower_is_better),
        )
        for metric, actual, benchmark, lower_is_better in tracked
    )


def performance_by_type(campaigns: Iterable[EmailCampaign], type_order: Sequence[str] = (),
                        unspecified: str = "unspecified") -> tuple[CampaignTypePerformance, ...]:
    """
    Counters and rates per campaign type.

    Types without any send are omitted. Configured types come first in
    their configured order, other types follow alphabetically.
    """
    by_type: dict[str, list[EmailCampaign]] = {}
    for campaign in campaigns:
        by_type.setdefault(campaign.campaign_type or unspecified, []).append(campaign)

    ordered = [t for t in type_order if t in by_type]
    ordered += sorted(t for t in by_type if t not in type_order)

    result = []
    for campaign_type in ordered:
        totals = total_campaigns(by_type[campaign_type])
        if totals.sent <= 0:
            continue
        rates = compute_rates(totals)
        result.append(CampaignTypePerformance(
            campaign_type=campaign_type,
            campaigns=totals.campaigns,
            sent=totals.sent,
            delivered=totals.delivered,
            opens=totals.opens,
            clicks=totals.clicks,
            delivery_rate=rates.delivery_rate,
            open_rate=rates.open_rate,
            click_rate=rates.click_rate,
            click_to_open_rate=rates.click_to_open_rate,
        ))

    return tuple(result)


def campaign_timeline(campaigns: Iterable[EmailCampaign]) -> tuple[CampaignTimelinePoint, ...]:
    """Campaigns by ascending send date; undated campaigns come last."""
    dated = sorted(campaigns, key=lambda c: (c.sent_at is None, c.sent_at or 0, c.id or ""))
    return tuple(
        CampaignTimelinePoint(
            campaign_id=campaign.id or "",
            name=campaign.name or "",
            sent_at=format_timestamp(campaign.sent_at),
            sent=campaign.sent,
            delivered=campaign.delivered,
            opens=campaign.opens,
            clicks=campaign.clicks,
            open_rate=percentage(campaign.opens, campaign.delivered),
            click_rate=percentage(campaign.clicks, campaign.delivered),
        )
        for campaign in dated
    )
