"""Tests for email campaign metrics and the health score."""

import pytest
from datetime import datetime, timezone

from crm_analytics.config.defaults import BenchmarkParams, HealthScoreParams
from crm_analytics.data.models import EmailCampaign
from crm_analytics.metrics.email import (
    BENCHMARK_EXCELLENT, BENCHMARK_GOOD, BENCHMARK_NEEDS_IMPROVEMENT, HEALTH_CRITICAL,
    HEALTH_GOOD, HEALTH_WARNING, EmailRates, benchmark_status, campaign_timeline,
    compare_benchmarks, compute_rates, health_score, health_status, performance_by_type,
    tier_points, total_campaigns
)


def _campaign(campaign_id, campaign_type="newsletter", sent=1000, delivered=960, opens=200,
              clicks=20, bounces=40, sent_at=None):
    return EmailCampaign(
        id=campaign_id, name=f"Campaign {campaign_id}", campaign_type=campaign_type,
        sent=sent, delivered=delivered, opens=opens, clicks=clicks, bounces=bounces,
        sent_at=sent_at,
    )


class TestRates:
    """Counters and derived rates."""

    def test_totals(self):
        totals = total_campaigns([_campaign("a"), _campaign("b", sent=500, delivered=480)])

        assert totals.campaigns == 2
        assert totals.sent == 1500
        assert totals.delivered == 1440

    def test_rates(self):
        rates = compute_rates(total_campaigns([_campaign("a")]))

        assert rates.delivery_rate == 96.0
        assert rates.bounce_rate == 4.0
        assert rates.click_to_open_rate == 10.0

    def test_zero_sends(self):
        rates = compute_rates(total_campaigns([]))

        assert rates == EmailRates()


class TestHealthScore:
    """Tiered health score."""

    def test_tier_scenario(self):
        """96% delivered, 18% opens, 1.5% clicks, 4% bounces."""
        rates = EmailRates(delivery_rate=96.0, open_rate=18.0, click_rate=1.5, bounce_rate=4.0)

        assert health_score(rates, HealthScoreParams()) == 25 + 15 + 15 + 20

    def test_perfect_score(self):
        rates = EmailRates(delivery_rate=99.0, open_rate=40.0, click_rate=5.0, bounce_rate=0.5)
        assert health_score(rates, HealthScoreParams()) == 100

    def test_worst_score(self):
        rates = EmailRates(delivery_rate=50.0, open_rate=1.0, click_rate=0.1, bounce_rate=30.0)
        assert health_score(rates, HealthScoreParams()) == 0

    def test_nothing_sent_earns_bounce_tier(self):
        """With no sends every rate is 0%, which only the bounce tier rewards."""
        rates = compute_rates(total_campaigns([]))

        assert health_score(rates, HealthScoreParams()) == 25
        assert health_status(25, HealthScoreParams()) == HEALTH_CRITICAL

    def test_tier_boundaries(self):
        tiers = HealthScoreParams().bounce_tiers
        assert tier_points(2.0, tiers, lower_is_better=True) == 25
        assert tier_points(2.01, tiers, lower_is_better=True) == 20
        assert tier_points(10.01, tiers, lower_is_better=True) == 0

    @pytest.mark.parametrize("score,status", [
        (100, HEALTH_GOOD), (80, HEALTH_GOOD), (79, HEALTH_WARNING),
        (60, HEALTH_WARNING), (59, HEALTH_CRITICAL), (0, HEALTH_CRITICAL),
    ])
    def test_status(self, score, status):
        assert health_status(score, HealthScoreParams()) == status


class TestBenchmarks:
    """Benchmark comparisons."""

    def test_higher_is_better(self):
        params = BenchmarkParams()
        assert benchmark_status(25.0, 22.5, params) == BENCHMARK_EXCELLENT
        assert benchmark_status(21.0, 22.5, params) == BENCHMARK_GOOD
        assert benchmark_status(10.0, 22.5, params) == BENCHMARK_NEEDS_IMPROVEMENT

    def test_lower_is_better(self):
        params = BenchmarkParams()
        assert benchmark_status(1.0, 3.1, params, lower_is_better=True) == BENCHMARK_EXCELLENT
        assert benchmark_status(10.0, 3.1, params, lower_is_better=True) == BENCHMARK_NEEDS_IMPROVEMENT

    def test_compare_all(self):
        comparisons = compare_benchmarks(EmailRates(open_rate=30.0), BenchmarkParams())

        assert [c.metric for c in comparisons] == [
            "open_rate", "click_rate", "delivery_rate", "bounce_rate", "unsubscribe_rate"
        ]
        assert comparisons[0].status == BENCHMARK_EXCELLENT
        assert comparisons[0].benchmark == 22.5


class TestBreakdowns:
    """Per-type performance and timeline."""

    def test_performance_by_type_order(self):
        campaigns = [
            _campaign("1", "custom"),
            _campaign("2", "promotional"),
            _campaign("3", "newsletter"),
            _campaign("4", "transactional", sent=0, delivered=0, opens=0, clicks=0, bounces=0),
            _campaign("5", None),
        ]

        performance = performance_by_type(
            campaigns, ("newsletter", "promotional", "transactional"))

        assert [p.campaign_type for p in performance] == [
            "newsletter", "promotional", "custom", "unspecified"
        ]
        assert performance[0].open_rate == pytest.approx(200 / 960 * 100)

    def test_timeline_sorted_by_send_date(self):
        campaigns = [
            _campaign("late", sent_at=datetime(2024, 6, 1, tzinfo=timezone.utc)),
            _campaign("undated"),
            _campaign("early", sent_at=datetime(2024, 5, 1, tzinfo=timezone.utc)),
        ]

        timeline = campaign_timeline(campaigns)

        assert [p.campaign_id for p in timeline] == ["early", "late", "undated"]
        assert timeline[0].sent_at == "2024-05-01T00:00:00+00:00"
        assert timeline[2].sent_at == ""
