"""Tests for trailing-window projections and trends."""

import pytest

from crm_analytics.metrics.evolution import (
    NEGATIVE, POSITIVE, STABLE, best_bucket, growth_rate, performance_vs_target,
    projected_annual, trailing_average, trend_label
)


class TestProjection:
    """Trailing averages extrapolated to a year."""

    def test_uses_last_three_buckets(self):
        assert projected_annual([100.0, 1000.0, 2000.0, 3000.0]) == 2000.0 * 12

    def test_fewer_buckets_than_window(self):
        assert trailing_average([500.0]) == 500.0
        assert projected_annual([500.0]) == 6000.0

    def test_empty_series(self):
        assert projected_annual([]) == 0.0


class TestGrowth:
    """Growth from first to last bucket of the window."""

    def test_three_buckets(self):
        assert growth_rate([1000.0, 2000.0, 3000.0]) == 200.0

    def test_window_drops_older_buckets(self):
        assert growth_rate([1.0, 1000.0, 500.0, 1000.0]) == 0.0

    def test_fewer_than_two_buckets(self):
        assert growth_rate([]) == 0.0
        assert growth_rate([1000.0]) == 0.0

    def test_denominator_floor(self):
        """A zero first bucket is floored at 1, not a division by zero."""
        assert growth_rate([0.0, 50.0]) == 5000.0
        assert growth_rate([0.5, 1.5]) == 100.0

    def test_decline(self):
        assert growth_rate([2000.0, 1000.0]) == -50.0


class TestTrend:
    """Trend labels around the thresholds."""

    @pytest.mark.parametrize("growth,label", [
        (5.0, POSITIVE),
        (200.0, POSITIVE),
        (4.99, STABLE),
        (0.0, STABLE),
        (-4.99, STABLE),
        (-5.0, NEGATIVE),
        (-50.0, NEGATIVE),
    ])
    def test_labels(self, growth, label):
        assert trend_label(growth) == label


class TestBestBucketAndTarget:
    """Best month and target tracking."""

    def test_best_bucket(self):
        assert best_bucket(["2024-01", "2024-02"], [10.0, 30.0]) == ("2024-02", 30.0)

    def test_earliest_wins_ties(self):
        assert best_bucket(["2024-01", "2024-02"], [30.0, 30.0]) == ("2024-01", 30.0)

    def test_empty(self):
        assert best_bucket([], []) == ("", 0.0)

    def test_performance_vs_target(self):
        assert performance_vs_target([25000.0, 50000.0, 75000.0], 50000.0) == 100.0
        assert performance_vs_target([1000.0], 0.0) == 0.0
