"""
Error handling tests for the analytics pipeline.

Tests cover the error hierarchy, snapshot contract violations and the
recovery of field-level problems with defaults.
"""

import math
import pytest

from crm_analytics.engine import AnalyticsEngine
from crm_analytics.errors import (
    ConfigurationError,
    DataQualityError,
    MalformedDataError,
    MetricsCalculationError,
    MissingDataError,
    SystemFailureError,
)


class TestErrorClassification:
    """Test error classification system."""

    def test_data_quality_error_hierarchy(self):
        """Data quality errors are recoverable and carry context."""
        base_error = DataQualityError("base error")
        assert base_error.recoverable is True
        assert base_error.context == {}

        missing_error = MissingDataError("missing data", data_type="snapshot")
        assert isinstance(missing_error, DataQualityError)
        assert missing_error.data_type == "snapshot"

        malformed_error = MalformedDataError("bad shape", raw_data="[1]", expected_format="mapping",
                                             context={"collection": "contracts"})
        assert isinstance(malformed_error, DataQualityError)
        assert malformed_error.expected_format == "mapping"
        assert malformed_error.context == {"collection": "contracts"}

    def test_system_failure_hierarchy(self):
        """System failures are not recoverable."""
        calc_error = MetricsCalculationError("nan", metric_name="global_margin",
                                             calculation_input={"premium": 0})
        assert isinstance(calc_error, SystemFailureError)
        assert calc_error.recoverable is False
        assert calc_error.metric_name == "global_margin"

        config_error = ConfigurationError("invalid", errors=["x"], profile_id="cabinet-lyon")
        assert isinstance(config_error, SystemFailureError)
        assert config_error.errors == ["x"]
        assert config_error.profile_id == "cabinet-lyon"


class TestFieldLevelRecovery:
    """Per-field problems never raise."""

    def test_garbage_fields_default_to_zero(self, now):
        snapshot = {
            "projets": [{"projet_id": "p1", "commercial": None}],
            "contrats": [
                {"projet_id": "p1", "prime_brute_annuelle": "n/a",
                 "commissionnement_annee1": float("nan"),
                 "commissionnement_autres_annees": float("inf"),
                 "contrat_date_creation": "31/02/2024"},
                {"projet_id": "p1", "prime_brute_annuelle": None},
            ],
            "campaigns": [{"id": "x", "sent": "lots", "delivered": None}],
        }

        report = AnalyticsEngine().compute(snapshot, period="1m", now=now)

        assert report.contract_count == 2
        assert report.total_premium == 0.0
        assert report.total_commission_year1 == 0.0
        assert report.global_margin == 0.0
        assert report.conversion_rate == 200.0
        assert report.health_score == 25
        for value in (report.recurring_potential, report.customer_lifetime_value,
                      report.revenue_growth, report.email_rates.open_rate):
            assert math.isfinite(value)

    def test_overflowing_amounts_recover(self, now):
        snapshot = {"contrats": [
            {"prime_brute_annuelle": 10 ** 400, "commissionnement_annee1": 1e308},
            {"prime_brute_annuelle": 1e308, "commissionnement_annee1": 120},
            {"prime_brute_annuelle": 500},
        ]}

        report = AnalyticsEngine().compute(snapshot, period="all", now=now)

        assert report.contract_count == 3
        assert report.total_premium == 500.0
        assert report.total_commission_year1 == 120.0
        assert math.isfinite(report.projected_annual_revenue)

    def test_unknown_period_does_not_raise(self, sample_snapshot, now):
        report = AnalyticsEngine().compute(sample_snapshot, period="last-quarter", now=now)

        assert report.period == "all"
        assert report.contract_count == 3


class TestContractViolations:
    """Wrong shapes are rejected."""

    @pytest.mark.parametrize("snapshot", [
        {"contacts": "not a list"},
        {"projets": {"projet_id": 1}},
        {"campaigns": 42},
    ])
    def test_non_list_collection(self, snapshot):
        with pytest.raises(MalformedDataError):
            AnalyticsEngine().compute(snapshot, period="all")

    def test_non_mapping_row(self):
        with pytest.raises(MalformedDataError):
            AnalyticsEngine().compute({"contrats": ["row"]}, period="all")

    def test_missing_snapshot(self):
        with pytest.raises(MissingDataError):
            AnalyticsEngine().compute(None)
