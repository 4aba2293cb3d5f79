"""
Main analytics engine coordinator.

Orchestrates one analytics invocation: configuration loading and
validation, snapshot normalization, period/dimension selection, metric
calculation and report assembly.
"""

from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from .config.loader import ConfigLoader, build_config
from .config.validation import ConfigValidator
from .data.models import DataSnapshot
from .data.normalizer import DataNormalizer
from .errors import ConfigurationError
from .logging.config import get_logger, get_pipeline_logger, log_report_summary
from .metrics.calculator import AnalyticsCalculator
from .models.report import AnalyticsReport
from .selection import select_window

logger = get_logger(__name__)
pipeline_logger = get_pipeline_logger(__name__)

SnapshotInput = Union[DataSnapshot, Mapping[str, Any]]


class AnalyticsEngine:
    """
    Main coordinator for CRM analytics.

    Manages the pipeline:
    Raw snapshot → Normalization → Selection → Metrics → Report

    The engine holds only immutable configuration; every call recomputes
    the report from the snapshot it is given.
    """

    def __init__(
        self,
        config_dir: Optional[Union[str, Path]] = None,
        profile: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the analytics engine.

        Args:
            config_dir: Directory holding ``analytics.yaml``; defaults to the
                repository ``config`` directory
            profile: Brokerage profile to apply over the defaults
            overrides: Per-engine overrides applied over the profile

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        self.logger = logger
        self.profile = profile

        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        merged = self.config_loader.merge_config(profile, overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            self.logger.error(
                "Invalid analytics configuration",
                profile=profile,
                errors=[f"{error.field}: {error.message}" for error in errors],
            )
            raise ConfigurationError(
                f"Invalid configuration: {len(errors)} error(s)",
                errors=errors,
                profile_id=profile,
            )

        self.config = build_config(merged)
        self.normalizer = DataNormalizer()
        self.calculator = AnalyticsCalculator(self.config)

        self.logger.info("Analytics engine initialized", profile=profile)

    def compute(
        self,
        snapshot: SnapshotInput,
        period: Optional[str] = None,
        agent: Optional[str] = None,
        campaign_type: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AnalyticsReport:
        """
        Compute the analytics report of a snapshot.

        Args:
            snapshot: Normalized DataSnapshot or raw mapping of collections
            period: Period code; defaults to ``window.default_period``
            agent: Commercial agent filter, "all"/None for every agent
            campaign_type: Campaign type filter, "all"/None for every type
            now: Reference time, defaults to wall-clock UTC

        Returns:
            Immutable AnalyticsReport
        """
        data = self.normalizer.normalize_snapshot(snapshot)
        if period is None:
            period = self.config.window.default_period

        selection = select_window(
            data,
            period,
            now=now,
            agent=agent,
            campaign_type=campaign_type,
            params=self.config.window,
        )
        report = self.calculator.calculate(selection)

        log_report_summary(
            pipeline_logger,
            report.period,
            {
                "contacts": report.contact_count,
                "projects": report.project_count,
                "contracts": report.contract_count,
                "campaigns": report.campaign_count,
            },
            context={"agent": report.agent, "campaign_type": report.campaign_type,
                     "profile": self.profile},
        )
        return report

    def compute_json(self, payload: Union[str, bytes], **kwargs: Any) -> AnalyticsReport:
        """Decode a JSON snapshot and compute its report."""
        return self.compute(self.normalizer.normalize_json(payload), **kwargs)


def compute_analytics(
    snapshot: SnapshotInput,
    period: Optional[str] = None,
    agent: Optional[str] = None,
    campaign_type: Optional[str] = None,
    now: Optional[datetime] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> AnalyticsReport:
    """Compute a report with the default configuration plus optional overrides."""
    engine = AnalyticsEngine(overrides=overrides)
    return engine.compute(snapshot, period=period, agent=agent,
                          campaign_type=campaign_type, now=now)
