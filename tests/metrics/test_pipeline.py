"""Tests for funnel, pipeline stage and project-keyed metrics."""

from datetime import datetime, timezone

from crm_analytics.config.defaults import FunnelParams
from crm_analytics.data.models import Contact, Contract, Project
from crm_analytics.metrics.pipeline import (
    agent_performance, average_conversion_days, link_contracts, normalize_origin,
    origin_performance, pipeline_evolution, pipeline_stages, revenue_funnel, segment_contacts,
    stage_funnel
)


def _ts(month, day=1):
    return datetime(2024, month, day, tzinfo=timezone.utc)


PROJECTS = (
    Project(id="1", status="Contrat signé", agent="Alice", origin="FB Ads", created_at=_ts(3)),
    Project(id="2", status="Devis envoyé", agent="Bob", origin="Site web", created_at=_ts(4)),
    Project(id="3", status="Nouveau", agent="Alice", origin="fb-lead", created_at=_ts(5)),
    Project(id="4", status="Perdu", agent=None, origin=None),
)

CONTRACTS = (
    Contract(project_id="1", annual_premium=1200.0, created_at=_ts(3, 11)),
    Contract(project_id="1", annual_premium=2400.0, created_at=_ts(3, 21)),
    Contract(project_id="2", annual_premium=600.0, created_at=_ts(4, 5)),
    Contract(project_id="99", annual_premium=5000.0, created_at=_ts(4, 5)),
    Contract(project_id=None, annual_premium=700.0),
)


class TestLinking:
    """Contracts linked to their selected parent project."""

    def test_orphans_excluded(self):
        linked = link_contracts(PROJECTS, CONTRACTS)

        assert set(linked) == {"1", "2"}
        assert len(linked["1"]) == 2


class TestFunnels:
    """Contact segmentation and funnels."""

    def test_segmentation_and_revenue_funnel(self):
        contacts = [Contact(status="Prospect"), Contact(status="Prospect"),
                    Contact(status="Client"), Contact(status="Inactif"), Contact()]

        segmentation = segment_contacts(contacts, FunnelParams())
        funnel = revenue_funnel(segmentation, project_count=4, contract_count=5)

        assert (segmentation.prospects, segmentation.clients, segmentation.inactive) == (2, 1, 1)
        assert segmentation.total == 5
        assert [(s.name, s.value) for s in funnel] == [
            ("Prospects", 2), ("Projects", 4), ("Contracts", 5), ("Clients", 1)
        ]

    def test_pipeline_stages(self):
        stages = pipeline_stages(PROJECTS, link_contracts(PROJECTS, CONTRACTS), FunnelParams())
        by_stage = {s.stage: s for s in stages}

        assert by_stage["Gagné"].count == 1
        assert by_stage["Gagné"].value == 3600.0
        assert by_stage["Proposition"].value == 600.0
        assert by_stage["Nouveau"].count == 1
        assert by_stage["Perdu"].count == 1
        assert by_stage["Closing"].count == 0

    def test_stage_funnel_skips_empty_and_lost(self):
        params = FunnelParams()
        stages = pipeline_stages(PROJECTS, link_contracts(PROJECTS, CONTRACTS), params)

        funnel = stage_funnel(stages, params.lost_stages)

        assert [s.name for s in funnel] == ["Nouveau", "Proposition", "Gagné"]


class TestPerformance:
    """Per-agent and per-origin views."""

    def test_agent_performance(self):
        rows = agent_performance(PROJECTS, link_contracts(PROJECTS, CONTRACTS))

        assert [r.agent for r in rows] == ["Alice", "Bob", "unspecified"]
        alice = rows[0]
        assert (alice.projects, alice.contracts, alice.revenue) == (2, 2, 3600.0)
        assert alice.conversion_rate == 100.0

    def test_origin_aliases(self):
        params = FunnelParams()

        assert normalize_origin("FB Ads", params.origin_aliases, "unspecified") == "Facebook"
        assert normalize_origin("Salon", params.origin_aliases, "unspecified") == "Salon"
        assert normalize_origin(None, params.origin_aliases, "unspecified") == "unspecified"

    def test_origin_performance(self):
        rows = origin_performance(PROJECTS, link_contracts(PROJECTS, CONTRACTS), FunnelParams())
        by_origin = {r.origin: r for r in rows}

        assert rows[0].origin == "Facebook"
        assert by_origin["Facebook"].total == 2
        assert by_origin["Facebook"].converted == 1
        assert by_origin["Facebook"].conversion_rate == 50.0
        assert by_origin["Site web"].revenue == 600.0

    def test_average_conversion_days(self):
        """Dated contracts of dated, selected projects only."""
        assert average_conversion_days(PROJECTS, CONTRACTS) == (10 + 20 + 4) / 3

    def test_empty_inputs(self):
        assert agent_performance((), {}) == ()
        assert average_conversion_days((), ()) == 0.0


class TestPipelineEvolution:
    """Trailing monthly series of new projects and signed contracts."""

    def test_twelve_months_with_gaps_filled(self, now):
        months = pipeline_evolution(PROJECTS, CONTRACTS, now)

        assert [m.period for m in months][:2] == ["2023-07", "2023-08"]
        assert months[-1].period == "2024-06"
        assert len(months) == 12
        by_month = {m.period: m for m in months}
        assert (by_month["2024-03"].new_projects, by_month["2024-03"].signed_contracts) == (1, 2)
        assert by_month["2024-03"].revenue == 3600.0
        assert by_month["2024-04"].signed_contracts == 2
        assert by_month["2024-05"].signed_contracts == 0
        assert (by_month["2023-07"].new_projects, by_month["2023-07"].revenue) == (0, 0.0)

    def test_undated_records_are_not_placed(self, now):
        months = pipeline_evolution(PROJECTS, CONTRACTS, now)

        assert sum(m.new_projects for m in months) == 3
        assert sum(m.signed_contracts for m in months) == 4

    def test_window_length_and_month_end(self):
        months = pipeline_evolution((), (), datetime(2024, 3, 31, tzinfo=timezone.utc), months=2)

        assert [m.period for m in months] == ["2024-02", "2024-03"]
        assert pipeline_evolution((), (), datetime(2024, 3, 31, tzinfo=timezone.utc), months=0) == ()
