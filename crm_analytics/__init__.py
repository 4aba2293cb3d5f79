"""
CRM Analytics - Commission and Revenue Analytics Core

Derives commission totals, conversion rates, funnel counts, per-entity
rollups, time-bucketed evolution series, projections and email-campaign
health metrics from snapshots of contacts, projects, contracts and
campaigns for an insurance-brokerage CRM.
"""

__version__ = "0.1.0"
__author__ = "CRM Analytics Team"
