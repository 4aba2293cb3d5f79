#!/usr/bin/env python3
"""
Basic Usage Example - CRM Analytics Engine

This script demonstrates the basic usage of the analytics engine on a
small in-memory snapshot. It shows how to:
- Initialize the engine, with or without a brokerage profile
- Compute a report for a period and optional filters
- Read revenue, projection, funnel and email metrics
- Serialize the report to JSON for a dashboard or an export

Run: python examples/basic_usage.py
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from crm_analytics.engine import AnalyticsEngine
from crm_analytics.logging import configure_logging
from crm_analytics.models.report import AnalyticsReport


def days_ago(days: int) -> str:
    """ISO timestamp ``days`` days before now."""
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


def create_sample_snapshot() -> Dict[str, Any]:
    """Create a snapshot with the storage field names."""
    return {
        "contacts": [
            {"identifiant": 1, "prenom": "Marie", "nom": "Durand", "statut": "Client",
             "date_creation": days_ago(120)},
            {"identifiant": 2, "prenom": "Paul", "nom": "Martin", "statut": "Prospect",
             "date_creation": days_ago(40)},
            {"identifiant": 3, "prenom": "Lea", "nom": "Bernard", "statut": "Prospect",
             "date_creation": days_ago(5)},
        ],
        "projets": [
            {"projet_id": 10, "contact_id": 1, "statut": "Contrat signé", "commercial": "Alice",
             "origine": "FB Ads", "date_creation": days_ago(100)},
            {"projet_id": 11, "contact_id": 2, "statut": "Devis envoyé", "commercial": "Bob",
             "origine": "Site web", "date_creation": days_ago(35)},
            {"projet_id": 12, "contact_id": 3, "statut": "Nouveau", "commercial": "Alice",
             "origine": "Parrainage", "date_creation": days_ago(3)},
        ],
        "contrats": [
            {"projet_id": 10, "contrat_compagnie": "Alptis", "contrat_produit": "Santé Pro",
             "prime_brute_annuelle": 1800, "prime_brute_mensuelle": 150,
             "commissionnement_annee1": 540, "commissionnement_autres_annees": 180,
             "contrat_date_creation": days_ago(80)},
            {"projet_id": 10, "contrat_compagnie": "April", "contrat_produit": "Prévoyance TNS",
             "prime_brute_annuelle": 2400, "prime_brute_mensuelle": 200,
             "commissionnement_annee1": 480, "commissionnement_autres_annees": 240,
             "contrat_date_creation": days_ago(50)},
            {"projet_id": 11, "contrat_compagnie": "Alptis", "contrat_produit": "Santé Pro",
             "prime_brute_annuelle": 900, "prime_brute_mensuelle": 75,
             "commissionnement_annee1": 135, "commissionnement_autres_annees": 90,
             "contrat_date_creation": days_ago(10)},
        ],
        "campaigns": [
            {"id": "c1", "name": "Newsletter", "type": "newsletter", "sent": 1200,
             "delivered": 1160, "opens": 290, "clicks": 41, "unsubscribes": 6,
             "bounces": 40, "complaints": 1, "sentDate": days_ago(20)},
        ],
    }


def print_report(report: AnalyticsReport) -> None:
    """Print the headline figures of a report."""
    print(f"📊 Period {report.period} (cutoff: {report.cutoff or 'none'})")
    print(f"  Contracts: {report.contract_count} / Projects: {report.project_count}")
    print(f"  Total premium: {report.total_premium:.2f}")
    print(f"  Year-1 commission: {report.total_commission_year1:.2f}")
    print(f"  Conversion rate: {report.conversion_rate:.1f}%")
    print(f"  Global margin: {report.global_margin:.1f}%")
    print(f"  Portfolio valuation: {report.portfolio_valuation:.2f}")
    print(f"  Projected annual revenue: {report.projected_annual_revenue:.2f}")
    print(f"  Revenue growth: {report.revenue_growth:.1f}% ({report.trend})")
    print(f"  Email health: {report.health_score}/100 ({report.health_status})")

    print(f"  Monthly evolution:")
    for point in report.monthly_evolution:
        print(f"    {point.period}: {point.revenue:.2f} ({point.contracts} contracts)")

    print(f"  Top companies:")
    for group in report.top_companies:
        print(f"    {group.key}: {group.sum_premium:.2f}")
    print("-" * 50)


def main():
    """Main demo function."""
    configure_logging(level="INFO")

    print("🚀 CRM Analytics Engine - Basic Usage Demo")
    print("=" * 60)

    print("1. Initializing the analytics engine...")
    engine = AnalyticsEngine()
    print(f"   Default period: {engine.config.window.default_period}")
    print()

    snapshot = create_sample_snapshot()

    print("2. Computing reports for several periods...")
    for period in ("1m", "3m", "ytd"):
        print_report(engine.compute(snapshot, period=period))
    print()

    print("3. Filtering on one agent...")
    print_report(engine.compute(snapshot, period="6m", agent="Alice"))
    print()

    print("4. Using a brokerage profile...")
    paris = AnalyticsEngine(profile="cabinet-paris")
    print_report(paris.compute(snapshot))
    print()

    print("5. JSON output for downstream consumers...")
    payload = engine.compute(snapshot, period="all").to_json()
    print(f"   {len(payload)} bytes, starts with {payload[:60]!r}")


if __name__ == "__main__":
    main()
