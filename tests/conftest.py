"""Pytest configuration and shared fixtures."""

import pytest
from typing import Dict, Any
from datetime import datetime, timezone

from crm_analytics.config.defaults import get_default_config
from crm_analytics.data.normalizer import DataNormalizer


NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for window and bucket tests."""
    return NOW


@pytest.fixture
def default_config():
    """Default analytics configuration."""
    return get_default_config()


@pytest.fixture
def sample_contacts() -> list[Dict[str, Any]]:
    """Contact rows as returned by the data-access layer."""
    return [
        {"identifiant": 1, "prenom": "Marie", "nom": "Durand", "statut": "Client",
         "date_creation": "2024-01-10T09:00:00Z"},
        {"identifiant": 2, "prenom": "Paul", "nom": "Martin", "statut": "Prospect",
         "date_creation": "2024-05-02T09:00:00Z"},
        {"identifiant": 3, "prenom": "Lea", "nom": "Bernard", "statut": "Prospect",
         "date_creation": "2024-06-01T09:00:00Z"},
        {"identifiant": 4, "prenom": "Hugo", "nom": "Petit", "statut": "Inactif",
         "date_creation": "2023-02-01T09:00:00Z"},
    ]


@pytest.fixture
def sample_projects() -> list[Dict[str, Any]]:
    """Project rows, one per sales opportunity."""
    return [
        {"projet_id": 10, "contact_id": 1, "statut": "Contrat signé", "commercial": "Alice",
         "origine": "FB Ads", "type": "Santé", "date_creation": "2024-03-01T10:00:00Z"},
        {"projet_id": 11, "contact_id": 2, "statut": "Devis envoyé", "commercial": "Bob",
         "origine": "Site web", "type": "Prévoyance", "date_creation": "2024-04-20T10:00:00Z"},
        {"projet_id": 12, "contact_id": 3, "statut": "Nouveau", "commercial": "Alice",
         "origine": "fb-lead", "type": "Santé", "date_creation": "2024-05-25T10:00:00Z"},
        {"projet_id": 13, "contact_id": 4, "statut": "Perdu", "commercial": "Bob",
         "origine": None, "type": "Auto", "date_creation": "2023-01-15T10:00:00Z"},
    ]


@pytest.fixture
def sample_contracts() -> list[Dict[str, Any]]:
    """Contract rows linked to the sample projects."""
    return [
        {"projet_id": 10, "contact_id": 1, "contrat_compagnie": "Alptis",
         "contrat_produit": "Santé Pro", "contrat_statut": "Actif", "commercial": "Alice",
         "prime_brute_annuelle": 1200, "prime_brute_mensuelle": 100,
         "commissionnement_annee1": 360, "commissionnement_autres_annees": 120,
         "contrat_date_creation": "2024-04-05T10:00:00Z"},
        {"projet_id": 10, "contact_id": 1, "contrat_compagnie": "April",
         "contrat_produit": "Prévoyance TNS", "contrat_statut": "Actif", "commercial": "Alice",
         "prime_brute_annuelle": "2400,00", "prime_brute_mensuelle": 200,
         "commissionnement_annee1": 480, "commissionnement_autres_annees": 240,
         "contrat_date_creation": "2024-05-12T10:00:00Z"},
        {"projet_id": 11, "contact_id": 2, "contrat_compagnie": "Alptis",
         "contrat_produit": "Santé Pro", "contrat_statut": "Actif", "commercial": "Bob",
         "prime_brute_annuelle": 600, "prime_brute_mensuelle": 50,
         "commissionnement_annee1": 90, "commissionnement_autres_annees": 60,
         "contrat_date_creation": "2024-06-03T10:00:00Z"},
    ]


@pytest.fixture
def sample_campaigns() -> list[Dict[str, Any]]:
    """Email campaign rows."""
    return [
        {"id": "c1", "name": "Newsletter mai", "type": "newsletter", "sent": 1000,
         "delivered": 960, "opens": 250, "clicks": 30, "unsubscribes": 5, "bounces": 40,
         "complaints": 1, "sentDate": "2024-05-10T08:00:00Z"},
        {"id": "c2", "name": "Offre santé", "type": "promotional", "sent": 500,
         "delivered": 490, "opens": 80, "clicks": 12, "unsubscribes": 4, "bounces": 10,
         "complaints": 0, "sentDate": "2024-06-05T08:00:00Z"},
    ]


@pytest.fixture
def sample_snapshot(sample_contacts, sample_projects, sample_contracts,
                    sample_campaigns) -> Dict[str, Any]:
    """Raw snapshot with every collection under its storage key."""
    return {
        "contacts": sample_contacts,
        "projets": sample_projects,
        "contrats": sample_contracts,
        "campaigns": sample_campaigns,
    }


@pytest.fixture
def normalized_snapshot(sample_snapshot):
    """Sample snapshot after normalization."""
    return DataNormalizer().normalize_snapshot(sample_snapshot)
