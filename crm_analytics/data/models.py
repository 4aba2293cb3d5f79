"""
Canonical data models for normalized CRM records.

This module defines immutable data structures that represent clean records
after normalization from the storage field names. Amounts are always floats
(missing values already replaced by 0.0), labels are None when absent and
timestamps are aware UTC datetimes or None when unknown.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Contact:
    """A person or company known to the brokerage."""
    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    status: Optional[str] = None            # Prospect, Client, Inactif, ...
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Project:
    """A sales opportunity attached to a contact."""
    id: Optional[str] = None
    contact_id: Optional[str] = None
    status: Optional[str] = None            # Free-form funnel stage
    agent: Optional[str] = None             # Assigned commercial agent
    origin: Optional[str] = None            # Lead source
    project_type: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Contract:
    """A signed insurance contract and its financial fields."""
    project_id: Optional[str] = None
    contact_id: Optional[str] = None
    company: Optional[str] = None           # Insurer
    product: Optional[str] = None
    status: Optional[str] = None
    agent: Optional[str] = None
    annual_premium: float = 0.0
    monthly_premium: float = 0.0
    commission_year1: float = 0.0
    commission_recurring: float = 0.0
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class EmailCampaign:
    """Delivery and engagement counters of one email campaign."""
    id: Optional[str] = None
    name: Optional[str] = None
    campaign_type: Optional[str] = None     # newsletter, promotional, ...
    sent: int = 0
    delivered: int = 0
    opens: int = 0
    clicks: int = 0
    unsubscribes: int = 0
    bounces: int = 0
    complaints: int = 0
    sent_at: Optional[datetime] = None


@dataclass(frozen=True)
class DataSnapshot:
    """Read-only snapshot of the collections an analytics run works on."""
    contacts: tuple[Contact, ...] = ()
    projects: tuple[Project, ...] = ()
    contracts: tuple[Contract, ...] = ()
    campaigns: tuple[EmailCampaign, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when no collection holds a record."""
        return not (self.contacts or self.projects or self.contracts or self.campaigns)

    def counts(self) -> dict[str, int]:
        """Record count per collection."""
        return {
            "contacts": len(self.contacts),
            "projects": len(self.projects),
            "contracts": len(self.contracts),
            "campaigns": len(self.campaigns),
        }
