"""
Record parsers for converting raw CRM rows to normalized objects.

This module handles parsing of the rows returned by the data-access layer
(storage field names such as ``prime_brute_annuelle``) into canonical data
structures. Field-level problems never raise: amounts default to 0.0,
labels to None and dates to None. Only a row that is not a mapping at all
is rejected, since that is a caller contract violation.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional

import orjson

from ..errors import MalformedDataError
from ..utils.time import coerce_timestamp
from .models import Contact, Contract, EmailCampaign, Project


# Amounts above this magnitude are treated as corrupt
MAX_AMOUNT = 1e15


class ParseError(Exception):
    """Raised when a JSON snapshot cannot be decoded."""
    pass


def parse_amount(value: Any) -> float:
    """
    Coerce a monetary field to a finite float.

    None, blanks, booleans, unparseable strings, NaN, infinities and
    magnitudes beyond MAX_AMOUNT all count as 0.0. Numeric strings are
    accepted, with a comma or a dot as decimal separator.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, str):
        text = value.strip().replace(" ", "").replace(",", ".")
        if not text:
            return 0.0
        try:
            value = float(text)
        except ValueError:
            return 0.0

    if not isinstance(value, (int, float)):
        return 0.0

    try:
        amount = float(value)
    except OverflowError:
        return 0.0
    if math.isnan(amount) or abs(amount) > MAX_AMOUNT:
        return 0.0
    return amount


def parse_count(value: Any) -> int:
    """Coerce a counter field to a non-negative integer, 0 when invalid."""
    amount = parse_amount(value)
    if amount <= 0:
        return 0
    return int(amount)


def parse_label(value: Any) -> Optional[str]:
    """Trimmed text, or None for missing and blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_identifier(value: Any) -> Optional[str]:
    """
    Normalize a record identifier to text.

    Storage returns ids as integers or strings depending on the table, so
    both ``12`` and ``"12"`` normalize to ``"12"``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        if value.is_integer():
            value = int(value)
    return parse_label(value)


def _first_present(raw: Mapping, *keys: str) -> Any:
    """First value among ``keys`` that is not None."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _first_timestamp(raw: Mapping, *keys: str):
    """First of ``keys`` holding a parseable timestamp."""
    for key in keys:
        ts = coerce_timestamp(raw.get(key))
        if ts is not None:
            return ts
    return None


def _require_mapping(raw: Any, record_type: str) -> Mapping:
    if not isinstance(raw, Mapping):
        raise MalformedDataError(
            f"{record_type} record must be a mapping, got {type(raw).__name__}",
            raw_data=repr(raw)[:100],
            expected_format="mapping",
            context={"record_type": record_type},
        )
    return raw


def parse_contact(raw: Mapping[str, Any]) -> Contact:
    """Parse a contact row."""
    raw = _require_mapping(raw, "contact")
    return Contact(
        id=parse_identifier(_first_present(raw, "identifiant", "id")),
        first_name=parse_label(raw.get("prenom")),
        last_name=parse_label(raw.get("nom")),
        email=parse_label(raw.get("email")),
        status=parse_label(raw.get("statut")),
        created_at=_first_timestamp(raw, "date_creation", "created_at"),
    )


def parse_project(raw: Mapping[str, Any]) -> Project:
    """Parse a project row."""
    raw = _require_mapping(raw, "project")
    return Project(
        id=parse_identifier(_first_present(raw, "projet_id", "id")),
        contact_id=parse_identifier(raw.get("contact_id")),
        status=parse_label(raw.get("statut")),
        agent=parse_label(raw.get("commercial")),
        origin=parse_label(raw.get("origine")),
        project_type=parse_label(raw.get("type")),
        created_at=_first_timestamp(raw, "date_creation", "created_at"),
    )


def parse_contract(raw: Mapping[str, Any]) -> Contract:
    """
    Parse a contract row.

    The contract creation date wins over the generic row timestamp.
    """
    raw = _require_mapping(raw, "contract")
    return Contract(
        project_id=parse_identifier(raw.get("projet_id")),
        contact_id=parse_identifier(raw.get("contact_id")),
        company=parse_label(raw.get("contrat_compagnie")),
        product=parse_label(raw.get("contrat_produit")),
        status=parse_label(raw.get("contrat_statut")),
        agent=parse_label(raw.get("commercial")),
        annual_premium=parse_amount(raw.get("prime_brute_annuelle")),
        monthly_premium=parse_amount(raw.get("prime_brute_mensuelle")),
        commission_year1=parse_amount(raw.get("commissionnement_annee1")),
        commission_recurring=parse_amount(raw.get("commissionnement_autres_annees")),
        created_at=_first_timestamp(raw, "contrat_date_creation", "created_at"),
    )


def parse_campaign(raw: Mapping[str, Any]) -> EmailCampaign:
    """Parse an email campaign row from the email provider export."""
    raw = _require_mapping(raw, "campaign")
    return EmailCampaign(
        id=parse_identifier(raw.get("id")),
        name=parse_label(raw.get("name")),
        campaign_type=parse_label(_first_present(raw, "type", "campaign_type")),
        sent=parse_count(raw.get("sent")),
        delivered=parse_count(raw.get("delivered")),
        opens=parse_count(raw.get("opens")),
        clicks=parse_count(raw.get("clicks")),
        unsubscribes=parse_count(raw.get("unsubscribes")),
        bounces=parse_count(raw.get("bounces")),
        complaints=parse_count(raw.get("complaints")),
        sent_at=_first_timestamp(raw, "sentDate", "sent_at", "created_at"),
    )


def parse_json_payload(raw_data: str | bytes) -> dict[str, Any]:
    """
    Parse a raw JSON snapshot into a dictionary.

    Args:
        raw_data: JSON text or bytes

    Returns:
        Parsed dictionary

    Raises:
        ParseError: If the payload is not valid JSON or not an object
    """
    try:
        payload = orjson.loads(raw_data)
    except orjson.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ParseError(f"Snapshot must be a JSON object, got {type(payload).__name__}")

    return payload
