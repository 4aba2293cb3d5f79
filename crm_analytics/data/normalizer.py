"""
Snapshot normalization for converting raw CRM collections to canonical records.

This module provides the DataNormalizer class that turns the collections
returned by the data-access layer into an immutable DataSnapshot.
"""

from collections.abc import Callable, Mapping
from typing import Any

from ..errors import MalformedDataError, MissingDataError
from ..logging.config import get_logger
from .models import DataSnapshot
from .parsers import (
    parse_campaign,
    parse_contact,
    parse_contract,
    parse_json_payload,
    parse_project,
)

logger = get_logger(__name__)


# Collection name -> accepted snapshot keys, storage name first
COLLECTION_KEYS = {
    "contacts": ("contacts",),
    "projects": ("projets", "projects"),
    "contracts": ("contrats", "contracts"),
    "campaigns": ("campaigns", "campagnes"),
}

DATE_FIELDS = {
    "contacts": "created_at",
    "projects": "created_at",
    "contracts": "created_at",
    "campaigns": "sent_at",
}


class DataNormalizer:
    """
    Normalization pipeline for CRM snapshots.

    Handles the flow from raw rows to normalized records. Field-level
    defaults are applied by the parsers; this class only rejects
    collections that are not lists.
    """

    def __init__(self) -> None:
        self.parsers: dict[str, Callable[[Any], Any]] = {
            "contacts": parse_contact,
            "projects": parse_project,
            "contracts": parse_contract,
            "campaigns": parse_campaign,
        }

    def normalize_snapshot(self, raw: Mapping[str, Any]) -> DataSnapshot:
        """
        Normalize a raw snapshot mapping.

        Args:
            raw: Mapping with ``contacts``, ``projets``/``projects``,
                ``contrats``/``contracts`` and ``campaigns`` lists; missing
                collections are treated as empty

        Returns:
            Immutable DataSnapshot

        Raises:
            MissingDataError: If no snapshot is given
            MalformedDataError: If the snapshot or one of its collections
                has the wrong shape
        """
        if isinstance(raw, DataSnapshot):
            return raw

        if raw is None:
            raise MissingDataError("Snapshot is required for analytics", data_type="snapshot")

        if not isinstance(raw, Mapping):
            raise MalformedDataError(
                f"Snapshot must be a mapping, got {type(raw).__name__}",
                expected_format="mapping",
            )

        collections = {}
        undated = {}

        for name, keys in COLLECTION_KEYS.items():
            rows = self._get_collection(raw, name, keys)
            records = tuple(self.parsers[name](row) for row in rows)
            collections[name] = records
            undated[name] = sum(1 for record in records if getattr(record, DATE_FIELDS[name]) is None)

        if any(undated.values()):
            logger.debug("Undated records in snapshot", **{f"undated_{k}": v for k, v in undated.items()})

        return DataSnapshot(**collections)

    def normalize_json(self, raw_data: str | bytes) -> DataSnapshot:
        """Decode a JSON snapshot and normalize it."""
        return self.normalize_snapshot(parse_json_payload(raw_data))

    def _get_collection(self, raw: Mapping[str, Any], name: str, keys: tuple[str, ...]) -> list:
        """Fetch one collection under any of its accepted keys."""
        for key in keys:
            if key in raw and raw[key] is not None:
                rows = raw[key]
                if not isinstance(rows, (list, tuple)):
                    raise MalformedDataError(
                        f"Collection '{key}' must be a list, got {type(rows).__name__}",
                        expected_format="list",
                        context={"collection": name},
                    )
                return list(rows)
        return []
