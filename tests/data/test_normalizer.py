"""Tests for snapshot normalization."""

import pytest

from crm_analytics.data.models import DataSnapshot
from crm_analytics.data.normalizer import DataNormalizer
from crm_analytics.data.parsers import ParseError
from crm_analytics.errors import MalformedDataError, MissingDataError


class TestDataNormalizer:
    """Test suite for DataNormalizer."""

    def setup_method(self):
        self.normalizer = DataNormalizer()

    def test_storage_keys(self, sample_snapshot):
        """French storage keys map to the canonical collections."""
        snapshot = self.normalizer.normalize_snapshot(sample_snapshot)

        assert snapshot.counts() == {"contacts": 4, "projects": 4, "contracts": 3, "campaigns": 2}
        assert all(isinstance(p.id, str) for p in snapshot.projects)

    def test_english_keys(self, sample_projects, sample_contracts):
        snapshot = self.normalizer.normalize_snapshot({
            "projects": sample_projects,
            "contracts": sample_contracts,
        })

        assert len(snapshot.projects) == 4
        assert len(snapshot.contracts) == 3
        assert snapshot.contacts == ()

    def test_missing_collections_are_empty(self):
        snapshot = self.normalizer.normalize_snapshot({})

        assert snapshot.is_empty
        assert snapshot.campaigns == ()

    def test_null_collection_is_empty(self):
        snapshot = self.normalizer.normalize_snapshot({"contrats": None})
        assert snapshot.contracts == ()

    def test_snapshot_passes_through(self, normalized_snapshot):
        assert self.normalizer.normalize_snapshot(normalized_snapshot) is normalized_snapshot

    def test_non_list_collection_rejected(self):
        with pytest.raises(MalformedDataError) as exc_info:
            self.normalizer.normalize_snapshot({"contrats": {"prime_brute_annuelle": 10}})

        assert exc_info.value.context["collection"] == "contracts"
        assert exc_info.value.recoverable is True

    def test_non_mapping_snapshot_rejected(self):
        with pytest.raises(MalformedDataError):
            self.normalizer.normalize_snapshot([1, 2, 3])

    def test_input_not_mutated(self, sample_snapshot):
        before = repr(sample_snapshot)
        self.normalizer.normalize_snapshot(sample_snapshot)
        assert repr(sample_snapshot) == before

    def test_normalize_json(self):
        snapshot = self.normalizer.normalize_json(
            b'{"contrats": [{"projet_id": 1, "prime_brute_annuelle": "1200"}]}'
        )

        assert isinstance(snapshot, DataSnapshot)
        assert snapshot.contracts[0].annual_premium == 1200.0
        assert snapshot.contracts[0].project_id == "1"

    def test_normalize_json_invalid(self):
        with pytest.raises(ParseError):
            self.normalizer.normalize_json("{")

    def test_missing_snapshot_rejected(self):
        with pytest.raises(MissingDataError) as exc_info:
            self.normalizer.normalize_snapshot(None)

        assert exc_info.value.data_type == "snapshot"
