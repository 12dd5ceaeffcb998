"""Unit tests for the record model and response envelopes."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from tests.fakes import entry_payload, metadata_payload
from utils.schemas import ENTRY_FIELDS, Entry, MetadataResponse, PlainResponse


class TestEntry:
    """Test Entry validation."""

    def test_valid_entry(self):
        entry = Entry.model_validate(entry_payload(1))

        assert entry.disasterNumber == 4001
        assert entry.placeName == "County 1"
        assert entry.designatedDate == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert entry.updateDate.microsecond == 123000
        assert entry.designatedDate.tzinfo is not None

    def test_field_order(self):
        assert ENTRY_FIELDS == (
            "disasterNumber",
            "programTypeCode",
            "programTypeDescription",
            "stateCode",
            "placeCode",
            "placeName",
            "designatedDate",
            "entryDate",
            "updateDate",
            "hash",
            "lastRefresh",
            "id",
        )

    @pytest.mark.parametrize("field", ["disasterNumber", "placeName", "designatedDate", "id"])
    def test_missing_field_rejected(self, field):
        payload = entry_payload(1)
        del payload[field]

        with pytest.raises(ValidationError):
            Entry.model_validate(payload)

    def test_mistyped_number_rejected(self):
        payload = entry_payload(1)
        payload["disasterNumber"] = "4001"

        with pytest.raises(ValidationError):
            Entry.model_validate(payload)

    def test_mistyped_string_rejected(self):
        payload = entry_payload(1)
        payload["stateCode"] = 48

        with pytest.raises(ValidationError):
            Entry.model_validate(payload)

    def test_naive_timestamp_rejected(self):
        payload = entry_payload(1)
        payload["entryDate"] = "2024-03-02T12:30:00"

        with pytest.raises(ValidationError):
            Entry.model_validate(payload)

    def test_immutable(self):
        entry = Entry.model_validate(entry_payload(1))

        with pytest.raises(ValidationError):
            entry.placeName = "Elsewhere"


class TestEnvelopes:
    """Test MetadataResponse and PlainResponse."""

    def test_metadata_response(self):
        body = {
            "metadata": metadata_payload(2500),
            "FemaWebDeclarationAreas": [entry_payload(0), entry_payload(1)],
        }
        response = MetadataResponse.model_validate(body)

        assert response.metadata.count == 2500
        assert response.metadata.DeprecationInformation["depDate"] is None
        assert [e.disasterNumber for e in response.entries] == [4000, 4001]

    def test_metadata_response_requires_metadata(self):
        with pytest.raises(ValidationError):
            MetadataResponse.model_validate({"FemaWebDeclarationAreas": []})

    def test_plain_response_without_metadata(self):
        response = PlainResponse.model_validate({"FemaWebDeclarationAreas": []})
        assert response.entries == []

    def test_plain_response_requires_entries_field(self):
        with pytest.raises(ValidationError):
            PlainResponse.model_validate({"items": []})

    def test_metadata_count_must_be_integer(self):
        metadata = metadata_payload(10)
        metadata["count"] = "10"

        with pytest.raises(ValidationError):
            MetadataResponse.model_validate(
                {"metadata": metadata, "FemaWebDeclarationAreas": []}
            )
