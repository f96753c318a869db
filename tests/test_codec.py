"""Tests for snapshot JSON files."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from roomgrid.data.codec import (
    SnapshotFormatError,
    load_snapshot_file,
    reservation_from_dict,
    resource_from_dict,
    save_snapshot_file,
    settings_from_dict,
    source_from_dict,
)
from roomgrid.domain.models import ReservationStatus


@pytest.fixture
def document():
    return {
        "settings": {"openingHour": 9, "closingHour": 17},
        "resources": [
            {
                "id": "r1",
                "name": "Everest",
                "capacity": 8,
                "amenities": ["projector", "whiteboard"],
                "openingHour": 7,
                "closingHour": None,
                "lockedToCompanies": ["acme"],
            },
            {"id": "r2", "name": "Denali", "lockedToCompanyId": "globex"},
        ],
        "reservations": [
            {
                "id": "b1",
                "roomId": "r1",
                "userId": "u1",
                "title": "Standup",
                "startTime": "2024-01-15T09:00:00Z",
                "endTime": "2024-01-15T09:30:00+00:00",
                "status": "cancelled",
                "attendees": ["a@example.com"],
                "externalGuests": [{"name": "Visitor", "company": "Partner Ltd"}],
            }
        ],
    }


class TestSnapshotCodec:
    """Tests for converting snapshot documents."""

    def test_source_from_dict(self, document):
        """A full document yields rooms, reservations and settings."""
        source = source_from_dict(document)

        assert source.settings.opening_hour == 9
        everest, denali = source.resources
        assert everest.amenities == ("projector", "whiteboard")
        assert everest.opening_hour == 7
        assert everest.closing_hour is None
        assert everest.locked_to_companies == frozenset({"acme"})
        assert denali.locked_to_companies == frozenset({"globex"})
        assert denali.capacity == 0

        reservation = source.reservations[0]
        assert reservation.resource_id == "r1"
        assert reservation.status == ReservationStatus.CANCELLED
        assert reservation.start == datetime(2024, 1, 15, 9, tzinfo=timezone.utc)
        assert reservation.external_guests[0].company == "Partner Ltd"

    def test_offsets_preserved(self):
        """Instants keep their UTC offset."""
        reservation = reservation_from_dict(
            {
                "id": "b1", "roomId": "r1",
                "startTime": "2024-01-15T09:00:00+02:00",
                "endTime": "2024-01-15T10:00:00+02:00",
            }
        )
        assert reservation.start.utcoffset() == timedelta(hours=2)
        assert reservation.status == ReservationStatus.CONFIRMED

    def test_naive_instant_rejected(self):
        """Instants without an offset are ambiguous and rejected."""
        with pytest.raises(SnapshotFormatError, match="no UTC offset"):
            reservation_from_dict(
                {"id": "b1", "roomId": "r1",
                 "startTime": "2024-01-15T09:00:00", "endTime": "2024-01-15T10:00:00"}
            )

    def test_missing_field(self):
        with pytest.raises(SnapshotFormatError, match="roomId"):
            reservation_from_dict({"id": "b1", "startTime": "x", "endTime": "y"})

    def test_unknown_status(self):
        with pytest.raises(SnapshotFormatError, match="unknown status"):
            reservation_from_dict(
                {"id": "b1", "roomId": "r1", "status": "tentative",
                 "startTime": "2024-01-15T09:00:00Z", "endTime": "2024-01-15T10:00:00Z"}
            )

    def test_invalid_hour(self):
        """Hours must be within 0-23."""
        with pytest.raises(SnapshotFormatError, match="openingHour"):
            resource_from_dict({"id": "r1", "name": "Everest", "openingHour": 24})

    @pytest.mark.parametrize("capacity", [None, "8", -1, True])
    def test_invalid_capacity(self, capacity):
        """Capacity must be a non-negative integer."""
        with pytest.raises(SnapshotFormatError, match="Resource r1: invalid capacity"):
            resource_from_dict({"id": "r1", "name": "Everest", "capacity": capacity})

    def test_company_lock_must_be_list(self):
        """A bare string is not read as a set of single-letter companies."""
        with pytest.raises(SnapshotFormatError, match="lockedToCompanies must be a list"):
            resource_from_dict({"id": "r1", "name": "Everest", "lockedToCompanies": "acme"})

    def test_external_guest_must_be_object(self):
        """Guest entries that are not objects name the reservation."""
        with pytest.raises(SnapshotFormatError, match="Reservation b1: external guest"):
            reservation_from_dict(
                {"id": "b1", "roomId": "r1", "externalGuests": ["Jane"],
                 "startTime": "2024-01-15T09:00:00Z", "endTime": "2024-01-15T10:00:00Z"}
            )

    def test_record_must_be_object(self):
        with pytest.raises(SnapshotFormatError, match="must be an object"):
            resource_from_dict("r1")

    def test_missing_settings(self):
        assert settings_from_dict(None) is None
        assert settings_from_dict({}) is None

    def test_not_an_object(self):
        with pytest.raises(SnapshotFormatError):
            source_from_dict([])


class TestSnapshotFiles:
    """Tests for reading and writing snapshot files."""

    def test_save_and_load(self, document, tmp_path):
        """A saved source loads back to the same records."""
        source = source_from_dict(document)
        path = tmp_path / "snapshot.json"
        save_snapshot_file(source, path)

        loaded = load_snapshot_file(path)
        assert loaded.resources == source.resources
        assert loaded.reservations == source.reservations
        assert loaded.settings == source.settings

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotFormatError, match="invalid JSON"):
            load_snapshot_file(path)

    def test_document_without_settings(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps({"resources": [], "reservations": []}))
        assert load_snapshot_file(path).settings is None
