"""Tests for cell classification."""

from datetime import date, datetime, timezone

import pytest

from roomgrid.domain.models import (
    CellStatus,
    Coverage,
    OperatingWindow,
    Reservation,
    ReservationStatus,
    Resource,
)
from roomgrid.engine.cache import CoverageCache
from roomgrid.engine.classifier import SlotClassifier

DAY = date(2024, 1, 15)


def at(hour, minute=0, day=DAY):
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def booking(id, start, end, status=ReservationStatus.CONFIRMED):
    return Reservation(
        id=id, resource_id="R1", user_id="U1", title=id, start=start, end=end, status=status
    )


class TestSlotClassifier:
    """Tests for SlotClassifier.classify_cell."""

    @pytest.fixture
    def classifier(self):
        return SlotClassifier()

    @pytest.fixture
    def room(self):
        return Resource(id="R1", name="Everest", capacity=8)

    @pytest.fixture
    def locked_room(self):
        return Resource(id="R1", name="Board Room", locked_to_companies=frozenset({"acme"}))

    @pytest.fixture
    def window(self):
        return OperatingWindow(8, 18)

    @pytest.fixture
    def now(self):
        """Monday 07:00, before every business hour of the day."""
        return at(7)

    def classify(self, classifier, room, hour, reservations, window, company, now):
        return classifier.classify_cell(room, DAY, hour, reservations, window, company, now)

    def test_empty_cell_available(self, classifier, room, window, now):
        """A free cell inside opening hours is available."""
        result = self.classify(classifier, room, 9, [], window, None, now)
        assert result.status == CellStatus.AVAILABLE
        assert result.coverage == Coverage.NONE
        assert result.is_actionable is True
        assert result.is_inspectable is False

    def test_past_beats_available(self, classifier, room, window):
        """A cell that started before now is past."""
        result = self.classify(classifier, room, 9, [], window, None, at(9, 1))
        assert result.status == CellStatus.PAST
        assert result.is_actionable is False

    def test_cell_starting_now_is_not_past(self, classifier, room, window):
        """A cell starting exactly at now is still bookable."""
        result = self.classify(classifier, room, 9, [], window, None, at(9))
        assert result.status == CellStatus.AVAILABLE

    def test_past_beats_fully_booked(self, classifier, room, window):
        """Past takes precedence over reservations."""
        reservations = [booking("b1", at(9), at(10))]
        result = self.classify(classifier, room, 9, reservations, window, None, at(12))
        assert result.status == CellStatus.PAST
        assert result.coverage == Coverage.FULL
        assert result.is_inspectable is False

    def test_fully_booked(self, classifier, room, window, now):
        """Full coverage gives fully-booked."""
        reservations = [booking("b1", at(9), at(10))]
        result = self.classify(classifier, room, 9, reservations, window, None, now)
        assert result.status == CellStatus.FULLY_BOOKED
        assert result.is_actionable is False
        assert result.is_inspectable is True

    def test_partially_booked(self, classifier, room, window, now):
        """Partial coverage gives partially-booked, which stays actionable."""
        reservations = [booking("b1", at(9), at(9, 30))]
        result = self.classify(classifier, room, 9, reservations, window, None, now)
        assert result.status == CellStatus.PARTIALLY_BOOKED
        assert result.is_actionable is True
        assert [r.id for r in result.reservations] == ["b1"]

    def test_fully_booked_beats_outside_hours(self, classifier, room, window, now):
        """A booking outside opening hours is still shown as booked."""
        reservations = [booking("b1", at(19), at(20))]
        result = self.classify(classifier, room, 19, reservations, window, None, now)
        assert result.status == CellStatus.FULLY_BOOKED

    def test_partially_booked_beats_restricted(self, classifier, locked_room, window, now):
        """Reservations take precedence over company locks."""
        reservations = [booking("b1", at(9), at(9, 30))]
        result = self.classify(classifier, locked_room, 9, reservations, window, "other", now)
        assert result.status == CellStatus.PARTIALLY_BOOKED

    def test_outside_hours(self, classifier, room, window, now):
        """Hours before opening or from closing on are outside-hours."""
        assert self.classify(classifier, room, 18, [], window, None, now).status == (
            CellStatus.OUTSIDE_HOURS
        )
        assert self.classify(classifier, room, 17, [], window, None, now).status == (
            CellStatus.AVAILABLE
        )

    def test_outside_hours_beats_restricted(self, classifier, locked_room, window, now):
        """A locked room outside its hours is outside-hours."""
        result = self.classify(classifier, locked_room, 20, [], window, "other", now)
        assert result.status == CellStatus.OUTSIDE_HOURS

    def test_restricted_for_other_company(self, classifier, locked_room, window, now):
        """A locked room is restricted for other companies."""
        result = self.classify(classifier, locked_room, 9, [], window, "other", now)
        assert result.status == CellStatus.RESTRICTED
        assert result.is_actionable is False

    def test_restricted_without_company(self, classifier, locked_room, window, now):
        """A requester without a company cannot book a locked room."""
        result = self.classify(classifier, locked_room, 9, [], window, None, now)
        assert result.status == CellStatus.RESTRICTED

    def test_locked_room_available_to_member(self, classifier, locked_room, window, now):
        """Members of the locking company see the room as available."""
        result = self.classify(classifier, locked_room, 9, [], window, "acme", now)
        assert result.status == CellStatus.AVAILABLE

    def test_cancelled_reservation_leaves_cell_available(self, classifier, room, window, now):
        """A cancelled reservation does not occupy the cell."""
        reservations = [booking("b1", at(9), at(10), status=ReservationStatus.CANCELLED)]
        result = self.classify(classifier, room, 9, reservations, window, None, now)
        assert result.status == CellStatus.AVAILABLE
        assert result.reservations == ()

    def test_span_attached_to_start_cell_only(self, classifier, room, window, now):
        """Spans appear only in the cell where the reservation starts."""
        reservations = [booking("b1", at(14, 30), at(16))]
        first = self.classify(classifier, room, 14, reservations, window, None, now)
        second = self.classify(classifier, room, 15, reservations, window, None, now)

        assert first.span.top_offset_percent == 50
        assert first.span.height_percent == 150
        assert first.span.spanned_cell_count == 2
        assert second.spans == ()
        assert second.span is None
        assert second.status == CellStatus.FULLY_BOOKED

    def test_cached_result_matches_uncached(self, room, window, now):
        """Classification with a cache equals the uncached result."""
        reservations = [booking("b1", at(9), at(9, 30)), booking("b2", at(10), at(11))]
        plain = SlotClassifier()
        cached = SlotClassifier(cache=CoverageCache())

        for hour in range(8, 18):
            for _ in range(2):
                assert cached.classify_cell(
                    room, DAY, hour, reservations, window, None, now, version=1
                ) == plain.classify_cell(room, DAY, hour, reservations, window, None, now)
        assert cached.cache.hits == 10
        assert cached.cache.misses == 10


class TestCoverageCache:
    """Tests for CoverageCache."""

    def test_new_version_drops_entries(self):
        """Switching versions invalidates every entry."""
        cache = CoverageCache()
        reservations = [booking("b1", at(9), at(10))]
        assert cache.coverage(1, "R1", at(9), at(10), reservations) == Coverage.FULL
        assert len(cache) == 1

        assert cache.coverage(2, "R1", at(9), at(10), []) == Coverage.NONE
        assert cache.version == 2
        assert len(cache) == 1

    def test_reset(self):
        """reset empties the cache."""
        cache = CoverageCache()
        cache.coverage(1, "R1", at(9), at(10), [])
        cache.reset()
        assert len(cache) == 0
        assert cache.version is None
