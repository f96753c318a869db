"""Tests for grid building."""

from datetime import date, datetime, timedelta, timezone

import pytest

from roomgrid.domain.models import (
    CellStatus,
    DateRange,
    OperatingWindow,
    Reservation,
    Resource,
)
from roomgrid.domain.policies import DefaultOperatingHoursPolicy
from roomgrid.engine.cache import CoverageCache
from roomgrid.engine.grid import GridBuilder, build_grid

MONDAY = date(2024, 1, 15)


def at(hour, minute=0, day=MONDAY):
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def resources():
    return [
        Resource(id="R1", name="Everest", capacity=8),
        Resource(id="R2", name="Denali", capacity=4, opening_hour=7, closing_hour=20),
        Resource(id="R3", name="Fuji", capacity=6, locked_to_companies=frozenset({"acme"})),
    ]


@pytest.fixture
def reservations():
    return [
        Reservation(
            id="b1", resource_id="R1", user_id="U1", title="Planning",
            start=at(14, 30), end=at(16),
        ),
        Reservation(
            id="b2", resource_id="R2", user_id="U2", title="Standup",
            start=at(9, 0, MONDAY + timedelta(days=1)),
            end=at(9, 30, MONDAY + timedelta(days=1)),
        ),
    ]


@pytest.fixture
def now():
    """Sunday evening before the window starts."""
    return at(20, 0, MONDAY - timedelta(days=1))


class TestGridBuilder:
    """Tests for GridBuilder."""

    def test_grid_is_dense(self, resources, reservations, now):
        """Every (resource, day, hour) cell is present."""
        grid = build_grid(
            resources, reservations, DateRange(MONDAY), OperatingWindow(8, 18), None, now
        )
        assert grid.cell_count == len(resources) * 7 * len(grid.hours)
        for day in grid.dates:
            for hour in grid.hours:
                for resource in resources:
                    assert grid.cell(resource.id, day, hour).hour == hour

    def test_hours_cover_all_windows(self, resources, now):
        """Rows run from the earliest opening to the latest closing."""
        grid = build_grid(resources, [], DateRange(MONDAY), OperatingWindow(8, 18), None, now)
        assert grid.hours == list(range(7, 20))

    def test_full_day(self, resources, now):
        """full_day shows all 24 hours."""
        grid = GridBuilder().build_grid(
            resources, [], DateRange(MONDAY, days=1), OperatingWindow(8, 18), None, now,
            full_day=True,
        )
        assert grid.hours == list(range(24))

    def test_fallback_hours_without_settings(self, now):
        """Without global settings, room overrides or not, 08-18 applies."""
        grid = build_grid(
            [Resource(id="R1", name="Everest")], [], DateRange(MONDAY, days=1), None, None, now
        )
        assert grid.hours == list(range(8, 18))
        assert grid.windows["R1"] == OperatingWindow(8, 18)

    def test_fallback_hours_without_resources(self, now):
        """An empty room list still yields the fallback hours."""
        builder = GridBuilder(hours_policy=DefaultOperatingHoursPolicy(9, 17))
        grid = builder.build_grid([], [], DateRange(MONDAY, days=1), None, None, now)
        assert grid.hours == list(range(9, 17))
        assert grid.cell_count == 0

    def test_per_room_windows(self, resources, now):
        """Each room is classified against its own effective window."""
        grid = build_grid(resources, [], DateRange(MONDAY), OperatingWindow(8, 18), "acme", now)
        assert grid.cell("R1", MONDAY, 7).status == CellStatus.OUTSIDE_HOURS
        assert grid.cell("R2", MONDAY, 7).status == CellStatus.AVAILABLE
        assert grid.cell("R2", MONDAY, 19).status == CellStatus.AVAILABLE
        assert grid.cell("R1", MONDAY, 19).status == CellStatus.OUTSIDE_HOURS

    def test_cells_classified(self, resources, reservations, now):
        """Cells reflect reservations and locks."""
        grid = build_grid(
            resources, reservations, DateRange(MONDAY), OperatingWindow(8, 18), None, now
        )
        assert grid.cell("R1", MONDAY, 14).status == CellStatus.PARTIALLY_BOOKED
        assert grid.cell("R1", MONDAY, 15).status == CellStatus.FULLY_BOOKED
        assert grid.cell("R1", MONDAY, 14).classification.span.spanned_cell_count == 2
        assert grid.cell("R2", MONDAY + timedelta(days=1), 9).status == (
            CellStatus.PARTIALLY_BOOKED
        )
        assert grid.cell("R3", MONDAY, 10).status == CellStatus.RESTRICTED

    def test_past_cells(self, resources):
        """Cells before now are past, the rest are not."""
        now = at(12, 30)
        grid = build_grid(resources, [], DateRange(MONDAY), OperatingWindow(8, 18), None, now)
        assert grid.cell("R1", MONDAY, 12).status == CellStatus.PAST
        assert grid.cell("R1", MONDAY, 13).status == CellStatus.AVAILABLE

    def test_rows_for_day(self, resources, now):
        """Rows are in hour order with cells in resource order."""
        grid = build_grid(resources, [], DateRange(MONDAY), OperatingWindow(8, 18), None, now)
        rows = grid.rows_for(MONDAY)
        assert [hour for hour, _ in rows] == grid.hours
        assert [c.resource_id for c in rows[0][1]] == ["R1", "R2", "R3"]

    def test_counts_include_every_status(self, resources, now):
        """counts reports every status and adds up to the cell count."""
        grid = build_grid(resources, [], DateRange(MONDAY), OperatingWindow(8, 18), None, now)
        counts = grid.counts()
        assert set(counts) == set(CellStatus)
        assert sum(counts.values()) == grid.cell_count

    def test_cached_build_matches_uncached(self, resources, reservations, now):
        """A cached build is identical to an uncached one."""
        args = (resources, reservations, DateRange(MONDAY), OperatingWindow(8, 18), None, now)
        cached = GridBuilder(cache=CoverageCache())

        first = cached.build_grid(*args, version=1)
        second = cached.build_grid(*args, version=1)
        plain = GridBuilder().build_grid(*args)

        assert first.cells == plain.cells
        assert second.cells == plain.cells
        assert cached.classifier.cache.hits == plain.cell_count

    def test_grid_in_other_timezone(self, now):
        """Cells are laid out on the requested wall clock."""
        tz = timezone(timedelta(hours=-5))
        reservation = Reservation(
            id="b1", resource_id="R1", user_id="U1", title="Call",
            start=at(14), end=at(15),  # 09:00-10:00 at UTC-5
        )
        grid = build_grid(
            [Resource(id="R1", name="Everest")], [reservation], DateRange(MONDAY, days=1),
            OperatingWindow(8, 18), None, now, tz=tz,
        )
        assert grid.cell("R1", MONDAY, 9).status == CellStatus.FULLY_BOOKED
        assert grid.cell("R1", MONDAY, 14).status == CellStatus.AVAILABLE
        assert grid.local(reservation.start).hour == 9
