"""Slot classification for individual grid cells.

Combines past/future status, existing reservations, operating hours, and
company locks into exactly one status per (resource, day, hour) cell.
"""

from collections.abc import Sequence
from datetime import date, datetime, tzinfo
from typing import Optional

from roomgrid.domain.models import (
    CellClassification,
    CellStatus,
    Coverage,
    OperatingWindow,
    Reservation,
    ReservationSpan,
    Resource,
)
from roomgrid.domain.policies import AccessPolicy, CompanyLockPolicy
from roomgrid.engine.cache import CoverageCache
from roomgrid.engine.coverage import active_reservations, classify_coverage
from roomgrid.engine.intervals import cell_bounds
from roomgrid.engine.spans import project_span, starts_in_cell


class SlotClassifier:
    """Classifies grid cells.

    Precedence, first match wins:
    1. Cell starts before ``now``: past
    2. Coverage FULL: fully-booked
    3. Coverage PARTIAL: partially-booked
    4. Hour outside the effective window: outside-hours
    5. Room locked to other companies: restricted
    6. Otherwise: available
    """

    def __init__(
        self,
        access_policy: Optional[AccessPolicy] = None,
        cache: Optional[CoverageCache] = None,
    ):
        self.access_policy = access_policy or CompanyLockPolicy()
        self.cache = cache

    def classify_cell(
        self,
        resource: Resource,
        day: date,
        hour: int,
        reservations: Sequence[Reservation],
        effective_window: OperatingWindow,
        requester_company_id: Optional[str],
        now: datetime,
        tz: Optional[tzinfo] = None,
        version: Optional[int] = None,
    ) -> CellClassification:
        """Classify one cell.

        Args:
            resource: Room of the cell.
            day: Calendar day of the cell.
            hour: Hour of the cell (0-23).
            reservations: Snapshot of reservations for the pass.
            effective_window: Resolved operating hours of the room.
            requester_company_id: Company of the viewer, if any.
            now: Current instant.
            tz: Timezone of the grid; defaults to the timezone of ``now``.
            version: Snapshot version, enables the coverage cache.

        Returns:
            CellClassification with status, coverage, overlapping
            reservations and spans of reservations starting in the cell.
        """
        tz = tz or now.tzinfo
        cell_start, cell_end = cell_bounds(day, hour, tz)

        occupying = tuple(
            active_reservations(resource.id, cell_start, cell_end, reservations)
        )
        spans = tuple(
            ReservationSpan(r, project_span(r, day, hour, tz))
            for r in occupying
            if starts_in_cell(r, day, hour, tz)
        )
        coverage = self._coverage(
            resource.id, cell_start, cell_end, reservations, version
        )

        if cell_start < now:
            status = CellStatus.PAST
        elif coverage == Coverage.FULL:
            status = CellStatus.FULLY_BOOKED
        elif coverage == Coverage.PARTIAL:
            status = CellStatus.PARTIALLY_BOOKED
        elif not effective_window.contains_hour(hour):
            status = CellStatus.OUTSIDE_HOURS
        elif not self.access_policy.can_book(resource, requester_company_id):
            status = CellStatus.RESTRICTED
        else:
            status = CellStatus.AVAILABLE

        return CellClassification(
            status=status,
            coverage=coverage,
            reservations=occupying,
            spans=spans,
        )

    def _coverage(
        self,
        resource_id: str,
        cell_start: datetime,
        cell_end: datetime,
        reservations: Sequence[Reservation],
        version: Optional[int],
    ) -> Coverage:
        if self.cache is not None and version is not None:
            return self.cache.coverage(
                version, resource_id, cell_start, cell_end, reservations
            )
        return classify_coverage(resource_id, cell_start, cell_end, reservations)
