"""Coverage analysis for a single grid cell.

Decides whether the active reservations of a room leave a one-hour cell
uncovered, partially covered, or covered without gaps.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from roomgrid.domain.models import Coverage, Reservation
from roomgrid.engine.intervals import clamp, is_empty, overlaps

logger = logging.getLogger(__name__)


def active_reservations(
    resource_id: str,
    start: datetime,
    end: datetime,
    reservations: Iterable[Reservation],
) -> list[Reservation]:
    """Get confirmed reservations of a room that overlap [start, end).

    Degenerate reservations are skipped. The result is ordered by
    reservation start, then by id.
    """
    result = []
    for reservation in reservations:
        if reservation.resource_id != resource_id or not reservation.is_active:
            continue
        if is_empty(reservation.start, reservation.end):
            logger.debug("Skipping degenerate reservation %s", reservation.id)
            continue
        if overlaps(reservation.start, reservation.end, start, end):
            result.append(reservation)

    result.sort(key=lambda r: (r.start, r.id))
    return result


def classify_coverage(
    resource_id: str,
    cell_start: datetime,
    cell_end: datetime,
    reservations: Iterable[Reservation],
) -> Coverage:
    """Classify how completely a cell is covered by active reservations.

    Args:
        resource_id: Room the cell belongs to.
        cell_start: Start of the cell (inclusive).
        cell_end: End of the cell (exclusive).
        reservations: Snapshot of reservations; any room, any status.

    Returns:
        NONE if nothing overlaps, FULL if the union of the overlapping
        reservations leaves no gap, PARTIAL otherwise.
    """
    occupying = active_reservations(resource_id, cell_start, cell_end, reservations)
    if not occupying:
        return Coverage.NONE

    window = (cell_start, cell_end)
    clamped = sorted(
        ((clamp((r.start, r.end), window), r.id) for r in occupying),
        key=lambda item: (item[0][0], item[1]),
    )

    covered_until = cell_start
    for (start, end), _ in clamped:
        if start > covered_until:
            return Coverage.PARTIAL
        covered_until = max(covered_until, end)

    if covered_until >= cell_end:
        return Coverage.FULL
    return Coverage.PARTIAL
