"""Span projection for reservations that do not align to the hour grid.

A reservation is drawn once, in the cell where it starts, with a top offset
and a height expressed as percentages of one cell. The height is not
clipped; renderers let the element overflow into the following cells.
"""

from datetime import date, datetime, tzinfo

from roomgrid.domain.models import Reservation, SpanInfo
from roomgrid.engine.intervals import duration_minutes


def _local(instant: datetime, tz: tzinfo) -> datetime:
    return instant.astimezone(tz)


def _past_the_hour(instant: datetime) -> bool:
    return (instant.minute, instant.second, instant.microsecond) != (0, 0, 0)


def starts_in_cell(reservation: Reservation, day: date, hour: int, tz: tzinfo) -> bool:
    """Check if the cell (day, hour) is the visual start of a reservation."""
    start = _local(reservation.start, tz)
    return start.date() == day and start.hour == hour


def project_span(
    reservation: Reservation,
    day: date,
    cell_hour: int,
    tz: tzinfo,
) -> SpanInfo:
    """Compute the visual span of a reservation starting in (day, cell_hour).

    Only meaningful when ``starts_in_cell`` holds for the same cell.

    Args:
        reservation: Reservation to project.
        day: Calendar day of the starting cell.
        cell_hour: Hour of the starting cell.
        tz: Timezone the grid is rendered in.

    Returns:
        SpanInfo with offset and height in percent of a cell, and the
        number of cells covered. A reservation ending exactly on the hour
        does not count that hour's cell.
    """
    start = _local(reservation.start, tz)
    end = _local(reservation.end, tz)

    top_offset_percent = (start.minute / 60) * 100
    height_percent = (duration_minutes(start, end) / 60) * 100

    end_hour = (end.date() - day).days * 24 + end.hour
    spanned = (end_hour - cell_hour) + (1 if _past_the_hour(end) else 0)

    return SpanInfo(
        top_offset_percent=top_offset_percent,
        height_percent=height_percent,
        spanned_cell_count=max(1, spanned),
    )
