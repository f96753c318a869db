"""Domain models for the room reservation grid.

This module contains all core data structures used throughout the engine,
including rooms, reservations, operating windows, and the grid output.
Every object here is a value object owned by the pass that created it.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Optional

# Used when neither the room nor the global settings define hours.
FALLBACK_OPENING_HOUR = 8
FALLBACK_CLOSING_HOUR = 18

# The calendar always shows one week.
WINDOW_DAYS = 7


class ReservationStatus(Enum):
    """Lifecycle state of a reservation."""

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Coverage(Enum):
    """How much of a one-hour cell is occupied by active reservations."""

    NONE = "none"
    PARTIAL = "partial"
    FULL = "full"


class CellStatus(Enum):
    """Classification of a single grid cell.

    Declared in precedence order: the first status that applies wins.
    """

    PAST = "past"
    FULLY_BOOKED = "fully-booked"
    PARTIALLY_BOOKED = "partially-booked"
    OUTSIDE_HOURS = "outside-hours"
    RESTRICTED = "restricted"
    AVAILABLE = "available"


@dataclass(frozen=True)
class Resource:
    """A bookable meeting room.

    Attributes:
        id: Unique identifier for the room.
        name: Display name.
        capacity: Number of people the room holds.
        amenities: Ordered amenity tags (e.g. "projector").
        opening_hour: Room-specific opening hour, None to use the global one.
        closing_hour: Room-specific closing hour, None to use the global one.
        locked_to_companies: Companies that may exclusively book the room.
            Empty means the room is open to everyone.
    """

    id: str
    name: str
    capacity: int = 0
    amenities: tuple[str, ...] = ()
    opening_hour: Optional[int] = None
    closing_hour: Optional[int] = None
    locked_to_companies: frozenset[str] = frozenset()

    @property
    def is_locked(self) -> bool:
        """True if only specific companies may book this room."""
        return bool(self.locked_to_companies)

    def allows_company(self, company_id: Optional[str]) -> bool:
        """Check if members of a company may book this room."""
        if not self.locked_to_companies:
            return True
        return company_id in self.locked_to_companies


@dataclass(frozen=True)
class ExternalGuest:
    """A visitor from outside the park attached to a reservation."""

    name: str
    email: str = ""
    company: str = ""


@dataclass(frozen=True)
class Reservation:
    """A time-bounded occupancy of a room.

    ``start`` and ``end`` are timezone-aware. ``end > start`` is guaranteed
    by the booking service and is not re-validated by the engine.
    """

    id: str
    resource_id: str
    user_id: str
    title: str
    start: datetime
    end: datetime
    description: str = ""
    status: ReservationStatus = ReservationStatus.CONFIRMED
    attendees: tuple[str, ...] = ()
    external_guests: tuple[ExternalGuest, ...] = ()

    @property
    def is_active(self) -> bool:
        """Cancelled reservations behave as if they did not exist."""
        return self.status == ReservationStatus.CONFIRMED

    @property
    def duration_minutes(self) -> float:
        """Length of the reservation in minutes."""
        return (self.end - self.start).total_seconds() / 60.0

    def __repr__(self) -> str:
        return (
            f"Reservation({self.id} {self.resource_id}: "
            f"{self.start.strftime('%Y-%m-%d %H:%M')}-{self.end.strftime('%H:%M')}, "
            f"{self.status.value})"
        )


@dataclass(frozen=True)
class OperatingWindow:
    """Resolved [opening_hour, closing_hour) pair in local wall-clock hours."""

    opening_hour: int = FALLBACK_OPENING_HOUR
    closing_hour: int = FALLBACK_CLOSING_HOUR

    def contains_hour(self, hour: int) -> bool:
        """Check if a one-hour cell starting at ``hour`` is inside the window."""
        return self.opening_hour <= hour < self.closing_hour

    @property
    def hours(self) -> list[int]:
        """Hours of the day covered by the window."""
        return list(range(self.opening_hour, self.closing_hour))

    def __repr__(self) -> str:
        return f"OperatingWindow({self.opening_hour:02d}:00-{self.closing_hour:02d}:00)"


@dataclass(frozen=True)
class SpanInfo:
    """Visual placement of a reservation relative to its starting cell.

    Attributes:
        top_offset_percent: Offset from the top of the cell, in [0, 100).
        height_percent: Height as a percentage of one cell; may exceed 100.
        spanned_cell_count: Number of grid cells the reservation covers.
    """

    top_offset_percent: float
    height_percent: float
    spanned_cell_count: int


@dataclass(frozen=True)
class ReservationSpan:
    """A reservation paired with its span in the cell where it starts."""

    reservation: Reservation
    span: SpanInfo


@dataclass(frozen=True)
class CellClassification:
    """Result of classifying one (resource, day, hour) cell.

    Attributes:
        status: One of the six mutually exclusive cell statuses.
        coverage: Coverage of the cell by active reservations.
        reservations: Active reservations overlapping the cell.
        spans: Spans for reservations whose visual start is this cell.
    """

    status: CellStatus
    coverage: Coverage = Coverage.NONE
    reservations: tuple[Reservation, ...] = ()
    spans: tuple[ReservationSpan, ...] = ()

    @property
    def span(self) -> Optional[SpanInfo]:
        """Span of the first reservation starting in this cell, if any."""
        if not self.spans:
            return None
        return self.spans[0].span

    @property
    def is_actionable(self) -> bool:
        """True if the requester can click the cell to book something."""
        return self.status in (CellStatus.AVAILABLE, CellStatus.PARTIALLY_BOOKED)

    @property
    def is_inspectable(self) -> bool:
        """True if the cell shows existing reservations that can be opened."""
        return self.status != CellStatus.PAST and bool(self.reservations)


@dataclass(frozen=True)
class DateRange:
    """A window of consecutive calendar days starting at ``start``.

    The end date is exclusive.
    """

    start: date
    days: int = WINDOW_DAYS

    @classmethod
    def today(cls, now: datetime, days: int = WINDOW_DAYS) -> "DateRange":
        """Create the range starting on the calendar day of ``now``."""
        return cls(start=now.date(), days=days)

    @property
    def end(self) -> date:
        """First date after the range."""
        return self.start + timedelta(days=self.days)

    @property
    def dates(self) -> list[date]:
        """All dates in the range."""
        return [self.start + timedelta(days=i) for i in range(self.days)]

    def next(self) -> "DateRange":
        """The following window of the same length."""
        return DateRange(self.start + timedelta(days=self.days), self.days)

    def previous(self) -> "DateRange":
        """The preceding window of the same length."""
        return DateRange(self.start - timedelta(days=self.days), self.days)

    def range_bounds(self, tz: tzinfo) -> tuple[datetime, datetime]:
        """Aware instants bounding the range in the given timezone."""
        return (
            datetime.combine(self.start, time(0), tzinfo=tz),
            datetime.combine(self.end, time(0), tzinfo=tz),
        )

    def __contains__(self, d: date) -> bool:
        return self.start <= d < self.end


@dataclass(frozen=True)
class RequesterContext:
    """Read-only description of who is looking at the grid."""

    user_id: Optional[str] = None
    company_id: Optional[str] = None
    role: str = "user"

    def owns(self, reservation: Reservation) -> bool:
        """Check if the requester created the reservation."""
        return self.user_id is not None and reservation.user_id == self.user_id


@dataclass(frozen=True)
class GridCell:
    """One classified cell of the rendered grid."""

    resource_id: str
    day: date
    hour: int
    classification: CellClassification

    @property
    def status(self) -> CellStatus:
        return self.classification.status


@dataclass
class GridModel:
    """Dense (day x hour x resource) matrix ready for rendering.

    Attributes:
        date_range: Days covered by the grid.
        hours: Hours of the day shown as rows.
        resources: Rooms shown as columns, in display order.
        windows: Effective operating window per resource id.
        cells: Mapping of (resource_id, day, hour) to classified cells.
        generated_at: The ``now`` used for past/future decisions.
        tz: Timezone the cells are laid out in.
    """

    date_range: DateRange
    hours: list[int]
    resources: list[Resource]
    windows: dict[str, OperatingWindow] = field(default_factory=dict)
    cells: dict[tuple[str, date, int], GridCell] = field(default_factory=dict)
    generated_at: Optional[datetime] = None
    tz: Optional[tzinfo] = None

    def local(self, instant: datetime) -> datetime:
        """Convert an instant to the grid's wall clock."""
        if self.tz is None:
            return instant
        return instant.astimezone(self.tz)

    @property
    def dates(self) -> list[date]:
        return self.date_range.dates

    def cell(self, resource_id: str, day: date, hour: int) -> GridCell:
        """Get the cell for a resource at a day and hour."""
        return self.cells[(resource_id, day, hour)]

    def rows_for(self, day: date) -> list[tuple[int, list[GridCell]]]:
        """Get (hour, cells in resource order) rows for one day."""
        return [
            (hour, [self.cells[(r.id, day, hour)] for r in self.resources])
            for hour in self.hours
        ]

    def counts(self) -> dict[CellStatus, int]:
        """Count cells per status."""
        result = {status: 0 for status in CellStatus}
        for grid_cell in self.cells.values():
            result[grid_cell.status] += 1
        return result

    def bookable_cells(self) -> list[GridCell]:
        """Cells a requester can click to create a reservation."""
        return [
            c for c in self.cells.values() if c.classification.is_actionable
        ]

    @property
    def cell_count(self) -> int:
        return len(self.cells)
