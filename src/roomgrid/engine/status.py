"""Current/upcoming summary for a single room, as shown on door displays."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from roomgrid.domain.models import Reservation, Resource
from roomgrid.engine.intervals import is_empty


@dataclass
class RoomStatus:
    """Snapshot of a room at one instant.

    Attributes:
        resource: The room.
        current: Reservation in progress at ``as_of``, if any.
        upcoming: Next reservations starting after ``as_of``.
        as_of: Instant the status was computed for.
    """

    resource: Resource
    current: Optional[Reservation] = None
    upcoming: list[Reservation] = field(default_factory=list)
    as_of: Optional[datetime] = None

    @property
    def is_available(self) -> bool:
        return self.current is None

    @property
    def next_reservation(self) -> Optional[Reservation]:
        return self.upcoming[0] if self.upcoming else None


def room_status(
    resource: Resource,
    reservations: Iterable[Reservation],
    now: datetime,
    upcoming_limit: int = 3,
) -> RoomStatus:
    """Summarise what is happening in a room now and next.

    Args:
        resource: Room to summarise.
        reservations: Reservation snapshot; other rooms are ignored.
        now: Current instant.
        upcoming_limit: Maximum number of upcoming reservations.

    Returns:
        RoomStatus for the room.
    """
    relevant = sorted(
        (
            r for r in reservations
            if r.resource_id == resource.id
            and r.is_active
            and not is_empty(r.start, r.end)
        ),
        key=lambda r: (r.start, r.id),
    )

    current = next((r for r in relevant if r.start <= now < r.end), None)
    upcoming = [r for r in relevant if r.start > now][:upcoming_limit]

    return RoomStatus(resource=resource, current=current, upcoming=upcoming, as_of=now)
