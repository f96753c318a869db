"""Retrieval contracts for the booking service.

The engine never talks to the booking service directly. It consumes the
three read operations below; mutations stay with the surrounding
application and only trigger a reload.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from roomgrid.domain.models import OperatingWindow, Reservation, Resource
from roomgrid.engine.intervals import overlaps


@dataclass(frozen=True)
class OperatingSettings:
    """Global default opening and closing hours."""

    opening_hour: int
    closing_hour: int

    @property
    def window(self) -> OperatingWindow:
        return OperatingWindow(self.opening_hour, self.closing_hour)


@dataclass(frozen=True)
class ResourceFilter:
    """Criteria for listing rooms.

    Attributes:
        resource_ids: Only these rooms, if given.
        min_capacity: Rooms holding at least this many people.
        amenities: Rooms offering all of these amenities.
    """

    resource_ids: Optional[frozenset[str]] = None
    min_capacity: int = 0
    amenities: frozenset[str] = frozenset()

    def matches(self, resource: Resource) -> bool:
        """Check if a room satisfies the filter."""
        if self.resource_ids is not None and resource.id not in self.resource_ids:
            return False
        if resource.capacity < self.min_capacity:
            return False
        return self.amenities.issubset(resource.amenities)


class ReservationSource(ABC):
    """Abstract base class for the booking service read API."""

    @abstractmethod
    def list_resources(self, resource_filter: Optional[ResourceFilter] = None) -> list[Resource]:
        """List rooms matching the filter, in display order."""
        pass

    @abstractmethod
    def list_reservations(self, range_start: datetime, range_end: datetime) -> list[Reservation]:
        """List every reservation overlapping [range_start, range_end).

        Includes reservations starting before or ending after the range,
        and cancelled ones.
        """
        pass

    @abstractmethod
    def get_operating_settings(self) -> Optional[OperatingSettings]:
        """Global default hours, or None if not configured."""
        pass


@dataclass
class InMemorySource(ReservationSource):
    """Reservation source backed by in-memory lists.

    Used for tests, fixtures and the command-line tool.
    """

    resources: list[Resource] = field(default_factory=list)
    reservations: list[Reservation] = field(default_factory=list)
    settings: Optional[OperatingSettings] = None

    def list_resources(self, resource_filter: Optional[ResourceFilter] = None) -> list[Resource]:
        if resource_filter is None:
            return list(self.resources)
        return [r for r in self.resources if resource_filter.matches(r)]

    def list_reservations(self, range_start: datetime, range_end: datetime) -> list[Reservation]:
        return [
            r for r in self.reservations
            if overlaps(r.start, r.end, range_start, range_end)
        ]

    def get_operating_settings(self) -> Optional[OperatingSettings]:
        return self.settings

    def add_reservations(self, reservations: Iterable[Reservation]) -> None:
        """Append reservations, as after a create action."""
        self.reservations.extend(reservations)

    def replace_reservation(self, reservation: Reservation) -> None:
        """Replace a reservation with the same id, as after an update or cancel."""
        self.reservations = [
            reservation if r.id == reservation.id else r for r in self.reservations
        ]

    def remove_reservation(self, reservation_id: str) -> None:
        """Drop a reservation, as after a delete."""
        self.reservations = [r for r in self.reservations if r.id != reservation_id]
