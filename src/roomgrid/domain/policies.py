"""Policy definitions for booking rules.

This module contains configurable policies that decide which hours a room
can be booked and who may book it. Policies are kept separate from the
engine to allow independent testing and easy modification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from roomgrid.domain.models import (
    FALLBACK_CLOSING_HOUR,
    FALLBACK_OPENING_HOUR,
    OperatingWindow,
    Resource,
)


class OperatingHoursPolicy(ABC):
    """Abstract base class for operating-hours resolution."""

    @abstractmethod
    def effective_window(
        self,
        resource: Resource,
        global_window: Optional[OperatingWindow],
    ) -> OperatingWindow:
        """Resolve the hours a room can be booked.

        Args:
            resource: The room being resolved.
            global_window: Global default hours, if configured.

        Returns:
            The effective operating window for the room.
        """
        pass


class AccessPolicy(ABC):
    """Abstract base class for booking access rules."""

    @abstractmethod
    def can_book(self, resource: Resource, company_id: Optional[str]) -> bool:
        """Check if a member of ``company_id`` may book the room."""
        pass


@dataclass
class DefaultOperatingHoursPolicy(OperatingHoursPolicy):
    """Default operating-hours policy.

    Resolution order, applied to opening and closing hour independently:
    - Room-specific override
    - Global default
    - Fixed fallback (8:00 - 18:00)
    """

    fallback_opening_hour: int = FALLBACK_OPENING_HOUR
    fallback_closing_hour: int = FALLBACK_CLOSING_HOUR

    def effective_window(
        self,
        resource: Resource,
        global_window: Optional[OperatingWindow],
    ) -> OperatingWindow:
        opening = resource.opening_hour
        closing = resource.closing_hour

        if opening is None:
            opening = (
                global_window.opening_hour
                if global_window is not None
                else self.fallback_opening_hour
            )
        if closing is None:
            closing = (
                global_window.closing_hour
                if global_window is not None
                else self.fallback_closing_hour
            )

        return OperatingWindow(opening_hour=opening, closing_hour=closing)


@dataclass
class CompanyLockPolicy(AccessPolicy):
    """Rooms with a company lock may only be booked by those companies.

    A requester without a company cannot book a locked room.
    """

    def can_book(self, resource: Resource, company_id: Optional[str]) -> bool:
        return resource.allows_company(company_id)
