"""Advisory checks for proposed reservations and snapshot data.

The booking service is the authority on accepting reservations. These
checks predict its answer so the calendar can explain a refusal before a
request is sent, and flag upstream records that break the engine's
preconditions.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from typing import Optional

from roomgrid.domain.models import OperatingWindow, Reservation, Resource
from roomgrid.domain.policies import AccessPolicy, CompanyLockPolicy
from roomgrid.engine.intervals import is_empty, overlaps

logger = logging.getLogger(__name__)


class ValidationErrorType(Enum):
    """Types of validation errors."""

    INVALID_INTERVAL = "invalid_interval"
    IN_PAST = "in_past"
    BEFORE_OPENING = "before_opening"
    AFTER_CLOSING = "after_closing"
    COMPANY_RESTRICTED = "company_restricted"
    CONFLICT = "conflict"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    reservation_id: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.reservation_id:
            parts.append(f"Reservation {self.reservation_id}:")
        parts.append(self.message)
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of an advisory check."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def has_error(self, error_type: ValidationErrorType) -> bool:
        return any(e.error_type == error_type for e in self.errors)


class ReservationValidator:
    """Predicts whether the booking service would accept a reservation.

    Example:
        >>> validator = ReservationValidator()
        >>> result = validator.check(proposal, room, reservations, window, "acme", now)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def __init__(self, access_policy: Optional[AccessPolicy] = None):
        self.access_policy = access_policy or CompanyLockPolicy()

    def check(
        self,
        proposal: Reservation,
        resource: Resource,
        reservations: Sequence[Reservation],
        window: OperatingWindow,
        requester_company_id: Optional[str],
        now: datetime,
        tz: Optional[tzinfo] = None,
    ) -> ValidationResult:
        """Check a new or edited reservation.

        Args:
            proposal: Reservation to create, or the edited version of an
                existing one (same id).
            resource: Room being booked.
            reservations: Current reservation snapshot.
            window: Effective operating window of the room.
            requester_company_id: Company of the person booking.
            now: Current instant.
            tz: Timezone for wall-clock hour checks; defaults to that of ``now``.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)
        tz = tz or now.tzinfo

        if is_empty(proposal.start, proposal.end):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.INVALID_INTERVAL,
                    message="End time must be after start time",
                    reservation_id=proposal.id,
                )
            )
            return result

        if proposal.start < now:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.IN_PAST,
                    message="Reservations cannot start in the past",
                    reservation_id=proposal.id,
                )
            )

        self._check_hours(proposal, window, tz, result)

        if not self.access_policy.can_book(resource, requester_company_id):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.COMPANY_RESTRICTED,
                    message=f"{resource.name} is reserved for another company",
                    reservation_id=proposal.id,
                    details={"locked_to": sorted(resource.locked_to_companies)},
                )
            )

        for other in self.conflicts(proposal, reservations):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.CONFLICT,
                    message=(
                        f"Overlaps '{other.title}' "
                        f"({other.start.astimezone(tz).strftime('%H:%M')}-"
                        f"{other.end.astimezone(tz).strftime('%H:%M')})"
                    ),
                    reservation_id=proposal.id,
                    details={"conflicting_id": other.id},
                )
            )

        return result

    def conflicts(
        self,
        proposal: Reservation,
        reservations: Iterable[Reservation],
    ) -> list[Reservation]:
        """Active reservations of the same room overlapping the proposal.

        The proposal's own id is ignored so an edit does not conflict with
        the version it replaces.
        """
        return sorted(
            (
                r for r in reservations
                if r.resource_id == proposal.resource_id
                and r.id != proposal.id
                and r.is_active
                and not is_empty(r.start, r.end)
                and overlaps(r.start, r.end, proposal.start, proposal.end)
            ),
            key=lambda r: (r.start, r.id),
        )

    def _check_hours(
        self,
        proposal: Reservation,
        window: OperatingWindow,
        tz: tzinfo,
        result: ValidationResult,
    ) -> None:
        """Start no earlier than opening; end no later than closing.

        Ending exactly at the closing hour is allowed.
        """
        start = proposal.start.astimezone(tz)
        end = proposal.end.astimezone(tz)

        if start.hour < window.opening_hour:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.BEFORE_OPENING,
                    message=f"Reservations cannot start before {window.opening_hour}:00",
                    reservation_id=proposal.id,
                )
            )

        ends_late = (
            end.date() > start.date()
            or end.hour > window.closing_hour
            or (end.hour == window.closing_hour and end.minute > 0)
        )
        if ends_late:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.AFTER_CLOSING,
                    message=f"Reservations must end by {window.closing_hour}:00",
                    reservation_id=proposal.id,
                )
            )

    def check_snapshot(
        self,
        resources: Sequence[Resource],
        reservations: Sequence[Reservation],
    ) -> ValidationResult:
        """Report upstream records the engine will ignore or cannot place.

        Only warnings are produced; the snapshot stays usable.
        """
        result = ValidationResult(is_valid=True)
        known = {r.id for r in resources}

        for reservation in reservations:
            if is_empty(reservation.start, reservation.end):
                warning = (
                    f"Reservation {reservation.id} ends at or before its start "
                    f"({reservation.start.isoformat()} - {reservation.end.isoformat()})"
                )
                logger.warning(warning)
                result.add_warning(warning)
            if reservation.resource_id not in known:
                warning = (
                    f"Reservation {reservation.id} refers to unknown room "
                    f"{reservation.resource_id}"
                )
                logger.warning(warning)
                result.add_warning(warning)

        return result
