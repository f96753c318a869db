"""Domain models and business rules for room reservations."""

from roomgrid.domain.models import (
    FALLBACK_CLOSING_HOUR,
    FALLBACK_OPENING_HOUR,
    WINDOW_DAYS,
    CellClassification,
    CellStatus,
    Coverage,
    DateRange,
    ExternalGuest,
    GridCell,
    GridModel,
    OperatingWindow,
    RequesterContext,
    Reservation,
    ReservationSpan,
    ReservationStatus,
    Resource,
    SpanInfo,
)
from roomgrid.domain.policies import (
    AccessPolicy,
    CompanyLockPolicy,
    DefaultOperatingHoursPolicy,
    OperatingHoursPolicy,
)

__all__ = [
    # Constants
    "FALLBACK_CLOSING_HOUR",
    "FALLBACK_OPENING_HOUR",
    "WINDOW_DAYS",
    # Models
    "CellClassification",
    "CellStatus",
    "Coverage",
    "DateRange",
    "ExternalGuest",
    "GridCell",
    "GridModel",
    "OperatingWindow",
    "RequesterContext",
    "Reservation",
    "ReservationSpan",
    "ReservationStatus",
    "Resource",
    "SpanInfo",
    # Policies
    "AccessPolicy",
    "CompanyLockPolicy",
    "DefaultOperatingHoursPolicy",
    "OperatingHoursPolicy",
]
