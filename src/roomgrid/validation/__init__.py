"""Validation module for advisory reservation checks."""

from roomgrid.validation.validator import (
    ReservationValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "ReservationValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
