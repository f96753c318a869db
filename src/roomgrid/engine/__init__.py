"""Slot availability engine for the reservation calendar."""

from roomgrid.engine.cache import CoverageCache
from roomgrid.engine.classifier import SlotClassifier
from roomgrid.engine.coverage import active_reservations, classify_coverage
from roomgrid.engine.grid import GridBuilder, build_grid
from roomgrid.engine.intervals import (
    cell_bounds,
    clamp,
    duration_minutes,
    is_empty,
    overlaps,
)
from roomgrid.engine.spans import project_span, starts_in_cell
from roomgrid.engine.status import RoomStatus, room_status

__all__ = [
    # Grid
    "GridBuilder",
    "build_grid",
    "SlotClassifier",
    "CoverageCache",
    # Coverage and spans
    "active_reservations",
    "classify_coverage",
    "project_span",
    "starts_in_cell",
    # Interval utilities
    "cell_bounds",
    "clamp",
    "duration_minutes",
    "is_empty",
    "overlaps",
    # Room status
    "RoomStatus",
    "room_status",
]
