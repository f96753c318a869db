"""Data retrieval: booking service contracts, snapshots and snapshot files."""

from roomgrid.data.codec import (
    SnapshotFormatError,
    load_snapshot_file,
    save_snapshot_file,
    source_from_dict,
    source_to_dict,
)
from roomgrid.data.snapshot import (
    CalendarView,
    Snapshot,
    SnapshotLoader,
    SnapshotStore,
)
from roomgrid.data.source import (
    InMemorySource,
    OperatingSettings,
    ReservationSource,
    ResourceFilter,
)

__all__ = [
    # Contracts
    "InMemorySource",
    "OperatingSettings",
    "ReservationSource",
    "ResourceFilter",
    # Snapshots
    "CalendarView",
    "Snapshot",
    "SnapshotLoader",
    "SnapshotStore",
    # Files
    "SnapshotFormatError",
    "load_snapshot_file",
    "save_snapshot_file",
    "source_from_dict",
    "source_to_dict",
]
