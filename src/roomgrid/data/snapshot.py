"""Consistent input snapshots and the recompute loop around them.

The three retrievals a grid needs run concurrently and are awaited
together, so the engine never sees a half-updated snapshot. Snapshots are
versioned; when loads overlap, only the most recent one is kept.
"""

import itertools
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

from roomgrid.domain.models import (
    WINDOW_DAYS,
    DateRange,
    GridModel,
    OperatingWindow,
    RequesterContext,
    Reservation,
    Resource,
)
from roomgrid.data.source import OperatingSettings, ReservationSource, ResourceFilter
from roomgrid.engine.cache import CoverageCache
from roomgrid.engine.grid import GridBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Immutable input for one computation pass.

    Attributes:
        version: Monotonic load number; higher is newer.
        date_range: Window the reservations were fetched for.
        resources: Rooms, in display order.
        reservations: Reservations overlapping the window.
        settings: Global default hours, if configured.
        fetched_at: When the load completed.
    """

    version: int
    date_range: DateRange
    resources: tuple[Resource, ...]
    reservations: tuple[Reservation, ...]
    settings: Optional[OperatingSettings] = None
    fetched_at: Optional[datetime] = None

    @property
    def global_window(self) -> Optional[OperatingWindow]:
        if self.settings is None:
            return None
        return self.settings.window

    def resource(self, resource_id: str) -> Optional[Resource]:
        """Look up a room by id."""
        return next((r for r in self.resources if r.id == resource_id), None)


class SnapshotLoader:
    """Fetches rooms, reservations and settings together.

    Example:
        >>> loader = SnapshotLoader(source)
        >>> snapshot = loader.load(DateRange(date(2024, 1, 15)), tz)
    """

    def __init__(self, source: ReservationSource, max_workers: int = 3):
        self.source = source
        self.max_workers = max_workers
        self._versions = itertools.count(1)

    def load(
        self,
        date_range: DateRange,
        tz: tzinfo,
        resource_filter: Optional[ResourceFilter] = None,
    ) -> Snapshot:
        """Run the three retrievals concurrently and wait for all of them.

        Any retrieval error propagates unchanged.
        """
        version = next(self._versions)
        range_start, range_end = date_range.range_bounds(tz)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            resources_future = pool.submit(self.source.list_resources, resource_filter)
            reservations_future = pool.submit(
                self.source.list_reservations, range_start, range_end
            )
            settings_future = pool.submit(self.source.get_operating_settings)

            resources = resources_future.result()
            reservations = reservations_future.result()
            settings = settings_future.result()

        logger.debug(
            "Loaded snapshot v%d: %d resources, %d reservations",
            version, len(resources), len(reservations),
        )
        return Snapshot(
            version=version,
            date_range=date_range,
            resources=tuple(resources),
            reservations=tuple(reservations),
            settings=settings,
            fetched_at=datetime.now(timezone.utc),
        )


class SnapshotStore:
    """Holds the newest applied snapshot (last write wins)."""

    def __init__(self):
        self.current: Optional[Snapshot] = None

    def apply(self, snapshot: Snapshot) -> bool:
        """Keep ``snapshot`` unless a newer one was already applied.

        Returns:
            True if the snapshot became current.
        """
        if self.current is not None and snapshot.version <= self.current.version:
            logger.debug(
                "Discarding stale snapshot v%d (current v%d)",
                snapshot.version, self.current.version,
            )
            return False
        self.current = snapshot
        return True


class CalendarView:
    """Week calendar for one viewer.

    Reloads its snapshot and rebuilds the grid on navigation, on window
    changes, and on explicit refresh after a create/update/cancel/delete.
    """

    def __init__(
        self,
        source: ReservationSource,
        requester: Optional[RequesterContext] = None,
        tz: tzinfo = timezone.utc,
        now_fn: Optional[Callable[[], datetime]] = None,
        builder: Optional[GridBuilder] = None,
        resource_filter: Optional[ResourceFilter] = None,
        days: int = WINDOW_DAYS,
        full_day: bool = False,
    ):
        self.requester = requester or RequesterContext()
        self.tz = tz
        self.now_fn = now_fn or (lambda: datetime.now(tz))
        self.builder = builder or GridBuilder(cache=CoverageCache())
        self.resource_filter = resource_filter
        self.full_day = full_day
        self.loader = SnapshotLoader(source)
        self.store = SnapshotStore()
        self.date_range = DateRange.today(self.now_fn().astimezone(tz), days)
        self.grid: Optional[GridModel] = None

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self.store.current

    def refresh(self) -> GridModel:
        """Reload the snapshot and rebuild the grid."""
        snapshot = self.loader.load(self.date_range, self.tz, self.resource_filter)
        if self.store.apply(snapshot) or self.grid is None:
            self.grid = self.rebuild()
        return self.grid

    def rebuild(self) -> GridModel:
        """Recompute the grid from the current snapshot without reloading."""
        snapshot = self.store.current
        if snapshot is None:
            return self.refresh()
        return self.builder.build_grid(
            snapshot.resources,
            snapshot.reservations,
            snapshot.date_range,
            snapshot.global_window,
            self.requester.company_id,
            self.now_fn(),
            tz=self.tz,
            full_day=self.full_day,
            version=snapshot.version,
        )

    def set_range(self, date_range: DateRange) -> GridModel:
        self.date_range = date_range
        return self.refresh()

    def next_week(self) -> GridModel:
        return self.set_range(self.date_range.next())

    def previous_week(self) -> GridModel:
        return self.set_range(self.date_range.previous())

    def today(self) -> GridModel:
        return self.set_range(
            DateRange.today(self.now_fn().astimezone(self.tz), self.date_range.days)
        )
