"""Grid builder interface.

This module provides the high-level GridBuilder class that resolves
operating windows and classifies every (resource, day, hour) cell of a
calendar window.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, tzinfo
from typing import Optional

from roomgrid.domain.models import (
    DateRange,
    GridCell,
    GridModel,
    OperatingWindow,
    Reservation,
    Resource,
)
from roomgrid.domain.policies import (
    AccessPolicy,
    DefaultOperatingHoursPolicy,
    OperatingHoursPolicy,
)
from roomgrid.engine.cache import CoverageCache
from roomgrid.engine.classifier import SlotClassifier

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


class GridBuilder:
    """High-level builder for renderable availability grids.

    Example:
        >>> builder = GridBuilder()
        >>> grid = builder.build_grid(
        ...     resources, reservations, DateRange(date(2024, 1, 15)),
        ...     OperatingWindow(8, 18), "acme", now,
        ... )
        >>> grid.cell("room-1", date(2024, 1, 15), 9).status
    """

    def __init__(
        self,
        hours_policy: Optional[OperatingHoursPolicy] = None,
        access_policy: Optional[AccessPolicy] = None,
        cache: Optional[CoverageCache] = None,
    ):
        """Initialize builder with policies.

        Args:
            hours_policy: Policy resolving each room's operating window.
            access_policy: Policy for company locks.
            cache: Optional coverage cache, used when a snapshot version
                is passed to ``build_grid``.
        """
        self.hours_policy = hours_policy or DefaultOperatingHoursPolicy()
        self.classifier = SlotClassifier(access_policy=access_policy, cache=cache)

    def resolve_windows(
        self,
        resources: Sequence[Resource],
        global_window: Optional[OperatingWindow],
    ) -> dict[str, OperatingWindow]:
        """Effective operating window for every resource."""
        return {
            resource.id: self.hours_policy.effective_window(resource, global_window)
            for resource in resources
        }

    def grid_hours(
        self,
        windows: dict[str, OperatingWindow],
        global_window: Optional[OperatingWindow],
        full_day: bool = False,
    ) -> list[int]:
        """Hours shown as grid rows.

        Rows run from the earliest opening to the latest closing among the
        global window and every room's window, or cover the whole day.
        """
        if full_day:
            return list(range(HOURS_PER_DAY))

        candidates = list(windows.values())
        if global_window is not None:
            candidates.append(global_window)
        if not candidates:
            candidates.append(
                self.hours_policy.effective_window(Resource(id="", name=""), None)
            )

        opening = min(w.opening_hour for w in candidates)
        closing = max(w.closing_hour for w in candidates)
        return list(range(max(0, opening), min(HOURS_PER_DAY, closing)))

    def build_grid(
        self,
        resources: Sequence[Resource],
        reservations: Sequence[Reservation],
        date_range: DateRange,
        global_window: Optional[OperatingWindow],
        requester_company_id: Optional[str],
        now: datetime,
        tz: Optional[tzinfo] = None,
        full_day: bool = False,
        version: Optional[int] = None,
    ) -> GridModel:
        """Classify every cell of the window.

        Args:
            resources: Rooms to show, in display order.
            reservations: Reservation snapshot for the window.
            date_range: Days to show.
            global_window: Global default hours, None if not configured.
            requester_company_id: Company of the viewer, if any.
            now: Current instant.
            tz: Timezone to render in; defaults to the timezone of ``now``.
            full_day: Show all 24 hours instead of the operating hours.
            version: Snapshot version, enables the coverage cache.

        Returns:
            Dense GridModel.
        """
        tz = tz or now.tzinfo
        windows = self.resolve_windows(resources, global_window)
        hours = self.grid_hours(windows, global_window, full_day)

        grid = GridModel(
            date_range=date_range,
            hours=hours,
            resources=list(resources),
            windows=windows,
            generated_at=now,
            tz=tz,
        )

        for day in date_range.dates:
            for hour in hours:
                for resource in resources:
                    classification = self.classifier.classify_cell(
                        resource,
                        day,
                        hour,
                        reservations,
                        windows[resource.id],
                        requester_company_id,
                        now,
                        tz=tz,
                        version=version,
                    )
                    grid.cells[(resource.id, day, hour)] = GridCell(
                        resource_id=resource.id,
                        day=day,
                        hour=hour,
                        classification=classification,
                    )

        logger.debug(
            "Built grid %s +%dd: %d resources x %d hours = %d cells",
            date_range.start, date_range.days, len(resources), len(hours),
            grid.cell_count,
        )
        return grid


def build_grid(
    resources: Sequence[Resource],
    reservations: Sequence[Reservation],
    date_range: DateRange,
    global_window: Optional[OperatingWindow],
    requester_company_id: Optional[str],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> GridModel:
    """Build a grid with the default policies."""
    return GridBuilder().build_grid(
        resources,
        reservations,
        date_range,
        global_window,
        requester_company_id,
        now,
        tz=tz,
    )
