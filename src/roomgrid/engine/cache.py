"""Per-snapshot memoisation of cell coverage."""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from roomgrid.domain.models import Coverage, Reservation
from roomgrid.engine.coverage import classify_coverage

logger = logging.getLogger(__name__)


class CoverageCache:
    """Caches ``classify_coverage`` results for one snapshot version.

    The cache only ever holds results for a single version; asking for a
    different version drops everything. Results are exactly those of the
    uncached sweep.
    """

    def __init__(self):
        self.version: Optional[int] = None
        self._entries: dict[tuple[str, datetime], Coverage] = {}
        self.hits = 0
        self.misses = 0

    def coverage(
        self,
        version: int,
        resource_id: str,
        cell_start: datetime,
        cell_end: datetime,
        reservations: Sequence[Reservation],
    ) -> Coverage:
        """Get coverage for a cell, computing it on first use."""
        if version != self.version:
            self.reset(version)

        key = (resource_id, cell_start)
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        result = classify_coverage(resource_id, cell_start, cell_end, reservations)
        self._entries[key] = result
        return result

    def reset(self, version: Optional[int] = None) -> None:
        """Drop all entries and switch to ``version``."""
        if self._entries:
            logger.debug(
                "Dropping %d cached coverage entries (version %s -> %s)",
                len(self._entries), self.version, version,
            )
        self._entries.clear()
        self.version = version
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)
