"""Plain-text output for availability grids.

This module creates fixed-width text showing:
- One table per day with an hour row and a room column per cell
- The reservations starting on each day, with their visual spans
- Cell counts per classification
"""

from datetime import date, datetime
from pathlib import Path
from typing import Union

from roomgrid.domain.models import CellStatus, GridCell, GridModel

LABELS = {
    CellStatus.PAST: "past",
    CellStatus.FULLY_BOOKED: "BOOKED",
    CellStatus.PARTIALLY_BOOKED: "part",
    CellStatus.OUTSIDE_HOURS: "--",
    CellStatus.RESTRICTED: "locked",
    CellStatus.AVAILABLE: "+",
}

COLUMN_WIDTH = 12


class TextGenerator:
    """Generates text tables for a grid.

    A ``*`` after a label marks the cell where a reservation starts.
    """

    def generate(self, grid: GridModel, output_path: Union[str, Path]) -> str:
        """Generate text output and save to file.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(grid)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(self, grid: GridModel) -> str:
        """Generate text output and return as string."""
        lines = []

        lines.append("=" * 80)
        lines.append(
            f"ROOM CALENDAR - {grid.date_range.start} to "
            f"{grid.date_range.dates[-1] if grid.dates else grid.date_range.start}"
        )
        lines.append("=" * 80)
        if grid.generated_at is not None:
            lines.append(f"As of: {self._format_instant(grid.generated_at)}")
        lines.append(
            "Legend: " + ", ".join(f"{label}={status.value}" for status, label in LABELS.items())
        )
        lines.append("")

        for resource in grid.resources:
            window = grid.windows.get(resource.id)
            hours = f"{window.opening_hour:02d}:00-{window.closing_hour:02d}:00" if window else "-"
            lock = (
                f", locked to {', '.join(sorted(resource.locked_to_companies))}"
                if resource.is_locked
                else ""
            )
            lines.append(f"  {resource.name} ({resource.capacity} people, {hours}{lock})")
        lines.append("")

        for day in grid.dates:
            lines.extend(self._day_table(grid, day))
            lines.append("")

        lines.append("-" * 80)
        lines.append("SUMMARY")
        lines.append("-" * 80)
        for status, count in grid.counts().items():
            lines.append(f"  {status.value:<18} {count:>5}")
        lines.append(f"  {'bookable':<18} {len(grid.bookable_cells()):>5}")

        return "\n".join(lines)

    def _day_table(self, grid: GridModel, day: date) -> list[str]:
        lines = []
        lines.append("-" * 80)
        lines.append(day.strftime("%A, %b %d").upper())
        lines.append("-" * 80)

        header = f"{'Time':<7}" + "".join(
            f"{r.name[:COLUMN_WIDTH - 1]:<{COLUMN_WIDTH}}" for r in grid.resources
        )
        lines.append(header)

        for hour, cells in grid.rows_for(day):
            row = f"{hour:02d}:00  " + "".join(
                f"{self._cell_label(c):<{COLUMN_WIDTH}}" for c in cells
            )
            lines.append(row.rstrip())

        starting = [
            (c, s) for c in grid.cells.values() if c.day == day for s in c.classification.spans
        ]
        if starting:
            lines.append("")
            names = {r.id: r.name for r in grid.resources}
            for grid_cell, reservation_span in sorted(
                starting, key=lambda item: (item[1].reservation.start, item[1].reservation.id)
            ):
                reservation = reservation_span.reservation
                span = reservation_span.span
                start = grid.local(reservation.start)
                end = grid.local(reservation.end)
                lines.append(
                    f"  {start.strftime('%H:%M')}-{end.strftime('%H:%M')} "
                    f"{names.get(grid_cell.resource_id, grid_cell.resource_id)}: "
                    f"{reservation.title} "
                    f"(top {span.top_offset_percent:.0f}%, height {span.height_percent:.0f}%, "
                    f"{span.spanned_cell_count} cell{'s' if span.spanned_cell_count != 1 else ''})"
                )
        return lines

    def _cell_label(self, grid_cell: GridCell) -> str:
        label = LABELS[grid_cell.status]
        if grid_cell.classification.spans:
            label += "*"
        return label

    def _format_instant(self, instant: datetime) -> str:
        return instant.strftime("%Y-%m-%d %H:%M %Z").strip()
