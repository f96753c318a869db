"""PDF generation for availability grids.

This module creates printable PDF calendars showing:
- One page per day with an hour row and a room column per cell
- Cell colours by classification
- Reservations drawn at their exact offset and height, overflowing
  into the following hours
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from roomgrid.domain.models import CellStatus, GridModel

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    CellStatus.PAST: (0.85, 0.85, 0.85),  # Gray
    CellStatus.FULLY_BOOKED: (0.95, 0.75, 0.75),  # Light red
    CellStatus.PARTIALLY_BOOKED: (1.0, 0.9, 0.6),  # Yellow
    CellStatus.OUTSIDE_HOURS: (0.95, 0.95, 0.95),  # Light gray
    CellStatus.RESTRICTED: (0.8, 0.75, 0.9),  # Lavender
    CellStatus.AVAILABLE: (0.8, 0.93, 0.8),  # Light green
    "reservation": (0.35, 0.5, 0.8),  # Blue
}


def _require_reportlab():
    try:
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )
    return canvas, landscape(letter)


class PDFGenerator:
    """Generates printable PDF calendars.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(grid, "calendar.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(self, grid: GridModel, output_path: Union[str, Path]) -> None:
        """Generate the PDF and save it to a file."""
        canvas, pagesize = _require_reportlab()
        c = canvas.Canvas(str(output_path), pagesize=pagesize)
        self._draw_pages(c, grid)
        c.save()

    def generate_to_buffer(self, grid: GridModel) -> BytesIO:
        """Generate the PDF and return it as a bytes buffer."""
        canvas, pagesize = _require_reportlab()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw_pages(c, grid)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw_pages(self, c, grid: GridModel) -> None:
        total_pages = len(grid.dates)
        for page_num, day in enumerate(grid.dates, 1):
            self._draw_day_page(c, grid, day)
            self._draw_legend(c, self.margin, self.margin + 4)
            c.setFont("Helvetica", 9)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 14,
                f"Page {page_num} of {total_pages}",
            )
            c.showPage()

    def _draw_day_page(self, c, grid: GridModel, day) -> None:
        """Draw one day's table with reservation spans on top."""
        header_height = 50
        legend_height = 24
        label_width = 50

        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Room Calendar - {day.strftime('%A, %B %d, %Y')}",
        )

        if not grid.resources or not grid.hours:
            return

        table_top = self.page_height - self.margin - header_height
        table_left = self.margin + label_width
        table_width = self.page_width - 2 * self.margin - label_width
        column_width = table_width / len(grid.resources)
        usable_height = table_top - self.margin - legend_height - 14
        row_height = usable_height / len(grid.hours)
        table_bottom = table_top - row_height * len(grid.hours)

        # Column headers
        c.setFont("Helvetica-Bold", 8)
        c.setFillColorRGB(0, 0, 0)
        for i, resource in enumerate(grid.resources):
            c.drawCentredString(
                table_left + (i + 0.5) * column_width,
                table_top + 4,
                f"{resource.name[:20]} ({resource.capacity})",
            )

        # Cells
        c.setStrokeColorRGB(0.7, 0.7, 0.7)
        c.setLineWidth(0.5)
        for row, (hour, cells) in enumerate(grid.rows_for(day)):
            y = table_top - (row + 1) * row_height
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica", 8)
            c.drawRightString(table_left - 4, y + row_height - 9, f"{hour:02d}:00")

            for col, grid_cell in enumerate(cells):
                x = table_left + col * column_width
                c.setFillColorRGB(*COLORS[grid_cell.status])
                c.rect(x, y, column_width, row_height, fill=1, stroke=1)

        # Reservations, drawn from the cell where they start
        for row, (hour, cells) in enumerate(grid.rows_for(day)):
            row_top = table_top - row * row_height
            for col, grid_cell in enumerate(cells):
                x = table_left + col * column_width
                for reservation_span in grid_cell.classification.spans:
                    self._draw_reservation(
                        c,
                        grid,
                        reservation_span,
                        x + 3,
                        row_top,
                        column_width - 6,
                        row_height,
                        table_bottom,
                    )

    def _draw_reservation(
        self,
        c,
        grid: GridModel,
        reservation_span,
        x: float,
        row_top: float,
        width: float,
        row_height: float,
        floor: float,
    ) -> None:
        span = reservation_span.span
        reservation = reservation_span.reservation

        top = row_top - row_height * span.top_offset_percent / 100
        height = row_height * span.height_percent / 100
        bottom = max(floor, top - height)

        c.setFillColorRGB(*COLORS["reservation"])
        c.setStrokeColorRGB(0.2, 0.3, 0.6)
        c.roundRect(x, bottom, width, top - bottom, 3, fill=1, stroke=1)

        start = grid.local(reservation.start).strftime("%H:%M")
        end = grid.local(reservation.end).strftime("%H:%M")
        c.setFillColorRGB(1, 1, 1)
        c.setFont("Helvetica-Bold", 7)
        c.drawString(x + 3, top - 9, reservation.title[:28])
        if top - bottom > 18:
            c.setFont("Helvetica", 6)
            c.drawString(x + 3, top - 17, f"{start} - {end}")

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for colors."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        items = [
            (CellStatus.AVAILABLE, "Available"),
            (CellStatus.PARTIALLY_BOOKED, "Partially booked"),
            (CellStatus.FULLY_BOOKED, "Booked"),
            (CellStatus.OUTSIDE_HOURS, "Outside hours"),
            (CellStatus.RESTRICTED, "Restricted"),
            (CellStatus.PAST, "Past"),
        ]

        c.setFont("Helvetica", 7)
        current_x = x + 45

        for key, label in items:
            c.setFillColorRGB(*COLORS[key])
            c.rect(current_x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, label)
            current_x += 95
