"""Output generation for availability grids (text, PDF)."""

from roomgrid.output.pdf_generator import PDFGenerator
from roomgrid.output.text_generator import TextGenerator

__all__ = [
    "PDFGenerator",
    "TextGenerator",
]
