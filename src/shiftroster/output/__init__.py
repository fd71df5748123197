"""Output generation for schedules (calendar grid, text, PDF)."""

from shiftroster.output.grid import MonthGrid, build_month_grid
from shiftroster.output.pdf_generator import PDFGenerator
from shiftroster.output.text_generator import TextGenerator

__all__ = [
    "MonthGrid",
    "PDFGenerator",
    "TextGenerator",
    "build_month_grid",
]
