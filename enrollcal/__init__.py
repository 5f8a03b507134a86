"""
enrollcal: turn an "Enrolled Sections" spreadsheet export into an iCalendar file.
"""

from enrollcal.convert import convert_cells
from enrollcal.model import ConversionResult

__all__ = ["convert_cells", "ConversionResult"]
