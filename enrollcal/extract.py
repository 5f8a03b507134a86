"""
Cell extraction (raw sheet snapshot -> enrolled-sections cells).

The export contains several tables on one sheet. Only the rows between the
"Enrolled Sections" heading and the "My Completed Courses" heading are
course rows we care about:

    Enrolled Sections          <- marker row
    Course | Section | ...     <- sub-header row (skipped)
    CS101  | 001     | ...     <- first retained row
    ...
    My Completed Courses       <- everything from here on is dropped
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from enrollcal.model import cell_value


ENROLLED_MARKER = "Enrolled Sections"
COMPLETED_MARKER = "My Completed Courses"

# Rows between the marker and the first data row (the column sub-header)
HEADER_OFFSET = 2

_ADDRESS_RE = re.compile(r"^([A-Z]+)(\d+)$")


def split_address(address: str) -> Tuple[str, int]:
    """
    Split a cell address like 'K14' into ('K', 14).
    Raises ValueError for anything that is not <LETTERS><DIGITS>.
    """
    match = _ADDRESS_RE.match(str(address).strip().upper())
    if not match:
        raise ValueError(f"Invalid cell address: {address!r}")
    return match.group(1), int(match.group(2))


# ---------------------------------------------------------------------------
# Cursor state machine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Cursor:
    """
    Two states: inactive (active_from is None) or active from a given row.
    """

    active_from: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.active_from is not None

    def admits(self, row: int) -> bool:
        return self.active_from is not None and row >= self.active_from

    def close(self, value: Any) -> "Cursor":
        """
        Leave the region on the completed-courses marker.
        """
        if value == COMPLETED_MARKER:
            return Cursor()
        return self

    def open(self, row: int, value: Any) -> "Cursor":
        """
        Start the region two rows below the enrolled-sections marker.
        """
        if value == ENROLLED_MARKER:
            return Cursor(active_from=row + HEADER_OFFSET)
        return self


def extract_enrolled_cells(cells: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return the cells that belong to the enrolled-sections table.

    Cells are scanned in the mapping's own order. The completed-courses
    marker closes the region before its own cell is considered; the
    enrolled-sections marker moves the start only after its own cell.
    """
    cursor = Cursor()
    out: Dict[str, Any] = {}

    for address, raw in cells.items():
        try:
            _, row = split_address(address)
        except ValueError:
            # sheet metadata like '!ref' or '!margins'
            continue

        value = cell_value(raw)

        cursor = cursor.close(value)
        if cursor.admits(row):
            out[address] = raw
        cursor = cursor.open(row, value)

    return out
