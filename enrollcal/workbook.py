"""
Reading input files into a cell snapshot.

Two sources are supported:
- .xlsx / .xlsm workbooks (read with openpyxl)
- .json dumps of a sheet, e.g. {"B5": {"v": "CS101"}, "K5": {"v": "M-W-F | ..."}}

The result is a plain {address: value} mapping in row-major order, which is
what the converter expects. Date cells are turned back into spreadsheet
serials so workbooks and raw dumps look the same downstream.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional

from openpyxl import load_workbook
from openpyxl.utils.datetime import to_excel


WORKBOOK_SUFFIXES = (".xlsx", ".xlsm")
JSON_SUFFIXES = (".json",)


def _snapshot_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return to_excel(value)
    return value


def load_workbook_cells(path: str | Path, sheet: Optional[str] = None) -> Dict[str, Any]:
    """
    Read one worksheet (the first one unless sheet is given) into a mapping.
    Empty cells are left out.
    """
    wb = load_workbook(Path(path), read_only=True, data_only=True)
    try:
        if sheet is None:
            ws = wb.worksheets[0]
        elif sheet in wb.sheetnames:
            ws = wb[sheet]
        else:
            raise KeyError(f"Sheet {sheet!r} not found (available: {', '.join(wb.sheetnames)})")

        cells: Dict[str, Any] = {}
        for row in ws.iter_rows():
            for cell in row:
                # read-only mode yields EmptyCell objects without a coordinate
                if cell.value is None:
                    continue
                cells[cell.coordinate] = _snapshot_value(cell.value)
        return cells
    finally:
        wb.close()


def load_json_cells(path: str | Path) -> Any:
    """
    Load a JSON sheet dump as-is. Anything but an object is left for the
    converter to reject.
    """
    return json.loads(Path(path).read_text(encoding="utf-8"))


def load_cells(path: str | Path, sheet: Optional[str] = None) -> Any:
    """
    Load the cell snapshot of an input file, dispatching on its suffix.
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix in WORKBOOK_SUFFIXES:
        return load_workbook_cells(p, sheet=sheet)
    if suffix in JSON_SUFFIXES:
        return load_json_cells(p)
    raise ValueError(f"Unsupported input file type: {p.suffix or '(none)'} (expected .xlsx, .xlsm or .json)")
