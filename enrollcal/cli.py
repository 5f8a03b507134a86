"""
CLI (Command Line Interface).

This module provides the terminal commands, e.g.:

    enrollcal convert <schedule.xlsx> [-o out.ics] [--tz America/Chicago]
    enrollcal preview <schedule.xlsx>
    enrollcal zones

Note:
- The conversion itself lives in enrollcal/convert.py
- Input files are .xlsx/.xlsm workbooks or .json sheet dumps
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional
from zipfile import BadZipFile

from openpyxl.utils.exceptions import InvalidFileException
from rich import box
from rich.console import Console
from rich.table import Table

from enrollcal.convert import convert_cells
from enrollcal.extract import extract_enrolled_cells
from enrollcal.logging_config import setup_logging
from enrollcal.parse import normalize_rows
from enrollcal.storage import default_output_path, write_calendar
from enrollcal.timezones import DEFAULT_TZID, ZONES, clean_tzid, known_zones
from enrollcal.workbook import load_cells


console = Console()


def _load_input(path: str, sheet: Optional[str]) -> Any:
    """
    Load the cell snapshot of the input file.

    Returns None (after printing the reason) if the file cannot be read.
    """
    p = Path(path)
    if not p.exists():
        print(f"Input file not found: {p}")
        return None
    try:
        return load_cells(p, sheet=sheet)
    except KeyError as e:
        print(e.args[0] if e.args else str(e))
        return None
    except json.JSONDecodeError as e:
        print(f"Invalid JSON in {p}: {e}")
        return None
    except (OSError, ValueError, BadZipFile, InvalidFileException) as e:
        print(f"Could not read {p}: {e}")
        return None


def _cmd_convert(args: argparse.Namespace) -> int:
    """
    Convert the input file and write the .ics file.
    """
    tzid = clean_tzid(args.tz)
    if tzid not in ZONES:
        print(f"Warning: no built-in rules for '{tzid}', using {DEFAULT_TZID} rules.")

    cells = _load_input(args.input, args.sheet)
    if cells is None:
        return 1

    result = convert_cells(cells, tzid=tzid)
    if not result.ok:
        print(f"Conversion failed: {result.diagnostic}")
        return 1

    out_path = Path(args.out) if args.out else default_output_path(args.input)
    write_calendar(result.text, out_path)

    if result.events == 0:
        print("Warning: no enrolled sections with a readable schedule were found.")
    print(f"Exported {result.events} events to: {out_path}")
    return 0


def _cmd_preview(args: argparse.Namespace) -> int:
    """
    Show the rows that would become events, without writing anything.
    """
    cells = _load_input(args.input, args.sheet)
    if cells is None:
        return 1
    if not isinstance(cells, Mapping):
        print("Conversion failed: input is not a mapping of cell addresses to values.")
        return 1

    rows = normalize_rows(extract_enrolled_cells(cells))
    if not rows:
        print("No enrolled sections found.")
        return 0

    table = Table(box=box.SIMPLE_HEAVY, show_lines=False)
    table.add_column("Row", justify="right")
    table.add_column("Course")
    table.add_column("Section")
    table.add_column("Days")
    table.add_column("Time")
    table.add_column("Location")
    table.add_column("Term")

    for r in rows:
        s = r.schedule
        table.add_row(
            str(r.row),
            r.course_name,
            r.section_id,
            ",".join(s.weekdays),
            f"{s.start:%H:%M}-{s.end:%H:%M}",
            s.location,
            f"{r.term_start.isoformat()} .. {r.term_end.isoformat()}",
        )

    console.print(table)
    console.print(f"{len(rows)} sections")
    return 0


def _cmd_zones(args: argparse.Namespace) -> int:
    for tzid in known_zones():
        marker = " (default)" if tzid == DEFAULT_TZID else ""
        print(f"{tzid}{marker}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="enrollcal", description="Enrolled sections to iCalendar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped rows")
    sub = parser.add_subparsers(dest="command", required=True)

    p_convert = sub.add_parser("convert", help="Convert a schedule export to .ics")
    p_convert.add_argument("input", type=str, help="Input file (.xlsx, .xlsm or .json)")
    p_convert.add_argument("-o", "--out", type=str, default=None, help="Output .ics path")
    p_convert.add_argument("--tz", type=str, default=DEFAULT_TZID, help=f"Timezone id (default {DEFAULT_TZID})")
    p_convert.add_argument("--sheet", type=str, default=None, help="Worksheet name (default: first sheet)")

    p_preview = sub.add_parser("preview", help="List the sections found in a schedule export")
    p_preview.add_argument("input", type=str, help="Input file (.xlsx, .xlsm or .json)")
    p_preview.add_argument("--sheet", type=str, default=None, help="Worksheet name (default: first sheet)")

    sub.add_parser("zones", help="List built-in timezone ids")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == "convert":
        raise SystemExit(_cmd_convert(args))
    if args.command == "preview":
        raise SystemExit(_cmd_preview(args))
    if args.command == "zones":
        raise SystemExit(_cmd_zones(args))

    raise SystemExit(2)
