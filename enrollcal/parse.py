"""
Parsing (filtered cells -> structured schedule rows).

- Regroups the enrolled-sections cells by row and column letter
- Reads each logical field from its fixed column role
- Decodes the schedule cell, e.g. "M-T-R-F | 3:00 PM - 3:50 PM | Unity Hall 520"
- Converts spreadsheet date serials into calendar dates

Rows with missing or malformed data are skipped, never reported as errors.
Blank separator rows and trailing notes are normal in these exports.
"""

from __future__ import annotations

import logging
import math
import re
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple

from enrollcal.extract import split_address
from enrollcal.model import (
    DAY_TOKENS,
    WEEKDAY_CODES,
    ParsedSchedule,
    ScheduleRow,
    cell_value,
)


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Column roles
# ---------------------------------------------------------------------------

# Accepted column letters per logical field, in order of precedence.
COURSE_NAME_COLUMNS: Tuple[str, ...] = ("B",)
SECTION_COLUMNS: Tuple[str, ...] = ("G",)
SCHEDULE_COLUMNS: Tuple[str, ...] = ("K",)
INSTRUCTOR_COLUMNS: Tuple[str, ...] = ("L",)
TERM_START_COLUMNS: Tuple[str, ...] = ("M",)
TERM_END_COLUMNS: Tuple[str, ...] = ("N",)

# Spreadsheet day 0
SERIAL_EPOCH = date(1899, 12, 30)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _resolve(columns: Mapping[str, Any], roles: Tuple[str, ...]) -> Any:
    """
    Return the first non-empty value among the accepted columns, or None.
    """
    for letter in roles:
        value = columns.get(letter)
        if not _is_empty(value):
            return value
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def group_rows(cells: Mapping[str, Any]) -> Dict[int, Dict[str, Any]]:
    """
    Regroup 'K14' -> value into {14: {'K': value}}.
    Malformed addresses are ignored.
    """
    rows: Dict[int, Dict[str, Any]] = defaultdict(dict)
    for address, raw in cells.items():
        try:
            column, row = split_address(address)
        except ValueError:
            continue
        rows[row][column] = cell_value(raw)
    return dict(rows)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def serial_to_date(serial: float) -> date:
    """
    Convert a spreadsheet date serial (1899-12-30 == 0) to a date.
    Fractions are rounded half-up to the nearest whole day.
    """
    return SERIAL_EPOCH + timedelta(days=int(math.floor(float(serial) + 0.5)))


def _term_date(value: Any) -> Optional[date]:
    """
    Read a term boundary cell: a serial number, a numeric string, or a date
    object when the reader already converted it.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        return None
    try:
        serial = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(serial):
        return None
    try:
        return serial_to_date(serial)
    except OverflowError:
        return None


# ---------------------------------------------------------------------------
# Schedule text
# ---------------------------------------------------------------------------

_DAY_SPLIT_RE = re.compile(r"[-,\s]+")
_RANGE_RE = re.compile(r"^(.+?)\s*-\s*(.+)$")
_TIME_RE = re.compile(r"^(\d{1,2})(?::(\d{1,2}))?\s*(AM|PM)?$", re.IGNORECASE)


def parse_days(text: str) -> Tuple[str, ...]:
    """
    Map day tokens ('M-W-F', 'T, R', 'Sa Su') to RFC 5545 codes.

    Unknown tokens are dropped. The result is de-duplicated and in week
    order (Monday first).
    """
    found = set()
    for token in _DAY_SPLIT_RE.split(text or ""):
        code = DAY_TOKENS.get(token.strip().upper())
        if code:
            found.add(code)
    return tuple(code for code in WEEKDAY_CODES if code in found)


def parse_time(text: str) -> Optional[time]:
    """
    Parse 'H[:MM] [AM|PM]' into a time of day.

    With a meridiem the hour must be 1-12 ('12 AM' -> 0, '12 PM' -> 12);
    without one it is read as a 24-hour clock.
    """
    match = _TIME_RE.match((text or "").strip())
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) else 0
    meridiem = match.group(3).upper() if match.group(3) else None

    if meridiem:
        if not 1 <= hour <= 12:
            return None
        if meridiem == "AM" and hour == 12:
            hour = 0
        elif meridiem == "PM" and hour != 12:
            hour += 12

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return time(hour, minute)


def parse_schedule_text(text: str) -> Optional[ParsedSchedule]:
    """
    Decode one schedule cell: "<days> | <start> - <end> | <location>".

    Returns None if no weekday is recognized or the time range cannot be
    read. An end time before the start time is passed through unchanged.
    """
    if not isinstance(text, str) or not text.strip():
        return None

    parts = [p.strip() for p in text.split("|")]
    days_part = parts[0]
    times_part = parts[1] if len(parts) > 1 else ""
    location = parts[2] if len(parts) > 2 else ""

    weekdays = parse_days(days_part)
    if not weekdays:
        return None

    match = _RANGE_RE.match(times_part)
    if not match:
        return None

    start = parse_time(match.group(1))
    end = parse_time(match.group(2))
    if start is None or end is None:
        return None

    return ParsedSchedule(weekdays=weekdays, start=start, end=end, location=location)


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------


def parse_row(row: int, columns: Mapping[str, Any]) -> Optional[ScheduleRow]:
    """
    Turn one regrouped row into a ScheduleRow, or None if it fails a gate.
    """
    course = _resolve(columns, COURSE_NAME_COLUMNS)
    schedule_text = _resolve(columns, SCHEDULE_COLUMNS)
    start_raw = _resolve(columns, TERM_START_COLUMNS)
    end_raw = _resolve(columns, TERM_END_COLUMNS)

    if course is None or schedule_text is None or start_raw is None or end_raw is None:
        logger.debug("row %d skipped: missing required field", row)
        return None

    term_start = _term_date(start_raw)
    term_end = _term_date(end_raw)
    if term_start is None or term_end is None:
        logger.debug("row %d skipped: term dates are not date serials", row)
        return None

    schedule_text = _text(schedule_text)
    schedule = parse_schedule_text(schedule_text)
    if schedule is None:
        logger.debug("row %d skipped: unreadable schedule %r", row, schedule_text)
        return None

    return ScheduleRow(
        row=row,
        course_name=_text(course),
        schedule_text=schedule_text,
        term_start=term_start,
        term_end=term_end,
        schedule=schedule,
        section_id=_text(_resolve(columns, SECTION_COLUMNS)),
        instructor=_text(_resolve(columns, INSTRUCTOR_COLUMNS)),
    )


def normalize_rows(cells: Mapping[str, Any]) -> List[ScheduleRow]:
    """
    Build schedule rows from the enrolled-sections cells, in ascending
    row order.
    """
    rows = group_rows(cells)

    out: List[ScheduleRow] = []
    for row in sorted(rows):
        parsed = parse_row(row, rows[row])
        if parsed is not None:
            out.append(parsed)
    return out
