"""
Central data model definitions used across the project.

This module defines the canonical shape of the objects that flow through the
conversion pipeline so that:
- the extractor, the normalizer and the encoder share the same field names
- weekday codes are defined once (RFC 5545 two-letter codes)
- every stage can be tested in isolation with plain values
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, Mapping, Optional, Tuple


# ---------------------------------------------------------------------------
# Weekdays
# ---------------------------------------------------------------------------

# RFC 5545 BYDAY codes, indexed like date.weekday() (Monday == 0)
WEEKDAY_CODES: Tuple[str, ...] = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

# Day tokens as they appear in the schedule column ("M-T-R-F")
DAY_TOKENS: Dict[str, str] = {
    "M": "MO",
    "T": "TU",
    "W": "WE",
    "R": "TH",
    "F": "FR",
    "S": "SA",
    "SA": "SA",
    "U": "SU",
    "SU": "SU",
}


def weekday_code(day: date) -> str:
    """
    Return the RFC 5545 code of the weekday a date falls on.
    """
    return WEEKDAY_CODES[day.weekday()]


def cell_value(raw: Any) -> Any:
    """
    Unwrap a cell as found in the snapshot.

    Spreadsheet readers either hand out plain values or cell objects of the
    form {"v": value, "t": type, ...}; both are accepted.
    """
    if isinstance(raw, Mapping):
        return raw.get("v")
    return raw


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedSchedule:
    """
    Decoded form of the "days | times | location" schedule cell.
    """

    weekdays: Tuple[str, ...]
    start: time
    end: time
    location: str = ""


@dataclass(frozen=True)
class ScheduleRow:
    """
    One spreadsheet row of the enrolled-sections table.

    Only rows that passed every gate of the normalizer exist as ScheduleRow.
    """

    row: int
    course_name: str
    schedule_text: str
    term_start: date
    term_end: date
    schedule: ParsedSchedule
    section_id: str = ""
    instructor: str = ""


@dataclass(frozen=True)
class CalendarEvent:
    """
    Represents one weekly recurring VEVENT.

    start/end are naive local datetimes of the first occurrence; until is the
    aware UTC termination instant of the recurrence.
    """

    uid: str
    start: datetime
    end: datetime
    weekdays: Tuple[str, ...]
    until: datetime
    summary: str
    description: str
    location: str = ""


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of one conversion run.
    """

    text: str
    events: int
    diagnostic: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None
