"""
iCalendar (.ics) export.

We turn schedule rows into weekly recurring events that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Every event is TZID-qualified and the matching VTIMEZONE block is embedded,
so the file does not depend on the importing client's zone database.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, List, Optional, Sequence, Tuple

from enrollcal.model import CalendarEvent, ScheduleRow, weekday_code
from enrollcal.timezones import clean_tzid, vtimezone_lines, zone_tzinfo


PRODID = "-//enrollcal//Enrolled Sections to iCalendar//EN"
UID_DOMAIN = "enrollcal"

# Upper bound for the first-occurrence search, in days
SEARCH_LIMIT = 14

# RFC 5545: content lines SHOULD NOT be longer than 75 octets
MAX_LINE_OCTETS = 75


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (backslash, semicolon, comma, newlines).
    """
    return (
        text.replace("\\", "\\\\")
        .replace("\r\n", "\\n")
        .replace("\r", "\\n")
        .replace("\n", "\\n")
        .replace(";", "\\;")
        .replace(",", "\\,")
    )


def _param_value(value: str) -> str:
    """
    Quote a parameter value that contains ':', ';' or ','.
    """
    if any(ch in value for ch in ":;,"):
        return f'"{value}"'
    return value


def _fold(line: str) -> List[str]:
    """
    Split a content line into 75-octet chunks; continuation chunks start
    with a single space. UTF-8 sequences are never cut.
    """
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return [line]

    chunks: List[str] = []
    current = ""
    size = 0
    for ch in line:
        width = len(ch.encode("utf-8"))
        if size + width > MAX_LINE_OCTETS:
            chunks.append(current)
            current = " "
            size = 1
        current += ch
        size += width
    chunks.append(current)
    return chunks


def _dt_local(value: datetime) -> str:
    return value.strftime("%Y%m%dT%H%M%S")


def _dt_utc(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


# ---------------------------------------------------------------------------
# Recurrence math
# ---------------------------------------------------------------------------


def first_occurrence(start: date, weekdays: Iterable[str], limit: int = SEARCH_LIMIT) -> Optional[date]:
    """
    Return the first date on or after start whose weekday is in weekdays.
    Gives up (None) after limit candidate days.
    """
    wanted = set(weekdays)
    day = start
    for _ in range(limit):
        if weekday_code(day) in wanted:
            return day
        day += timedelta(days=1)
    return None


def recurrence_until(term_end: date, zone: tzinfo) -> datetime:
    """
    UNTIL instant: last term day at 23:59:59 local time, in UTC, plus one day.

    The extra day keeps the final meeting for clients that expand
    recurrences end-exclusive or in a shifted zone.
    """
    local_end = datetime.combine(term_end, time(23, 59, 59), tzinfo=zone)
    return local_end.astimezone(timezone.utc) + timedelta(days=1)


def make_uid(now: datetime, row: int) -> str:
    """
    Unique id from the wall clock, the source row and a short random part.
    """
    millis = int(now.timestamp() * 1000)
    return f"{millis}-{row}-{uuid.uuid4().hex[:7]}@{UID_DOMAIN}"


def _description(row: ScheduleRow) -> str:
    parts = [row.course_name]
    if row.section_id:
        parts.append(f"Section: {row.section_id}")
    if row.instructor:
        parts.append(f"Instructor: {row.instructor}")
    parts.append(f"Schedule: {row.schedule_text}")
    return " ".join(parts)


def build_event(row: ScheduleRow, zone: tzinfo, now: datetime, uid: Optional[str] = None) -> Optional[CalendarEvent]:
    """
    Build the recurring event for one row, or None if no meeting day is
    found after the term start.
    """
    schedule = row.schedule
    first = first_occurrence(row.term_start, schedule.weekdays)
    if first is None:
        return None

    return CalendarEvent(
        uid=uid if uid else make_uid(now, row.row),
        start=datetime.combine(first, schedule.start),
        end=datetime.combine(first, schedule.end),
        weekdays=schedule.weekdays,
        until=recurrence_until(row.term_end, zone),
        summary=row.course_name,
        description=_description(row),
        location=schedule.location,
    )


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _prologue() -> List[str]:
    return [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]


def _join(lines: Sequence[str]) -> str:
    # ICS standard uses CRLF
    folded: List[str] = []
    for line in lines:
        folded.extend(_fold(line))
    return "\r\n".join(folded) + "\r\n"


def event_lines(event: CalendarEvent, tzid: str, now: datetime) -> List[str]:
    """
    Content lines of one VEVENT block.
    """
    rrule = f"FREQ=WEEKLY;BYDAY={','.join(event.weekdays)};UNTIL={_dt_utc(event.until)};WKST=SU"
    tz_param = _param_value(tzid)

    lines: List[str] = []
    lines.append("BEGIN:VEVENT")
    lines.append(f"UID:{event.uid}")
    lines.append(f"DTSTAMP:{_dt_utc(now)}")
    lines.append(f"DTSTART;TZID={tz_param}:{_dt_local(event.start)}")
    lines.append(f"DTEND;TZID={tz_param}:{_dt_local(event.end)}")
    lines.append(f"SUMMARY:{_ics_escape(event.summary)}")
    lines.append(f"DESCRIPTION:{_ics_escape(event.description)}")
    if event.location:
        lines.append(f"LOCATION:{_ics_escape(event.location)}")
    lines.append(f"RRULE:{rrule}")
    lines.append("END:VEVENT")
    return lines


def render_calendar(events: Sequence[CalendarEvent], tzid: str, now: datetime) -> str:
    lines = _prologue()
    lines.extend(vtimezone_lines(tzid))
    for event in events:
        lines.extend(event_lines(event, tzid, now))
    lines.append("END:VCALENDAR")
    return _join(lines)


def empty_calendar() -> str:
    """
    Header/footer-only document, returned when the input is unusable.
    """
    return _join(_prologue() + ["END:VCALENDAR"])


def encode_calendar(rows: Iterable[ScheduleRow], tzid: str, now: datetime) -> Tuple[str, int]:
    """
    Encode schedule rows into calendar text. Returns (text, event count).

    now is the wall-clock instant used for DTSTAMP and UIDs.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    tzid = clean_tzid(tzid)
    zone = zone_tzinfo(tzid)

    events: List[CalendarEvent] = []
    for row in rows:
        event = build_event(row, zone, now)
        if event is not None:
            events.append(event)

    return render_calendar(events, tzid, now), len(events)
