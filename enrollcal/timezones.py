"""
Compiled-in VTIMEZONE definitions.

Calendar clients need the zone rules inside the file to place TZID-qualified
times correctly. We do not consult a timezone database: each supported zone
is a fixed standard/daylight rule pair (current North American rules).

The same block text is fed to dateutil's iCalendar parser to get a tzinfo,
so the UTC conversions we do agree with what we write into the file.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import tzinfo
from typing import Dict, List, Optional, Tuple

from dateutil import tz


DEFAULT_TZID = "America/New_York"


@dataclass(frozen=True)
class Transition:
    """
    One yearly observance (STANDARD or DAYLIGHT) of a zone.
    """

    kind: str
    name: str
    offset_from: str
    offset_to: str
    dtstart: str
    rrule: Optional[str] = None


@dataclass(frozen=True)
class ZoneRules:
    observances: Tuple[Transition, ...]


def _us_rules(std_name: str, std_offset: str, dst_name: str, dst_offset: str) -> ZoneRules:
    # 2nd Sunday of March and 1st Sunday of November, 02:00 local
    return ZoneRules(
        observances=(
            Transition(
                kind="DAYLIGHT",
                name=dst_name,
                offset_from=std_offset,
                offset_to=dst_offset,
                dtstart="19700308T020000",
                rrule="FREQ=YEARLY;BYMONTH=3;BYDAY=2SU",
            ),
            Transition(
                kind="STANDARD",
                name=std_name,
                offset_from=dst_offset,
                offset_to=std_offset,
                dtstart="19701101T020000",
                rrule="FREQ=YEARLY;BYMONTH=11;BYDAY=1SU",
            ),
        )
    )


ZONES: Dict[str, ZoneRules] = {
    "America/New_York": _us_rules("EST", "-0500", "EDT", "-0400"),
    "America/Toronto": _us_rules("EST", "-0500", "EDT", "-0400"),
    "America/Chicago": _us_rules("CST", "-0600", "CDT", "-0500"),
    "America/Denver": _us_rules("MST", "-0700", "MDT", "-0600"),
    "America/Los_Angeles": _us_rules("PST", "-0800", "PDT", "-0700"),
    "America/Vancouver": _us_rules("PST", "-0800", "PDT", "-0700"),
    "America/Phoenix": ZoneRules(
        observances=(
            Transition(
                kind="STANDARD",
                name="MST",
                offset_from="-0700",
                offset_to="-0700",
                dtstart="19700101T000000",
            ),
        )
    ),
}


def clean_tzid(tzid: Optional[str]) -> str:
    """
    Normalize a caller-supplied zone identifier.

    Double quotes and control characters cannot appear in an iCalendar
    parameter value and are dropped. A blank identifier means the default
    zone.
    """
    text = "".join(ch for ch in (tzid or "") if ch != '"' and ord(ch) >= 32 and ord(ch) != 127)
    return text.strip() or DEFAULT_TZID


def known_zones() -> List[str]:
    return sorted(ZONES)


def zone_rules(tzid: str) -> ZoneRules:
    """
    Rules for a zone identifier. Unknown identifiers get the default zone's
    rules (the identifier itself is still written as given).
    """
    return ZONES.get(tzid, ZONES[DEFAULT_TZID])


def vtimezone_lines(tzid: str) -> List[str]:
    """
    Return the VTIMEZONE block for a zone as unterminated content lines.
    """
    lines = ["BEGIN:VTIMEZONE", f"TZID:{tzid}"]
    for obs in zone_rules(tzid).observances:
        lines.append(f"BEGIN:{obs.kind}")
        lines.append(f"TZOFFSETFROM:{obs.offset_from}")
        lines.append(f"TZOFFSETTO:{obs.offset_to}")
        lines.append(f"TZNAME:{obs.name}")
        lines.append(f"DTSTART:{obs.dtstart}")
        if obs.rrule:
            lines.append(f"RRULE:{obs.rrule}")
        lines.append(f"END:{obs.kind}")
    lines.append("END:VTIMEZONE")
    return lines


def zone_tzinfo(tzid: str) -> tzinfo:
    """
    Build a tzinfo from the VTIMEZONE block we emit for this zone.
    """
    text = "\n".join(vtimezone_lines(tzid))
    return tz.tzical(io.StringIO(text)).get(tzid)
