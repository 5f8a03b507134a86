"""
One-call conversion: cell snapshot -> calendar text.

    extract_enrolled_cells -> normalize_rows -> encode_calendar

Individual bad rows never fail a run. The only failure is an input that is
not a cell mapping at all; then the result carries an empty calendar and a
diagnostic message.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from enrollcal.export_ics import empty_calendar, encode_calendar
from enrollcal.extract import extract_enrolled_cells
from enrollcal.model import ConversionResult
from enrollcal.parse import normalize_rows
from enrollcal.timezones import DEFAULT_TZID, clean_tzid


logger = logging.getLogger(__name__)


def convert_cells(
    cells: Any,
    tzid: Optional[str] = DEFAULT_TZID,
    now: Optional[datetime] = None,
) -> ConversionResult:
    """
    Convert a spreadsheet cell snapshot into an iCalendar document.

    A blank tzid means the default zone.
    """
    if not isinstance(cells, Mapping):
        diagnostic = f"Expected a mapping of cell addresses to values, got {type(cells).__name__}"
        logger.warning("conversion failed: %s", diagnostic)
        return ConversionResult(text=empty_calendar(), events=0, diagnostic=diagnostic)

    tzid = clean_tzid(tzid)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    enrolled = extract_enrolled_cells(cells)
    rows = normalize_rows(enrolled)
    text, count = encode_calendar(rows, tzid, now)

    logger.debug("%d cells in region, %d rows, %d events", len(enrolled), len(rows), count)
    return ConversionResult(text=text, events=count)
