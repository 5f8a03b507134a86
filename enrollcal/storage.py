"""
Writing the generated calendar to disk.

Default naming follows the input file:

    schedule.xlsx  ->  schedule_calendar.ics   (same folder)
"""

from __future__ import annotations

from pathlib import Path


CALENDAR_SUFFIX = "_calendar.ics"


def default_output_path(source: str | Path) -> Path:
    """
    Return the .ics path next to the input file.
    """
    src = Path(source)
    return src.with_name(f"{src.stem}{CALENDAR_SUFFIX}")


def write_calendar(text: str, path: str | Path) -> Path:
    """
    Write calendar text as UTF-8.

    Creates parent directories if needed. Bytes are written directly so
    the CRLF line endings survive on every platform.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(text.encode("utf-8"))
    return out
