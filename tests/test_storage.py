"""
Unit tests for writing the calendar file.

Storage contract:
- Default output sits next to the input as <stem>_calendar.ics
- Parent folders are created
- Text is written as UTF-8 with CRLF kept as-is
"""

import tempfile
import unittest
from pathlib import Path

from enrollcal.storage import default_output_path, write_calendar


class TestStorage(unittest.TestCase):
    def test_default_output_path(self) -> None:
        self.assertEqual(
            default_output_path(Path("exports") / "My Courses.xlsx"),
            Path("exports") / "My Courses_calendar.ics",
        )

    def test_write_keeps_crlf_and_utf8(self) -> None:
        text = "BEGIN:VCALENDAR\r\nSUMMARY:Économie\r\nEND:VCALENDAR\r\n"
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "out.ics"
            returned = write_calendar(text, p)
            self.assertEqual(returned, p)
            self.assertEqual(p.read_bytes(), text.encode("utf-8"))


if __name__ == "__main__":
    unittest.main()
