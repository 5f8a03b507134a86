"""
Tests for CLI entry points.

These tests focus on:
- Converting the sample sheet dump into an .ics file
- Exit codes for unusable input
- The read-only commands (preview, zones)
"""

import io
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from enrollcal.cli import main


DATA_DIR = Path(__file__).resolve().parent / "data"


def _run(argv: list) -> tuple:
    """
    Run the CLI and return (exit code, captured stdout).
    """
    buf = io.StringIO()
    code = None
    with redirect_stdout(buf):
        try:
            main(argv)
        except SystemExit as e:
            code = e.code
    return code, buf.getvalue()


class TestCLI(unittest.TestCase):
    def test_convert_writes_default_output(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / "enrolled_sections.json"
            shutil.copy(DATA_DIR / "enrolled_sections.json", src)

            code, out = _run(["convert", str(src)])
            self.assertEqual(code, 0)

            target = Path(d) / "enrolled_sections_calendar.ics"
            self.assertTrue(target.exists())
            self.assertIn("Exported 3 events", out)
            text = target.read_bytes().decode("utf-8")
            self.assertEqual(text.count("BEGIN:VEVENT"), 3)
            self.assertIn("\r\n", text)

    def test_convert_with_output_and_timezone(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            out_path = Path(d) / "cal" / "fall.ics"
            code, _ = _run(
                ["convert", str(DATA_DIR / "enrolled_sections.json"), "-o", str(out_path), "--tz", "America/Denver"]
            )
            self.assertEqual(code, 0)
            self.assertIn("TZID:America/Denver", out_path.read_text(encoding="utf-8"))

    def test_convert_rejects_non_mapping_input(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / "cells.json"
            src.write_text("[]", encoding="utf-8")

            code, out = _run(["convert", str(src)])
            self.assertEqual(code, 1)
            self.assertIn("Conversion failed", out)
            self.assertFalse((Path(d) / "cells_calendar.ics").exists())

    def test_convert_missing_or_unsupported_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            code, out = _run(["convert", str(Path(d) / "nope.xlsx")])
            self.assertEqual(code, 1)
            self.assertIn("not found", out)

            csv = Path(d) / "cells.csv"
            csv.write_text("a,b\n", encoding="utf-8")
            code, out = _run(["convert", str(csv)])
            self.assertEqual(code, 1)
            self.assertIn("Unsupported input file type", out)

    def test_convert_broken_json(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / "cells.json"
            src.write_text("{not json", encoding="utf-8")
            code, out = _run(["convert", str(src)])
            self.assertEqual(code, 1)
            self.assertIn("Invalid JSON", out)

    def test_preview(self) -> None:
        code, out = _run(["preview", str(DATA_DIR / "enrolled_sections.json")])
        self.assertEqual(code, 0)
        self.assertIn("3 sections", out)

    def test_zones(self) -> None:
        code, out = _run(["zones"])
        self.assertEqual(code, 0)
        self.assertIn("America/New_York (default)", out)

    def test_command_is_required(self) -> None:
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main([])
        self.assertNotEqual(ctx.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
