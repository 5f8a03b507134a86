import unittest
from datetime import datetime, timedelta

from enrollcal.timezones import DEFAULT_TZID, clean_tzid, known_zones, vtimezone_lines, zone_tzinfo


class TestTimezones(unittest.TestCase):
    def test_default_zone_is_known(self) -> None:
        self.assertIn(DEFAULT_TZID, known_zones())

    def test_block_shape(self) -> None:
        lines = vtimezone_lines("America/Denver")
        self.assertEqual(lines[0], "BEGIN:VTIMEZONE")
        self.assertEqual(lines[1], "TZID:America/Denver")
        self.assertEqual(lines[-1], "END:VTIMEZONE")
        self.assertIn("TZNAME:MDT", lines)
        self.assertIn("TZOFFSETTO:-0700", lines)

    def test_offsets_follow_the_embedded_rules(self) -> None:
        chicago = zone_tzinfo("America/Chicago")
        self.assertEqual(datetime(2025, 1, 15, 12, tzinfo=chicago).utcoffset(), timedelta(hours=-6))
        self.assertEqual(datetime(2025, 7, 15, 12, tzinfo=chicago).utcoffset(), timedelta(hours=-5))

    def test_transition_days(self) -> None:
        ny = zone_tzinfo("America/New_York")
        # 2025: DST from March 9 to November 2
        self.assertEqual(datetime(2025, 3, 8, 12, tzinfo=ny).utcoffset(), timedelta(hours=-5))
        self.assertEqual(datetime(2025, 3, 10, 12, tzinfo=ny).utcoffset(), timedelta(hours=-4))
        self.assertEqual(datetime(2025, 11, 1, 12, tzinfo=ny).utcoffset(), timedelta(hours=-4))
        self.assertEqual(datetime(2025, 11, 3, 12, tzinfo=ny).utcoffset(), timedelta(hours=-5))

    def test_zone_without_daylight_time(self) -> None:
        phoenix = zone_tzinfo("America/Phoenix")
        self.assertNotIn("BEGIN:DAYLIGHT", vtimezone_lines("America/Phoenix"))
        self.assertEqual(datetime(2025, 7, 15, 12, tzinfo=phoenix).utcoffset(), timedelta(hours=-7))

    def test_unknown_zone_uses_default_rules(self) -> None:
        lines = vtimezone_lines("America/Somewhere")
        self.assertEqual(lines[1], "TZID:America/Somewhere")
        self.assertEqual(lines[2:], vtimezone_lines(DEFAULT_TZID)[2:])
        tz = zone_tzinfo("America/Somewhere")
        self.assertEqual(datetime(2025, 1, 15, 12, tzinfo=tz).utcoffset(), timedelta(hours=-5))

    def test_clean_tzid_blank_means_default(self) -> None:
        for blank in (None, "", "   ", '""', "\t\r\n"):
            self.assertEqual(clean_tzid(blank), DEFAULT_TZID)

    def test_clean_tzid_drops_quotes_and_control_characters(self) -> None:
        self.assertEqual(clean_tzid(" America/Chicago "), "America/Chicago")
        self.assertEqual(clean_tzid('Bad"Zone\r\n'), "BadZone")
        self.assertEqual(clean_tzid("A\x00B\x7fC"), "ABC")
        self.assertEqual(clean_tzid("UTC+05:30"), "UTC+05:30")

    def test_zone_id_with_separators_resolves(self) -> None:
        for tzid in ("UTC+05:30", "A,B", "X;y"):
            tz = zone_tzinfo(tzid)
            self.assertEqual(datetime(2025, 1, 15, 12, tzinfo=tz).utcoffset(), timedelta(hours=-5))


if __name__ == "__main__":
    unittest.main()
