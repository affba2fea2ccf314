from __future__ import annotations

from pathlib import Path
import sys
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from voicemover.commands.duration import format_ms, parse_delay_ms


class ParseDelayTests(unittest.TestCase):
    def test_bare_digits_are_seconds(self) -> None:
        for seconds in (1, 30, 120, 86400):
            with self.subTest(seconds=seconds):
                self.assertEqual(parse_delay_ms(str(seconds)), seconds * 1000)

    def test_combined_units(self) -> None:
        self.assertEqual(parse_delay_ms("1h2m3s"), 3723000)

    def test_single_units(self) -> None:
        self.assertEqual(parse_delay_ms("5m"), 300000)
        self.assertEqual(parse_delay_ms("30s"), 30000)
        self.assertEqual(parse_delay_ms("2h"), 7200000)

    def test_whitespace_and_case_are_tolerated(self) -> None:
        self.assertEqual(parse_delay_ms("  1H 30M  "), 5400000)
        self.assertEqual(parse_delay_ms("2 m 5 s"), 125000)

    def test_skipped_units_default_to_zero(self) -> None:
        self.assertEqual(parse_delay_ms("1h5s"), 3605000)

    def test_empty_and_none_are_unparseable(self) -> None:
        self.assertIsNone(parse_delay_ms(""))
        self.assertIsNone(parse_delay_ms("   "))
        self.assertIsNone(parse_delay_ms(None))

    def test_zero_delay_is_unparseable(self) -> None:
        self.assertIsNone(parse_delay_ms("0s"))
        self.assertIsNone(parse_delay_ms("0"))
        self.assertIsNone(parse_delay_ms("0h0m0s"))

    def test_non_numeric_text_is_unparseable(self) -> None:
        self.assertIsNone(parse_delay_ms("abc"))
        self.assertIsNone(parse_delay_ms("soon"))

    def test_trailing_text_after_a_valid_prefix_is_ignored(self) -> None:
        self.assertEqual(parse_delay_ms("5m later"), 300000)

    def test_out_of_order_units_stop_the_scan(self) -> None:
        self.assertEqual(parse_delay_ms("1m2h"), 60000)
        self.assertEqual(parse_delay_ms("5s3m"), 5000)


class FormatMsTests(unittest.TestCase):
    def test_all_units(self) -> None:
        self.assertEqual(format_ms(3723000), "1h 2m 3s")

    def test_zero_renders_explicit_seconds(self) -> None:
        self.assertEqual(format_ms(0), "0s")

    def test_skips_zero_units(self) -> None:
        self.assertEqual(format_ms(90000), "1m 30s")
        self.assertEqual(format_ms(3600000), "1h")
        self.assertEqual(format_ms(3605000), "1h 5s")

    def test_rounds_to_nearest_second(self) -> None:
        self.assertEqual(format_ms(1499), "1s")
        self.assertEqual(format_ms(1500), "2s")
        self.assertEqual(format_ms(400), "0s")


if __name__ == "__main__":
    unittest.main()
