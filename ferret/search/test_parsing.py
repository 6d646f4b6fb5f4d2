import os
import unittest
from datetime import timedelta
from unittest.mock import patch

from ferret.search.parsing import parse_duration, parse_goto, parse_page, parse_timeout
from ferret.shared.settings import reload_settings


class TestParseDuration(unittest.TestCase):

    def test_valid_durations(self):
        cases = {
            "5000ms": timedelta(milliseconds=5000),
            "2s": timedelta(seconds=2),
            "1.5s": timedelta(seconds=1.5),
            "1m30s": timedelta(seconds=90),
            "1h": timedelta(hours=1),
            "250us": timedelta(microseconds=250),
            "0": timedelta(0),
            "-2s": timedelta(seconds=-2),
            " 3s ": timedelta(seconds=3),
        }
        for text, expected in cases.items():
            with self.subTest(text=text):
                self.assertEqual(parse_duration(text), expected)

    def test_invalid_durations(self):
        for text in ["", "5", "abc", "5 s", "s", "1x", "-", "10ms garbage"]:
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_duration(text)

    def test_out_of_range_durations(self):
        for text in ["99999999999999h", "3000000h", "-3000000h", "9223372037s"]:
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_duration(text)

    def test_largest_duration(self):
        self.assertEqual(parse_duration("2562047h"), timedelta(hours=2562047))


class TestParsePageAndGoto(unittest.TestCase):

    def test_parse_page(self):
        self.assertEqual(parse_page("3"), 3)
        self.assertEqual(parse_page(""), 1)
        self.assertEqual(parse_page(None), 1)
        self.assertEqual(parse_page("0"), 1)
        self.assertEqual(parse_page("-4"), 1)
        self.assertEqual(parse_page("two"), 1)

    def test_parse_goto(self):
        self.assertEqual(parse_goto("2"), 2)
        self.assertEqual(parse_goto(""), 0)
        self.assertEqual(parse_goto(None), 0)
        self.assertEqual(parse_goto("-1"), 0)
        self.assertEqual(parse_goto("first"), 0)


class TestParseTimeout(unittest.TestCase):

    def test_explicit_value(self):
        self.assertEqual(parse_timeout("2s", default="9s"), timedelta(seconds=2))

    def test_malformed_explicit_value_falls_back_to_5000ms(self):
        self.assertEqual(parse_timeout("soon", default="9s"), timedelta(milliseconds=5000))

    def test_empty_value_uses_default(self):
        self.assertEqual(parse_timeout("", default="9s"), timedelta(seconds=9))
        self.assertEqual(parse_timeout(None, default="750ms"), timedelta(milliseconds=750))

    def test_out_of_range_value_falls_back_to_5000ms(self):
        self.assertEqual(parse_timeout("99999999999999h", default="9s"), timedelta(milliseconds=5000))

    def test_malformed_default_falls_back_to_5000ms(self):
        self.assertEqual(parse_timeout("", default="later"), timedelta(milliseconds=5000))

    def test_default_comes_from_settings(self):
        with patch.dict(os.environ, {"FERRET_SEARCH_TIMEOUT": "1500ms"}):
            reload_settings()
            self.assertEqual(parse_timeout(""), timedelta(milliseconds=1500))


if __name__ == '__main__':
    unittest.main()
