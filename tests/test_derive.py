import unittest
from datetime import date

from catalogflat.derive import (
    as_text,
    course_number,
    gen_ed_codes,
    indicator,
    parse_credits,
    parse_date,
    to_24h,
)
from catalogflat.errors import ShapeError


def _category(code: str) -> dict:
    return {"genEdAttributes": {"genEdAttribute": {"code": code}}}


class TestParseCredits(unittest.TestCase):
    def test_first_digit(self) -> None:
        self.assertEqual(parse_credits("3 hours."), 3)
        self.assertEqual(parse_credits("3 OR 4 hours"), 3)
        self.assertEqual(parse_credits("1 TO 4 hours."), 1)

    def test_no_digit_is_none(self) -> None:
        self.assertIsNone(parse_credits("variable"))
        self.assertIsNone(parse_credits(""))
        self.assertIsNone(parse_credits(None))

    def test_zero_is_kept(self) -> None:
        self.assertEqual(parse_credits("0 hours."), 0)


class TestTo24h(unittest.TestCase):
    def test_examples(self) -> None:
        self.assertEqual(to_24h("9:00 AM"), "09:00")
        self.assertEqual(to_24h("12:30 PM"), "12:30")
        self.assertEqual(to_24h("12:15 AM"), "00:15")
        self.assertEqual(to_24h("01:50 PM"), "13:50")
        self.assertEqual(to_24h("11:59 PM"), "23:59")

    def test_malformed_is_none(self) -> None:
        for value in ("noon", "ARRANGED", "9:00", "13:00 PM", "9:60 AM", "9:00AM", "", None, 900):
            with self.subTest(value=value):
                self.assertIsNone(to_24h(value))

    def test_surrounding_whitespace_ignored(self) -> None:
        self.assertEqual(to_24h(" 9:00 AM "), "09:00")


class TestGenEdCodes(unittest.TestCase):
    def test_none(self) -> None:
        self.assertIsNone(gen_ed_codes(None))
        self.assertIsNone(gen_ed_codes([]))

    def test_single_category(self) -> None:
        self.assertEqual(gen_ed_codes(_category("US")), "US:")

    def test_order_preserved_no_dedup(self) -> None:
        self.assertEqual(gen_ed_codes([_category("US"), _category("CS")]), "US:CS:")
        self.assertEqual(gen_ed_codes([_category("US"), _category("US")]), "US:US:")

    def test_category_without_code(self) -> None:
        self.assertIsNone(gen_ed_codes({"genEdAttributes": None}))


class TestCourseNumber(unittest.TestCase):
    def test_split(self) -> None:
        self.assertEqual(course_number("CS 411"), 411)
        self.assertEqual(course_number("ECE  110"), 110)

    def test_bad_shapes_raise(self) -> None:
        for value in ("CS411", "CS 41a", "CS 411 X", "", None, 411):
            with self.subTest(value=value):
                with self.assertRaises(ShapeError):
                    course_number(value)


class TestSmallHelpers(unittest.TestCase):
    def test_parse_date(self) -> None:
        self.assertEqual(parse_date("2020-01-21Z"), date(2020, 1, 21))
        self.assertEqual(parse_date("2020-05-06"), date(2020, 5, 6))
        self.assertIsNone(parse_date("2020-13-40Z"))
        self.assertIsNone(parse_date("TBA"))
        self.assertIsNone(parse_date(None))

    def test_indicator(self) -> None:
        self.assertTrue(indicator("Y"))
        self.assertFalse(indicator("N"))
        self.assertIsNone(indicator(None))
        self.assertIsNone(indicator(""))

    def test_as_text(self) -> None:
        self.assertEqual(as_text(1404), "1404")
        self.assertIsNone(as_text(None))


if __name__ == "__main__":
    unittest.main()
