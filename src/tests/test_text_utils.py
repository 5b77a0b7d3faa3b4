# tests/test_text_utils.py
import datetime
import unittest
from src.utils.text_utils import (
    escape_like, ilike_pattern, parse_amount_cents, parse_date_range, quote_filter_value,
)


class TestTextUtils(unittest.TestCase):
    def test_quote_plain(self):
        self.assertEqual(quote_filter_value("acme"), '"acme"')

    def test_quote_reserved_characters(self):
        self.assertEqual(quote_filter_value("a,b.(c)"), '"a,b.(c)"')

    def test_quote_escapes_quotes_and_backslashes(self):
        self.assertEqual(quote_filter_value('say "hi"'), '"say \\"hi\\""')
        self.assertEqual(quote_filter_value("a\\b"), '"a\\\\b"')

    def test_ilike_pattern(self):
        self.assertEqual(ilike_pattern("acme"), '"*acme*"')

    def test_escape_like(self):
        self.assertEqual(escape_like("50%"), "50\\%")
        self.assertEqual(escape_like("first_name"), "first\\_name")
        self.assertEqual(escape_like("a\\b"), "a\\\\b")

    def test_ilike_pattern_wildcards_are_literal(self):
        self.assertEqual(ilike_pattern("%"), '"*\\\\%*"')
        self.assertEqual(ilike_pattern("_"), '"*\\\\_*"')

    def test_amount_out_of_column_range(self):
        self.assertEqual(parse_amount_cents("2147483647"), 2147483647)
        self.assertIsNone(parse_amount_cents("2147483648"))
        self.assertIsNone(parse_amount_cents("5551234567890"))
        self.assertIsNone(parse_amount_cents("21474836.48"))

    def test_amount_cents(self):
        self.assertEqual(parse_amount_cents("15795"), 15795)
        self.assertEqual(parse_amount_cents(" 42 "), 42)

    def test_amount_dollars(self):
        self.assertEqual(parse_amount_cents("157.95"), 15795)
        self.assertEqual(parse_amount_cents("20.5"), 2050)

    def test_amount_not_a_number(self):
        self.assertIsNone(parse_amount_cents("acme"))
        self.assertIsNone(parse_amount_cents("1.234"))
        self.assertIsNone(parse_amount_cents("-5"))
        self.assertIsNone(parse_amount_cents(""))

    def test_date_year(self):
        self.assertEqual(
            parse_date_range("2023"),
            (datetime.date(2023, 1, 1), datetime.date(2024, 1, 1)),
        )

    def test_date_month(self):
        self.assertEqual(
            parse_date_range("2023-06"),
            (datetime.date(2023, 6, 1), datetime.date(2023, 7, 1)),
        )
        self.assertEqual(
            parse_date_range("2022-12"),
            (datetime.date(2022, 12, 1), datetime.date(2023, 1, 1)),
        )

    def test_date_day(self):
        self.assertEqual(
            parse_date_range("2024-02-29"),
            (datetime.date(2024, 2, 29), datetime.date(2024, 3, 1)),
        )

    def test_date_invalid(self):
        self.assertIsNone(parse_date_range("2023-13"))
        self.assertIsNone(parse_date_range("2023-02-30"))
        self.assertIsNone(parse_date_range("0000"))
        self.assertIsNone(parse_date_range("pending"))
