import unittest
from decimal import Decimal

from src.core.errors import MalformedInput
from src.utils.currency import cents_to_dollars, format_currency


class TestFormatCurrency(unittest.TestCase):
    def test_zero(self):
        self.assertEqual(format_currency(0), "$0.00")

    def test_thousands_separator(self):
        self.assertEqual(format_currency(123456), "$1,234.56")
        self.assertEqual(format_currency(100000000), "$1,000,000.00")

    def test_negative_keeps_sign(self):
        self.assertEqual(format_currency(-5000), "-$50.00")

    def test_none_is_zero(self):
        self.assertEqual(format_currency(None), "$0.00")

    def test_rounds_fractional_cents(self):
        self.assertEqual(format_currency(12.5), "$0.13")
        self.assertEqual(format_currency(Decimal("99.4")), "$0.99")

    def test_formatted_value_parses_back(self):
        for cents in (1, 99, 15795, -250, 70000):
            text = format_currency(cents).replace("$", "").replace(",", "")
            self.assertEqual(Decimal(text), Decimal(cents) / 100)

    def test_nan_and_infinity_rejected(self):
        for value in (float("nan"), float("inf"), Decimal("NaN"), "abc", True):
            with self.assertRaises(MalformedInput):
                format_currency(value)


class TestCentsToDollars(unittest.TestCase):
    def test_exact_division(self):
        self.assertEqual(cents_to_dollars(15795), Decimal("157.95"))
        self.assertEqual(cents_to_dollars(1), Decimal("0.01"))
        self.assertEqual(cents_to_dollars(0), Decimal("0"))

    def test_invalid(self):
        with self.assertRaises(MalformedInput):
            cents_to_dollars(None)
