"""Tests for invoice price parsing."""
import unittest
from decimal import Decimal

from playspend.purchases.price import parse_price


class TestParsePrice(unittest.TestCase):
    """Test parse_price functionality."""

    def test_code_prefix_with_thousands(self):
        """Test currency code directly followed by the amount."""
        price = parse_price("SGD1,234.56")

        self.assertEqual(price.amount, Decimal("1234.56"))
        self.assertEqual(price.currency, "SGD")

    def test_symbol_prefix(self):
        """Test symbol prefixes are kept verbatim."""
        self.assertEqual(parse_price("$4.99").currency, "$")
        self.assertEqual(parse_price("₹1,299.00").amount, Decimal("1299"))

    def test_prefix_whitespace_trimmed(self):
        """Test spaces around the label are dropped."""
        price = parse_price("  SGD 2.98")

        self.assertEqual(price.currency, "SGD")
        self.assertEqual(price.amount, Decimal("2.98"))

    def test_prefix_and_amount_rebuild_input(self):
        """Test label and amount concatenate back to the input."""
        price = parse_price("SGD1234.56")
        self.assertEqual(f"{price.currency}{price.amount}", "SGD1234.56")

    def test_missing_or_empty(self):
        """Test missing price gives zero without currency."""
        for raw in (None, ""):
            price = parse_price(raw)
            self.assertEqual(price.amount, Decimal("0"))
            self.assertEqual(price.currency, "")

    def test_no_digits(self):
        """Test text without a number gives zero."""
        price = parse_price("Free")

        self.assertEqual(price.amount, Decimal("0"))
        self.assertEqual(price.currency, "")

    def test_zero_amount_drops_currency(self):
        """Test free and refunded entries carry no currency."""
        price = parse_price("$0.00")

        self.assertEqual(price.amount, Decimal("0"))
        self.assertEqual(price.currency, "")

    def test_number_without_prefix(self):
        """Test a bare number has an empty currency."""
        price = parse_price("1.99")

        self.assertEqual(price.amount, Decimal("1.99"))
        self.assertEqual(price.currency, "")

    def test_malformed_number_uses_leading_part(self):
        """Test extra separators stop the number instead of failing."""
        self.assertEqual(parse_price("USD1.2.3").amount, Decimal("1.2"))
        self.assertEqual(parse_price("USD ...").amount, Decimal("0"))
        self.assertEqual(parse_price("USD ...").currency, "")

    def test_trailing_text_ignored(self):
        """Test only the leading label and number are read."""
        price = parse_price("€3.50 incl. VAT")

        self.assertEqual(price.amount, Decimal("3.50"))
        self.assertEqual(price.currency, "€")


if __name__ == "__main__":
    unittest.main()
