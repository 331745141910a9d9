"""Tests for totals and missing-rate reporting."""
import unittest
from datetime import date
from decimal import Decimal

from playspend.analysis.totals import missing_rates, total_spent
from playspend.currency.rates import RateTable
from playspend.purchases.models import NormalizedPurchase


def _purchase(amount, currency, title="Item", app_name="App"):
    return NormalizedPurchase(
        title=title,
        app_name=app_name,
        amount=Decimal(amount),
        currency=currency if Decimal(amount) > 0 else "",
        date="2023-01-01",
        document_type="In-app purchase",
        purchased_on=date(2023, 1, 1)
    )


class TestTotalSpent(unittest.TestCase):
    """Test total_spent functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.purchases = [
            _purchase("20", "USD"),
            _purchase("10", "SGD"),
            _purchase("0", ""),
        ]

    def test_missing_rate_counts_as_zero(self):
        self.assertEqual(total_spent(self.purchases, "USD", RateTable()), Decimal("20"))

    def test_converted_total(self):
        rates = RateTable().set_rate("SGD", "USD", "0.74")

        self.assertEqual(total_spent(self.purchases, "USD", rates), Decimal("27.4"))

    def test_per_currency_without_selection(self):
        """Test no selection gives unconverted sums per currency."""
        purchases = self.purchases + [_purchase("5", "USD")]

        for selection in (None, ""):
            self.assertEqual(
                total_spent(purchases, selection, RateTable()),
                {"USD": Decimal("25"), "SGD": Decimal("10")}
            )

    def test_empty(self):
        self.assertEqual(total_spent([], "USD", RateTable()), Decimal("0"))
        self.assertEqual(total_spent([], None, RateTable()), {})


class TestMissingRates(unittest.TestCase):
    """Test missing_rates functionality."""

    def test_reports_unconvertible_currencies(self):
        purchases = [_purchase("1", "USD"), _purchase("1", "SGD"), _purchase("1", "EUR")]
        rates = RateTable().set_rate("SGD", "USD", "0.74")

        self.assertEqual(missing_rates(purchases, "USD", rates), ["EUR"])
        self.assertEqual(missing_rates(purchases, "EUR", rates), ["USD", "SGD"])


if __name__ == "__main__":
    unittest.main()
