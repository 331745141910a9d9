"""Tests for purchase normalization."""
import json
import unittest
from datetime import datetime, timezone
from decimal import Decimal

from playspend.purchases.models import RawPurchaseRecord
from playspend.purchases.normalizer import PurchaseNormalizer
from playspend.utils.exceptions import BatchParseError


def _entry(title, price=None, when="2023-04-01T12:00:00.000Z", doc_type="In-app purchase", **extra):
    history = {
        "doc": {"documentType": doc_type, "title": title},
        "purchaseTime": when,
        **extra,
    }
    if price is not None:
        history["invoicePrice"] = price
    return {"purchaseHistory": history}


def _local_date(iso_utc):
    return datetime.fromisoformat(iso_utc.replace("Z", "+00:00")).astimezone().date()


class TestPurchaseNormalizer(unittest.TestCase):
    """Test PurchaseNormalizer functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.normalizer = PurchaseNormalizer(date_format="%Y-%m-%d")

    def test_normalize_record(self):
        """Test a single record is parsed into its parts."""
        raw = RawPurchaseRecord(
            title="Gems (Super Game)",
            purchase_time=datetime(2023, 4, 1, 12, 0, tzinfo=timezone.utc),
            document_type="In-app purchase",
            invoice_price="SGD 1.98"
        )

        purchase = self.normalizer.normalize(raw)

        self.assertEqual(purchase.title, "Gems")
        self.assertEqual(purchase.app_name, "Super Game")
        self.assertEqual(purchase.amount, Decimal("1.98"))
        self.assertEqual(purchase.currency, "SGD")
        self.assertEqual(purchase.document_type, "In-app purchase")
        self.assertEqual(purchase.purchased_on, _local_date("2023-04-01T12:00:00Z"))
        self.assertEqual(purchase.date, purchase.purchased_on.strftime("%Y-%m-%d"))

    def test_parse_batch_preserves_order(self):
        """Test every entry is normalized in export order."""
        text = json.dumps([
            _entry("Gems (Super Game)", "SGD 1.98"),
            _entry("Free App", doc_type="Android Apps"),
            _entry("Refunded (Chat)", "$0.00", when="2022-12-31T12:00:00Z"),
        ])

        purchases = self.normalizer.parse_batch(text)

        self.assertEqual([p.title for p in purchases], ["Gems", "Free App", "Refunded"])
        self.assertEqual([p.amount for p in purchases], [Decimal("1.98"), Decimal("0"), Decimal("0")])
        self.assertEqual([p.currency for p in purchases], ["SGD", "", ""])
        self.assertEqual(purchases[1].document_type, "Android Apps")
        self.assertEqual(purchases[2].purchased_on, _local_date("2022-12-31T12:00:00Z"))

    def test_zero_amount_never_has_currency(self):
        """Test the amount/currency invariant holds across a batch."""
        text = json.dumps([
            _entry("A", "Free"), _entry("B", "$0.00"), _entry("C", ""), _entry("D"),
        ])

        for purchase in self.normalizer.parse_batch(text):
            self.assertEqual(purchase.amount, Decimal("0"))
            self.assertEqual(purchase.currency, "")

    def test_optional_fields_and_extra_keys(self):
        """Test payment details are kept and unknown keys are ignored."""
        entry = _entry(
            "Gems (Super Game)", "$4.99",
            paymentMethodTitle="Visa-1234", userCountry="US", userLanguageCode="en",
            somethingNew={"nested": True}
        )

        records = self.normalizer.parse_records(json.dumps([entry]))

        self.assertEqual(records[0].payment_method, "Visa-1234")
        self.assertEqual(records[0].user_country, "US")
        self.assertEqual(records[0].user_language, "en")

    def test_empty_export(self):
        """Test an empty array is a valid, empty dataset."""
        self.assertEqual(self.normalizer.parse_batch("[]"), ())

    def test_malformed_exports_raise_error(self):
        """Test structural problems fail the whole batch."""
        bad_inputs = [
            "not json",
            json.dumps({"purchaseHistory": {}}),
            json.dumps([_entry("Gems", "$1.00"), {"purchaseHistory": {"purchaseTime": "2023-01-01T00:00:00Z"}}]),
            json.dumps([{"somethingElse": 1}]),
            json.dumps([_entry("Gems", "$1.00", when="yesterday")]),
        ]

        for text in bad_inputs:
            with self.assertRaises(BatchParseError) as ctx:
                self.normalizer.parse_batch(text)
            self.assertEqual(str(ctx.exception), BatchParseError.USER_MESSAGE)


if __name__ == "__main__":
    unittest.main()
