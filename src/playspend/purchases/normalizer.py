"""Turn a Purchase History export into normalized purchases."""
import json
from datetime import datetime
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import RawPurchaseRecord, NormalizedPurchase
from .price import parse_price
from .title import split_title
from playspend.config.settings import get_settings
from playspend.utils.logger import get_logger
from playspend.utils.exceptions import BatchParseError

logger = get_logger()


class DocumentSchema(BaseModel):
    """Pydantic schema for the purchased item."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(description="Item title, app name in trailing brackets")
    document_type: str = Field(default="", alias="documentType")


class PurchaseHistorySchema(BaseModel):
    """Pydantic schema for the purchaseHistory object."""
    model_config = ConfigDict(populate_by_name=True)

    doc: DocumentSchema
    purchase_time: datetime = Field(alias="purchaseTime")
    invoice_price: Optional[str] = Field(default=None, alias="invoicePrice")
    payment_method_title: Optional[str] = Field(default=None, alias="paymentMethodTitle")
    user_language_code: Optional[str] = Field(default=None, alias="userLanguageCode")
    user_country: Optional[str] = Field(default=None, alias="userCountry")


class PurchaseEntrySchema(BaseModel):
    """Pydantic schema for one element of the export array."""
    model_config = ConfigDict(populate_by_name=True)

    purchase_history: PurchaseHistorySchema = Field(alias="purchaseHistory")

    def to_record(self) -> RawPurchaseRecord:
        history = self.purchase_history
        return RawPurchaseRecord(
            title=history.doc.title,
            purchase_time=history.purchase_time,
            document_type=history.doc.document_type,
            invoice_price=history.invoice_price,
            payment_method=history.payment_method_title,
            user_country=history.user_country,
            user_language=history.user_language_code
        )


class PurchaseNormalizer:
    """Normalizes raw purchase records into analyzable purchases."""

    def __init__(self, date_format: Optional[str] = None):
        """
        Initialize normalizer.

        Args:
            date_format: strftime pattern for the display date, from settings by default
        """
        self.date_format = date_format or get_settings().date_format

    def normalize(self, raw: RawPurchaseRecord) -> NormalizedPurchase:
        """
        Normalize a single raw record.

        Args:
            raw: Record as read from the export

        Returns:
            NormalizedPurchase with parsed amount, currency and app name
        """
        price = parse_price(raw.invoice_price)
        split = split_title(raw.title)
        # Naive timestamps are taken as local time
        local_date = raw.purchase_time.astimezone().date()

        return NormalizedPurchase(
            title=split.display_title,
            app_name=split.app_name,
            amount=price.amount,
            currency=price.currency,
            date=local_date.strftime(self.date_format),
            document_type=raw.document_type,
            purchased_on=local_date
        )

    def parse_records(self, text: str) -> List[RawPurchaseRecord]:
        """
        Validate export text into raw records.

        Raises:
            BatchParseError: If the text is not a JSON array of purchase entries
        """
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise BatchParseError(f"Invalid JSON: {e}")

        if not isinstance(data, list):
            raise BatchParseError(f"Expected a JSON array, got {type(data).__name__}")

        try:
            entries = [PurchaseEntrySchema.model_validate(item) for item in data]
        except ValidationError as e:
            raise BatchParseError(f"Invalid purchase entry: {e}")

        return [entry.to_record() for entry in entries]

    def parse_batch(self, text: str) -> Tuple[NormalizedPurchase, ...]:
        """
        Parse and normalize a whole export in one step.

        Either every record is normalized or none is.

        Args:
            text: Decoded contents of Purchase History.json

        Returns:
            Normalized purchases in export order

        Raises:
            BatchParseError: If the export is malformed
        """
        records = self.parse_records(text)
        purchases = tuple(self.normalize(record) for record in records)

        priced = sum(1 for p in purchases if p.amount > 0)
        logger.info(f"Normalized {len(purchases)} purchases ({priced} with a price)")
        return purchases
