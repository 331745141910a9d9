"""Data models for purchase history records."""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class RawPurchaseRecord:
    """One entry of a Purchase History export, as read."""
    title: str
    purchase_time: datetime
    document_type: str
    invoice_price: Optional[str] = None
    payment_method: Optional[str] = None
    user_country: Optional[str] = None
    user_language: Optional[str] = None


@dataclass(frozen=True)
class ParsedPrice:
    """Amount and currency label extracted from a price string."""
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class SplitTitle:
    """Title with its trailing app name separated out."""
    display_title: str
    app_name: str


@dataclass(frozen=True)
class NormalizedPurchase:
    """Purchase after price/title parsing."""
    title: str
    app_name: str
    amount: Decimal
    currency: str
    date: str  # localized display date
    document_type: str
    purchased_on: date
