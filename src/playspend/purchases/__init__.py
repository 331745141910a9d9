"""Purchase history parsing module."""
from .models import RawPurchaseRecord, NormalizedPurchase, ParsedPrice, SplitTitle
from .price import parse_price
from .title import split_title
from .normalizer import PurchaseNormalizer

__all__ = [
    "RawPurchaseRecord",
    "NormalizedPurchase",
    "ParsedPrice",
    "SplitTitle",
    "parse_price",
    "split_title",
    "PurchaseNormalizer"
]
