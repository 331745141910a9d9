"""Spending over time."""
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Union

from .aggregator import Aggregator, Number
from .listing import spending_currencies
from .models import Bucket, Granularity
from playspend.currency.converter import convert
from playspend.currency.rates import RateTable
from playspend.purchases.models import NormalizedPurchase

# Every period stays explicit unless a smaller threshold is asked for
KEEP_ALL = Decimal(1)


def bucket_key(day: date, granularity: Granularity) -> str:
    """Period label: YYYY-MM-DD, YYYY-MM or YYYY."""
    granularity = Granularity(granularity)
    if granularity is Granularity.DAILY:
        return day.isoformat()
    if granularity is Granularity.MONTHLY:
        return f"{day.year:04d}-{day.month:02d}"
    return f"{day.year:04d}"


def spending_timeline(
    purchases: Iterable[NormalizedPurchase],
    granularity: Granularity,
    target_currency: Optional[str],
    rates: RateTable,
    threshold: Number = KEEP_ALL,
    aggregator: Optional[Aggregator] = None
) -> Union[List[Bucket], Dict[str, List[Bucket]]]:
    """
    Spending per day, month or year, in chronological order.

    Args:
        purchases: Normalized purchases
        granularity: Period size
        target_currency: Currency to convert into; None or "" keeps one
            series per currency without conversion
        rates: Current rate table
        threshold: Cumulative share of periods kept explicit
        aggregator: Aggregator to use, a default one if omitted

    Returns:
        Buckets for the target currency, or a dict of buckets per currency
    """
    aggregator = aggregator or Aggregator()
    granularity = Granularity(granularity)
    purchases = list(purchases)

    def period(purchase: NormalizedPurchase) -> str:
        return bucket_key(purchase.purchased_on, granularity)

    if not target_currency:
        series = {}
        for currency in spending_currencies(purchases):
            result = aggregator.aggregate(
                [p for p in purchases if p.currency == currency],
                period,
                lambda p: p.amount,
                threshold
            )
            series[currency] = _chronological(result.buckets)
        return series

    result = aggregator.aggregate(
        purchases,
        period,
        lambda p: convert(p.amount, p.currency, target_currency, rates),
        threshold
    )
    return _chronological(result.buckets)


def _chronological(buckets) -> List[Bucket]:
    return sorted(buckets, key=lambda bucket: (bucket.is_others, bucket.key))
