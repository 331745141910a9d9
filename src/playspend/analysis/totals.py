"""Total spending, converted or per currency."""
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Union

from .listing import spending_currencies
from playspend.currency.converter import convert
from playspend.currency.rates import RateTable
from playspend.purchases.models import NormalizedPurchase
from playspend.utils.logger import get_logger

logger = get_logger()


def total_spent(
    purchases: Iterable[NormalizedPurchase],
    target_currency: Optional[str],
    rates: RateTable
) -> Union[Decimal, Dict[str, Decimal]]:
    """
    Total of all priced purchases.

    Args:
        purchases: Normalized purchases
        target_currency: Currency to convert into; None or "" for no selection
        rates: Current rate table

    Returns:
        A single converted total when a target currency is given (purchases
        without a rate count as 0), otherwise one unconverted sum per currency
    """
    priced = [p for p in purchases if p.amount > 0]

    if not target_currency:
        totals: Dict[str, Decimal] = {}
        for purchase in priced:
            totals[purchase.currency] = totals.get(purchase.currency, Decimal(0)) + purchase.amount
        return totals

    total = sum(
        (convert(p.amount, p.currency, target_currency, rates) for p in priced),
        Decimal(0)
    )
    missing = missing_rates(priced, target_currency, rates)
    if missing:
        logger.info(f"Total in {target_currency} leaves out purchases in {', '.join(missing)} (no rate)")
    return total


def missing_rates(
    purchases: Iterable[NormalizedPurchase],
    target_currency: str,
    rates: RateTable
) -> List[str]:
    """Currencies of priced purchases that cannot be converted to target_currency."""
    return [
        currency for currency in spending_currencies(purchases)
        if rates.get_rate(currency, target_currency) is None
    ]
