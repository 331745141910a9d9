"""Currency conversion against a RateTable."""
from decimal import Decimal, InvalidOperation

from .rates import RateTable
from playspend.utils.logger import get_logger

logger = get_logger()


def convert(amount: Decimal, from_currency: str, to_currency: str, rates: RateTable) -> Decimal:
    """
    Convert amount into to_currency.

    Amounts without a known rate convert to zero, so a converted total
    leaves them out instead of failing.

    Args:
        amount: Amount in from_currency
        from_currency: Currency the amount was charged in
        to_currency: Currency to express it in
        rates: Current rate table

    Returns:
        Converted amount, or 0 if no rate is known
    """
    if from_currency == to_currency:
        return amount

    rate = rates.get_rate(from_currency, to_currency)
    if not rate:
        logger.debug(f"No rate for {from_currency}->{to_currency}, counting {amount} as 0")
        return Decimal(0)

    try:
        return amount * Decimal(rate)
    except InvalidOperation:
        logger.warning(f"Stored rate {rate!r} for {from_currency}->{to_currency} is not a number")
        return Decimal(0)
