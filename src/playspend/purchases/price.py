"""Invoice price string parsing."""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from .models import ParsedPrice

# Any run of non-digits, then the number itself
PRICE_PATTERN = re.compile(r"^([^\d]*)([\d.,]+)")

# Longest leading decimal the lenient parse accepts, e.g. "1.2" out of "1.2.3"
_LEADING_DECIMAL = re.compile(r"^\d*(?:\.\d+)?")

ZERO_PRICE = ParsedPrice(amount=Decimal("0"), currency="")


def parse_price(raw: Optional[str]) -> ParsedPrice:
    """
    Split a free-text price such as "SGD1,234.56" or "$4.99".

    Anything that does not yield a positive number comes back as a
    zero amount with no currency, so free items and refunds never carry
    a currency label.

    Args:
        raw: The invoicePrice string, possibly missing

    Returns:
        ParsedPrice with amount and currency label
    """
    if not raw:
        return ZERO_PRICE

    match = PRICE_PATTERN.match(raw)
    if not match:
        return ZERO_PRICE

    currency_str, number_str = match.groups()
    amount = _to_decimal(number_str.replace(",", ""))

    if amount == 0:
        return ZERO_PRICE

    return ParsedPrice(amount=amount, currency=currency_str.strip())


def _to_decimal(number_str: str) -> Decimal:
    """Parse the leading decimal of number_str, 0 if there is none."""
    leading = _LEADING_DECIMAL.match(number_str).group(0)
    if not leading:
        return Decimal("0")
    try:
        return Decimal(leading)
    except InvalidOperation:
        return Decimal("0")
