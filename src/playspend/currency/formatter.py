"""Render amounts as currency strings for display."""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Optional, Union

# (ISO code, symbol) pairs; a symbol may belong to several codes
CURRENCY_SYMBOLS = [
    ("USD", "$"), ("CAD", "$"), ("AUD", "$"), ("NZD", "$"), ("SGD", "$"),
    ("HKD", "$"), ("MXN", "$"), ("TWD", "$"), ("ARS", "$"), ("CLP", "$"),
    ("COP", "$"), ("EUR", "€"), ("GBP", "£"), ("GIP", "£"), ("FKP", "£"),
    ("JPY", "¥"), ("CNY", "¥"), ("INR", "₹"), ("KRW", "₩"), ("KPW", "₩"),
    ("RUB", "₽"), ("TRY", "₺"), ("VND", "₫"), ("PHP", "₱"), ("CUP", "₱"),
    ("ILS", "₪"), ("BRL", "R$"), ("MYR", "RM"), ("IDR", "Rp"), ("PLN", "zł"),
    ("SEK", "kr"), ("NOK", "kr"), ("DKK", "kr"), ("ISK", "kr"), ("CHF", "CHF"),
    ("ZAR", "R"), ("THB", "฿"), ("NGN", "₦"), ("UAH", "₴"), ("KZT", "₸"),
    ("CZK", "Kč"), ("HUF", "Ft"), ("RON", "lei"), ("PKR", "₨"), ("LKR", "₨"),
    ("SAR", "﷼"), ("QAR", "﷼"), ("OMR", "﷼"), ("AED", "د.إ"), ("EGP", "E£"),
    ("BDT", "৳"), ("PEN", "S/"), ("KES", "KSh"),
]

# How a recognized code is shown in front of the amount
DISPLAY_PREFIXES = {
    "USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥", "INR": "₹", "KRW": "₩",
    "ILS": "₪", "VND": "₫", "PHP": "₱", "CNY": "CN¥", "CAD": "CA$",
    "AUD": "A$", "NZD": "NZ$", "HKD": "HK$", "MXN": "MX$", "BRL": "R$",
    "TWD": "NT$",
}


def _build_symbol_index() -> Dict[str, List[str]]:
    index = defaultdict(list)
    for code, symbol in CURRENCY_SYMBOLS:
        index[symbol].append(code)
    return dict(index)


ISO_CODES = frozenset(code for code, _ in CURRENCY_SYMBOLS)
SYMBOL_TO_CODES = _build_symbol_index()


def resolve_currency_code(currency: str) -> Optional[str]:
    """ISO code for a code or an unambiguous symbol, else None."""
    if currency.upper() in ISO_CODES:
        return currency.upper()

    # Well-formed ISO 4217 codes outside the symbol table
    if len(currency) == 3 and currency.isascii() and currency.isalpha() and currency.isupper():
        return currency

    codes = SYMBOL_TO_CODES.get(currency.strip(), [])
    if len(codes) == 1:
        return codes[0]
    return None


def format_currency(amount: Union[Decimal, int, float], currency: str) -> str:
    """
    Format amount for display, e.g. "$1,234.56" or "SGD 12.00".

    Labels that are neither a known ISO code nor a symbol of exactly one
    currency are shown verbatim in front of the amount.
    """
    amount = Decimal(str(amount))
    code = resolve_currency_code(currency) if currency else None

    if code is None:
        return f"{currency}{amount:.2f}"

    sign = "-" if amount < 0 else ""
    prefix = DISPLAY_PREFIXES.get(code, f"{code} ")
    return f"{sign}{prefix}{abs(amount):,.2f}"
