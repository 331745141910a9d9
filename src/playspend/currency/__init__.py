"""Currency rates, conversion and display."""
from .rates import RateTable, format_rate, parse_rate_input
from .converter import convert
from .formatter import format_currency, resolve_currency_code

__all__ = [
    "RateTable",
    "format_rate",
    "parse_rate_input",
    "convert",
    "format_currency",
    "resolve_currency_code"
]
