"""User-maintained currency conversion rates."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Dict, List, Mapping, Optional, Union

from playspend.utils.logger import get_logger

logger = get_logger()

RateInput = Union[str, int, float, Decimal]

TWO_PLACES = Decimal("0.01")


def parse_rate_input(value: RateInput) -> Optional[Decimal]:
    """
    Read a user-entered rate.

    Returns:
        The rate as a Decimal, or None if it is not a positive finite number
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = repr(value)
    try:
        rate = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None

    if not rate.is_finite() or rate <= 0:
        return None
    return rate


def format_rate(value: Decimal) -> str:
    """
    Render a rate for storage.

    Two decimal places are preferred, but ratios like JPY to USD would
    round to "0.00", so a two-significant-figure form is used whenever it
    keeps more non-zero decimals.
    """
    value = Decimal(value)
    with localcontext() as ctx:
        # Room for every integer digit plus two decimals
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        fixed = format(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP), "f")
        significant = _two_significant_figures(value)

    if fixed == "0.00":
        return significant

    if _decimal_digits(significant) > _decimal_digits(fixed):
        return significant
    return fixed


def _two_significant_figures(value: Decimal) -> str:
    exponent = value.adjusted() - 1
    rounded = value.quantize(Decimal(1).scaleb(exponent), rounding=ROUND_HALF_UP)
    return format(rounded.normalize(), "f")


def _decimal_digits(text: str) -> int:
    """Count decimals, ignoring trailing zeros."""
    if "." not in text:
        return 0
    return len(text.split(".", 1)[1].rstrip("0"))


class RateTable:
    """
    Conversion rates keyed by source then target currency.

    Tables are values: set_rate returns a new table and never touches
    the one it was called on, so both directions of an edit appear
    together.
    """

    def __init__(self, rates: Optional[Mapping[str, Mapping[str, str]]] = None):
        """
        Build a table directly from a nested mapping.

        Args:
            rates: e.g. {"USD": {"SGD": "1.35"}}; directions are taken as given
        """
        self._rates: Dict[str, Dict[str, str]] = {
            source: dict(targets) for source, targets in (rates or {}).items()
        }

    @classmethod
    def from_mapping(cls, rates: Mapping[str, Mapping[str, str]]) -> "RateTable":
        return cls(rates)

    def set_rate(self, from_currency: str, to_currency: str, value: RateInput) -> "RateTable":
        """
        Record how many to_currency one unit of from_currency is worth.

        The inverse rate is stored alongside. Invalid values and
        same-currency pairs leave the table as it was.

        Args:
            from_currency: Source currency label
            to_currency: Target currency label
            value: Raw rate, typically the string the user typed

        Returns:
            The updated table (self if nothing changed)
        """
        rate = parse_rate_input(value)
        if rate is None:
            logger.debug(f"Ignoring invalid rate {value!r} for {from_currency}->{to_currency}")
            return self
        if from_currency == to_currency:
            return self

        rates = {source: dict(targets) for source, targets in self._rates.items()}
        rates.setdefault(from_currency, {})[to_currency] = format_rate(rate)
        rates.setdefault(to_currency, {})[from_currency] = format_rate(Decimal(1) / rate)

        logger.debug(
            f"Rate set: {from_currency}->{to_currency}={rates[from_currency][to_currency]}, "
            f"{to_currency}->{from_currency}={rates[to_currency][from_currency]}"
        )
        return RateTable(rates)

    def get_rate(self, from_currency: str, to_currency: str) -> Optional[str]:
        """Stored rate string, "1" for the same currency, None if unknown."""
        if from_currency == to_currency:
            return "1"
        return self._rates.get(from_currency, {}).get(to_currency) or None

    def currencies(self) -> List[str]:
        """Every currency that appears in the table."""
        seen: Dict[str, None] = {}
        for source, targets in self._rates.items():
            seen[source] = None
            for target in targets:
                seen[target] = None
        return list(seen)

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {source: dict(targets) for source, targets in self._rates.items()}

    def __len__(self) -> int:
        return sum(len(targets) for targets in self._rates.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, RateTable):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        return f"RateTable({self._rates!r})"
