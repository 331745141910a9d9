"""App and title breakdowns with drill-down navigation."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .aggregator import Aggregator, Number
from .listing import spending_currencies
from .models import AggregationResult
from playspend.config.settings import get_settings
from playspend.purchases.models import NormalizedPurchase
from playspend.utils.logger import get_logger

logger = get_logger()


@dataclass(frozen=True)
class BreakdownPath:
    """Keys selected so far, outermost first."""
    keys: Tuple[str, ...] = ()

    def push(self, key: str) -> "BreakdownPath":
        return BreakdownPath(self.keys + (key,))

    def pop(self) -> "BreakdownPath":
        return BreakdownPath(self.keys[:-1])

    @property
    def depth(self) -> int:
        return len(self.keys)

    @property
    def is_root(self) -> bool:
        return not self.keys


@dataclass(frozen=True)
class GroupingLevel:
    """How purchases are keyed at one level of the breakdown."""
    name: str
    key_of: Callable[[NormalizedPurchase], str]


@dataclass(frozen=True)
class BreakdownView:
    """Breakdown shown for one currency at one path."""
    currency: str
    path: BreakdownPath
    level: str
    result: AggregationResult
    purchases: Tuple[NormalizedPurchase, ...]

    @property
    def can_drill(self) -> bool:
        """Whether head buckets lead to a deeper level."""
        return self.level != "title"


def grouping_levels(unknown_app_label: Optional[str] = None,
                    unknown_title_label: Optional[str] = None) -> Tuple[GroupingLevel, ...]:
    """App level first, then titles within an app."""
    settings = get_settings()
    app_label = unknown_app_label or settings.unknown_app_label
    title_label = unknown_title_label or settings.unknown_title_label
    return (
        GroupingLevel("app", lambda p: p.app_name or app_label),
        GroupingLevel("title", lambda p: p.title or title_label),
    )


def _amount(purchase: NormalizedPurchase) -> Decimal:
    return purchase.amount


def app_breakdown(
    purchases: Iterable[NormalizedPurchase],
    currency: str,
    path: BreakdownPath = BreakdownPath(),
    threshold: Optional[Number] = None,
    aggregator: Optional[Aggregator] = None
) -> BreakdownView:
    """
    Breakdown of spending in one currency, following a drill-down path.

    Selecting a regular bucket narrows to its purchases and moves from
    apps to titles. Selecting Others narrows to the collapsed keys and
    stays on the same level, so the tail gets its own breakdown.

    Args:
        purchases: Normalized purchases (any currency)
        currency: Only purchases charged in this currency are counted
        path: Keys selected so far
        threshold: Cumulative share kept explicit at every level
        aggregator: Aggregator to use, a default one if omitted

    Returns:
        BreakdownView for the last level of the path

    Raises:
        ValueError: If a key in the path is not a bucket of its level, or
            the path goes below the title level
    """
    aggregator = aggregator or Aggregator()
    levels = grouping_levels()
    items = [p for p in purchases if p.currency == currency and p.amount > 0]
    depth = 0

    for key in path.keys:
        level = levels[depth]
        result = aggregator.aggregate(items, level.key_of, _amount, threshold)
        others = result.others

        # A real bucket named like the Others label wins over the tail
        if key in result.head_keys:
            if depth + 1 >= len(levels):
                raise ValueError(f"Cannot drill into {key!r}: {level.name} is the last level")
            items = [p for p in items if level.key_of(p) == key]
            depth += 1
        elif others is not None and key == others.key:
            collapsed = set(result.others_keys)
            items = [p for p in items if level.key_of(p) in collapsed]
        else:
            raise ValueError(f"{key!r} is not a bucket of the {level.name} breakdown")

    level = levels[depth]
    result = aggregator.aggregate(items, level.key_of, _amount, threshold)
    logger.debug(f"Breakdown {currency} {list(path.keys)}: {len(result.buckets)} buckets")

    return BreakdownView(
        currency=currency,
        path=path,
        level=level.name,
        result=result,
        purchases=tuple(items)
    )


def breakdown_by_currency(
    purchases: List[NormalizedPurchase],
    selected_currency: Optional[str] = None,
    threshold: Optional[Number] = None,
    aggregator: Optional[Aggregator] = None
) -> Dict[str, BreakdownView]:
    """
    Top-level app breakdowns.

    With a selected currency only that currency is broken down; with none,
    every currency gets its own breakdown and nothing is converted.
    """
    aggregator = aggregator or Aggregator()
    currencies = [selected_currency] if selected_currency else spending_currencies(purchases)
    return {
        currency: app_breakdown(purchases, currency, threshold=threshold, aggregator=aggregator)
        for currency in currencies
    }
