"""Threshold bucketing of spending by arbitrary key."""
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, Iterable, List, Optional, TypeVar, Union

from .models import Bucket, AggregationResult
from playspend.config.settings import get_settings
from playspend.utils.logger import get_logger

logger = get_logger()

T = TypeVar("T")
Number = Union[Decimal, int, float, str]


class Aggregator:
    """Groups amounts by key and folds the long tail into an Others bucket."""

    def __init__(self, others_label: Optional[str] = None, threshold: Optional[Number] = None):
        """
        Initialize aggregator.

        Args:
            others_label: Label of the collapsed bucket, from settings by default
            threshold: Default cumulative share kept explicit, from settings by default
        """
        settings = get_settings()
        self.others_label = others_label or settings.others_label
        self.threshold = _as_threshold(settings.others_threshold if threshold is None else threshold)

    def aggregate(
        self,
        items: Iterable[T],
        key_of: Callable[[T], str],
        value_of: Callable[[T], Number],
        threshold: Optional[Number] = None
    ) -> AggregationResult:
        """
        Sum items per key and collapse small keys into Others.

        Keys are ranked by total, largest first (ties keep first-seen
        order). Keys stay explicit while the running total before them is
        still under threshold * grand total; the rest are summed into one
        Others bucket, emitted last and only when positive.

        Args:
            items: Purchases or any other records
            key_of: Grouping key of an item
            value_of: Amount of an item; non-positive amounts are skipped
            threshold: Cumulative share in (0, 1], the instance default if omitted

        Returns:
            AggregationResult with head buckets and optional Others bucket

        Raises:
            ValueError: If threshold is outside (0, 1]
        """
        threshold = self.threshold if threshold is None else _as_threshold(threshold)

        totals: Dict[str, Decimal] = {}
        item_count = 0
        for item in items:
            value = _as_decimal(value_of(item))
            if not value > 0:
                continue
            key = key_of(item)
            totals[key] = totals.get(key, Decimal(0)) + value
            item_count += 1

        ranked = sorted(totals.items(), key=lambda entry: entry[1], reverse=True)
        grand_total = sum(totals.values(), Decimal(0))
        cutoff = threshold * grand_total

        head: List[Bucket] = []
        others_keys: List[str] = []
        others_total = Decimal(0)
        running_total = Decimal(0)

        for key, amount in ranked:
            if running_total < cutoff:
                head.append(Bucket(key=key, amount=amount))
                running_total += amount
            else:
                others_keys.append(key)
                others_total += amount

        buckets = list(head)
        if others_total > 0:
            buckets.append(Bucket(key=self.others_label, amount=others_total, is_others=True))

        logger.debug(
            f"Aggregated {item_count} items into {len(head)} buckets, "
            f"{len(others_keys)} keys folded into {self.others_label}"
        )

        return AggregationResult(
            buckets=tuple(buckets),
            head_keys=tuple(bucket.key for bucket in head),
            others_keys=tuple(others_keys)
        )


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def _as_threshold(value: Number) -> Decimal:
    try:
        threshold = _as_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"Threshold must be a number, got {value!r}")
    if not threshold.is_finite() or not Decimal(0) < threshold <= Decimal(1):
        raise ValueError(f"Threshold must be in (0, 1], got {value!r}")
    return threshold
