"""Data models for aggregated spending."""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Bucket:
    """One slice of a breakdown."""
    key: str
    amount: Decimal
    is_others: bool = False


@dataclass(frozen=True)
class AggregationResult:
    """Buckets produced by one aggregation run."""
    buckets: Tuple[Bucket, ...]
    head_keys: Tuple[str, ...]  # largest keys, in bucket order
    others_keys: Tuple[str, ...]  # keys collapsed into Others

    @property
    def total(self) -> Decimal:
        return sum((bucket.amount for bucket in self.buckets), Decimal(0))

    @property
    def others(self) -> Optional[Bucket]:
        """The collapsed Others bucket, if any."""
        for bucket in self.buckets:
            if bucket.is_others:
                return bucket
        return None

    @property
    def labels(self) -> List[str]:
        return [bucket.key for bucket in self.buckets]

    @property
    def amounts(self) -> List[Decimal]:
        return [bucket.amount for bucket in self.buckets]


class Granularity(str, Enum):
    """Time bucket size for spending timelines."""
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"
