"""Spending analysis module."""
from .models import Bucket, AggregationResult, Granularity
from .aggregator import Aggregator
from .breakdown import BreakdownPath, BreakdownView, app_breakdown, breakdown_by_currency
from .listing import purchase_rows, available_currencies, spending_currencies, default_currency
from .timeline import spending_timeline, bucket_key
from .totals import total_spent, missing_rates

__all__ = [
    "Bucket",
    "AggregationResult",
    "Granularity",
    "Aggregator",
    "BreakdownPath",
    "BreakdownView",
    "app_breakdown",
    "breakdown_by_currency",
    "purchase_rows",
    "available_currencies",
    "spending_currencies",
    "default_currency",
    "spending_timeline",
    "bucket_key",
    "total_spent",
    "missing_rates"
]
