"""Immutable analysis state replaced wholesale on every user action."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Union

from playspend.analysis import (
    Aggregator,
    Bucket,
    BreakdownPath,
    BreakdownView,
    Granularity,
    app_breakdown,
    available_currencies,
    breakdown_by_currency,
    default_currency,
    purchase_rows,
    spending_timeline,
    total_spent,
)
from playspend.currency.rates import RateInput, RateTable
from playspend.purchases import NormalizedPurchase, PurchaseNormalizer
from playspend.utils.exceptions import BatchParseError
from playspend.utils.logger import get_logger, set_source_context

logger = get_logger()


@dataclass(frozen=True)
class AnalysisSnapshot:
    """
    Everything the views need: purchases, rates and the selected currency.

    Each action returns a new snapshot; the host keeps only the latest.
    """
    purchases: Tuple[NormalizedPurchase, ...] = ()
    rates: RateTable = field(default_factory=RateTable)
    selected_currency: str = ""
    source_name: Optional[str] = None
    error: Optional[str] = None

    def with_upload(
        self,
        text: str,
        source_name: Optional[str] = None,
        normalizer: Optional[PurchaseNormalizer] = None
    ) -> "AnalysisSnapshot":
        """
        Replace the purchases with a freshly parsed export.

        A malformed export clears the purchases and carries the
        user-facing message in `error`. Rates are kept either way.
        """
        normalizer = normalizer or PurchaseNormalizer()
        set_source_context(source_name)

        try:
            purchases = normalizer.parse_batch(text)
        except BatchParseError as e:
            logger.error(f"Rejected upload {source_name or '<text>'}: {e.detail}")
            return replace(
                self,
                purchases=(),
                selected_currency="",
                source_name=source_name,
                error=str(e)
            )

        logger.info(f"Loaded {len(purchases)} purchases from {source_name or '<text>'}")
        return replace(
            self,
            purchases=purchases,
            selected_currency=default_currency(purchases),
            source_name=source_name,
            error=None
        )

    def with_rate(self, from_currency: str, to_currency: str, value: RateInput) -> "AnalysisSnapshot":
        """Apply a rate edit; invalid input leaves the rates unchanged."""
        rates = self.rates.set_rate(from_currency, to_currency, value)
        if rates is self.rates:
            return self
        return replace(self, rates=rates)

    def with_currency(self, currency: Optional[str]) -> "AnalysisSnapshot":
        """Select a currency; None or "" means all currencies side by side."""
        return replace(self, selected_currency=currency or "")

    @property
    def currencies(self) -> List[str]:
        return available_currencies(self.purchases)

    def rows(self) -> List[Dict[str, str]]:
        return purchase_rows(self.purchases)

    def total(self) -> Union[Decimal, Dict[str, Decimal]]:
        return total_spent(self.purchases, self.selected_currency, self.rates)

    def breakdown(
        self,
        path: BreakdownPath = BreakdownPath(),
        aggregator: Optional[Aggregator] = None
    ) -> Dict[str, BreakdownView]:
        """Per-currency breakdowns; a non-root path needs a selected currency."""
        if path.is_root:
            return breakdown_by_currency(self.purchases, self.selected_currency, aggregator=aggregator)
        if not self.selected_currency:
            raise ValueError("Select a currency before drilling into a breakdown")
        view = app_breakdown(self.purchases, self.selected_currency, path, aggregator=aggregator)
        return {self.selected_currency: view}

    def timeline(self, granularity: Granularity) -> Union[List[Bucket], Dict[str, List[Bucket]]]:
        return spending_timeline(self.purchases, granularity, self.selected_currency, self.rates)
