"""Tabular listing and currency selection helpers."""
from typing import Dict, Iterable, List, Sequence

from playspend.purchases.models import NormalizedPurchase

TABLE_COLUMNS = ("Date", "App", "Title", "Type", "Amount")


def purchase_rows(purchases: Iterable[NormalizedPurchase]) -> List[Dict[str, str]]:
    """One display row per purchase, in export order."""
    return [
        {
            "Date": purchase.date,
            "App": purchase.app_name,
            "Title": purchase.title,
            "Type": purchase.document_type,
            "Amount": f"{purchase.currency} {purchase.amount}".strip(),
        }
        for purchase in purchases
    ]


def available_currencies(purchases: Iterable[NormalizedPurchase]) -> List[str]:
    """Distinct non-empty currencies in first-seen order."""
    seen: Dict[str, None] = {}
    for purchase in purchases:
        if purchase.currency:
            seen[purchase.currency] = None
    return list(seen)


def spending_currencies(purchases: Iterable[NormalizedPurchase]) -> List[str]:
    """Currencies of priced purchases in first-seen order, "" included."""
    seen: Dict[str, None] = {}
    for purchase in purchases:
        if purchase.amount > 0:
            seen[purchase.currency] = None
    return list(seen)


def default_currency(purchases: Sequence[NormalizedPurchase]) -> str:
    """Currency selected after an upload: that of the first purchase."""
    return purchases[0].currency if purchases else ""
