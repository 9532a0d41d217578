# inventory_replenishment/core/abc_analysis.py
from typing import Dict, Iterable

from ..exceptions import EmptyCatalogError
from ..utils.validation import require_non_negative
from .entities import ABCAnalysis, StockItem

# Cumulative value share (percent) closing each class
CLASS_A_LIMIT = 80.0
CLASS_B_LIMIT = 95.0

def _ranking_key(item: StockItem):
    # Highest value first; equal values fall back to product id ascending
    return (-item.inventory_value, item.product_id)

def classify_abc(items: Iterable[StockItem], required: bool = False) -> ABCAnalysis:
    """Partition items into A/B/C classes by cumulative inventory value.

    An item's class is decided by the cumulative share of total value after
    including it: up to 80% is A, up to 95% is B, the rest is C.

    Args:
        items: Active stock items
        required: Raise instead of returning an unclassified result when
            there is no value to classify

    Returns:
        ABCAnalysis with ranked buckets

    Raises:
        EmptyCatalogError when required and the catalog has no value
    """
    items = list(items)
    for item in items:
        require_non_negative(current_stock=item.current_stock, unit_cost=item.unit_cost)

    total_value = sum(item.inventory_value for item in items)

    if total_value == 0:
        if required:
            raise EmptyCatalogError(
                "No inventory value to classify",
                details={'item_count': len(items)}
            )
        return ABCAnalysis(unclassified=items, total_value=0.0)

    analysis = ABCAnalysis(total_value=total_value)
    cumulative_value = 0.0

    for item in sorted(items, key=_ranking_key):
        cumulative_value += item.inventory_value
        percentage = (cumulative_value / total_value) * 100

        if percentage <= CLASS_A_LIMIT:
            analysis.A.append(item)
        elif percentage <= CLASS_B_LIMIT:
            analysis.B.append(item)
        else:
            analysis.C.append(item)

    return analysis

def summarize_buckets(analysis: ABCAnalysis) -> Dict[str, Dict]:
    """Count and value share for each class."""
    summary = {}
    for name in ('A', 'B', 'C'):
        bucket = analysis.bucket(name)
        bucket_value = sum(item.inventory_value for item in bucket)
        share = (bucket_value / analysis.total_value * 100) if analysis.total_value > 0 else 0.0
        summary[name] = {
            'count': len(bucket),
            'total_value': round(bucket_value, 2),
            'value_percentage': round(share, 2)
        }
    return summary
