# inventory_replenishment/core/reorder_evaluation.py
from typing import Iterable, List, Tuple

from ..exceptions import InvalidParameterError
from ..utils.validation import require_non_negative
from .entities import StockItem, ReplenishmentDecision
from .replenishment_math import (
    ZScoreStrategy, two_bucket_z_score,
    calculate_eoq, calculate_safety_stock, calculate_reorder_point
)

DAYS_PER_YEAR = 365

REORDER_POINT_SOURCES = ('stored', 'calculated')

def evaluate_item(
    item: StockItem,
    z_score: ZScoreStrategy = two_bucket_z_score,
    reorder_point_source: str = 'stored'
) -> ReplenishmentDecision:
    """Decide whether and how much to reorder for one item snapshot.

    Args:
        item: Stock item snapshot
        z_score: Strategy mapping service level to Z-score
        reorder_point_source: 'stored' compares stock against the item's
            maintained reorder point, 'calculated' against the computed one

    Returns:
        ReplenishmentDecision
    """
    if reorder_point_source not in REORDER_POINT_SOURCES:
        raise InvalidParameterError(f"Unknown reorder point source: {reorder_point_source}")
    require_non_negative(current_stock=item.current_stock, reorder_point=item.reorder_point)

    daily_demand = item.annual_demand / DAYS_PER_YEAR

    safety_stock = calculate_safety_stock(
        daily_demand,
        item.demand_variability,
        item.lead_time_days,
        item.service_level,
        z_score=z_score
    )
    reorder_point = calculate_reorder_point(daily_demand, item.lead_time_days, safety_stock)
    eoq = calculate_eoq(
        item.annual_demand,
        item.ordering_cost,
        item.unit_cost,
        item.holding_cost_rate
    )

    trigger_point = item.reorder_point if reorder_point_source == 'stored' else reorder_point
    needs_reorder = item.current_stock <= trigger_point

    # Never less than the deficit, never less than the economic batch
    deficit = max(0, trigger_point - item.current_stock)
    recommended_order_quantity = max(eoq, deficit)

    return ReplenishmentDecision(
        product_id=item.product_id,
        daily_demand=daily_demand,
        eoq=eoq,
        safety_stock=safety_stock,
        reorder_point=reorder_point,
        trigger_point=trigger_point,
        needs_reorder=needs_reorder,
        recommended_order_quantity=recommended_order_quantity
    )

def find_reorder_candidates(
    items: Iterable[StockItem],
    z_score: ZScoreStrategy = two_bucket_z_score,
    reorder_point_source: str = 'stored'
) -> List[Tuple[StockItem, ReplenishmentDecision]]:
    """Evaluate every item and keep the ones that need reordering.

    Catalog order is preserved. Formula errors propagate.
    """
    candidates = []
    for item in items:
        decision = evaluate_item(item, z_score=z_score, reorder_point_source=reorder_point_source)
        if decision.needs_reorder:
            candidates.append((item, decision))
    return candidates
