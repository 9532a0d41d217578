# inventory_replenishment/core/reorder_planning.py
import math
from collections import OrderedDict
from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Tuple

from ..exceptions import InvalidParameterError, NotFoundError
from ..utils.date_utils import add_days
from ..utils.validation import validate_stock_item
from .entities import PlanLine, PlanOrigin, ReorderPlan, StockItem, SupplierProfile
from .reorder_evaluation import find_reorder_candidates
from .replenishment_math import ZScoreStrategy, two_bucket_z_score

def _build_plan(
    supplier: SupplierProfile,
    lines: List[PlanLine],
    origin: PlanOrigin,
    now: datetime
) -> ReorderPlan:
    total_amount = sum(line.line_total for line in lines)
    expected_delivery = add_days(now, supplier.average_lead_time_days)
    return ReorderPlan(
        supplier_id=supplier.supplier_id,
        lines=lines,
        total_amount=total_amount,
        expected_delivery_date=expected_delivery,
        origin=origin,
        created_at=now
    )

def plan_auto_reorder(
    items: Iterable[StockItem],
    suppliers: Mapping,
    now: Optional[datetime] = None,
    z_score: ZScoreStrategy = two_bucket_z_score,
    reorder_point_source: str = 'stored'
) -> List[ReorderPlan]:
    """Build one purchase plan per supplier for every item needing reorder.

    Line quantities are the recommended order quantity rounded up to whole
    units. Items with nothing to order (zero demand at the trigger point)
    get no line, and a supplier with no lines gets no plan.

    Args:
        items: Active catalog
        suppliers: Supplier id to SupplierProfile
        now: Planning timestamp (defaults to current time)
        z_score: Strategy mapping service level to Z-score
        reorder_point_source: See evaluate_item

    Returns:
        List of auto-generated plans, empty when nothing needs reordering

    Raises:
        NotFoundError if an eligible item's supplier has no profile
    """
    if now is None:
        now = datetime.now()

    candidates = find_reorder_candidates(items, z_score=z_score, reorder_point_source=reorder_point_source)

    groups: "OrderedDict[object, List[PlanLine]]" = OrderedDict()
    for item, decision in candidates:
        errors = validate_stock_item(item)
        if errors:
            raise InvalidParameterError(
                f"Product {item.product_id} cannot be planned",
                details=errors
            )
        if item.supplier_id not in suppliers:
            raise NotFoundError(
                f"Supplier {item.supplier_id} for product {item.product_id} not found",
                details={'product_id': item.product_id, 'supplier_id': item.supplier_id}
            )

        quantity = math.ceil(decision.recommended_order_quantity)
        if quantity <= 0:
            continue
        groups.setdefault(item.supplier_id, []).append(PlanLine(
            product_id=item.product_id,
            quantity=quantity,
            unit_cost=item.unit_cost,
            line_total=quantity * item.unit_cost
        ))

    return [
        _build_plan(suppliers[supplier_id], lines, PlanOrigin.AUTO_GENERATED, now)
        for supplier_id, lines in groups.items()
    ]

def build_manual_plan(
    supplier: SupplierProfile,
    lines: Iterable[Tuple[object, int, float]],
    now: Optional[datetime] = None
) -> ReorderPlan:
    """Build a manual plan from (product_id, quantity, unit_cost) tuples.

    Raises:
        InvalidParameterError for an empty plan or a non-positive quantity
    """
    if now is None:
        now = datetime.now()

    plan_lines = []
    for product_id, quantity, unit_cost in lines:
        if quantity is None or quantity <= 0 or int(quantity) != quantity:
            raise InvalidParameterError(
                f"Quantity for product {product_id} must be a positive whole number, got {quantity}"
            )
        if unit_cost is None or unit_cost < 0:
            raise InvalidParameterError(f"Unit cost for product {product_id} must not be negative")
        plan_lines.append(PlanLine(
            product_id=product_id,
            quantity=int(quantity),
            unit_cost=unit_cost,
            line_total=int(quantity) * unit_cost
        ))

    if not plan_lines:
        raise InvalidParameterError("A purchase order needs at least one line")

    return _build_plan(supplier, plan_lines, PlanOrigin.MANUAL, now)
