# inventory_replenishment/core/replenishment_math.py
import math
from typing import Callable

from scipy import stats

from ..exceptions import InvalidParameterError
from ..utils.validation import require_non_negative, require_fraction

# Z-scores used by the two-bucket lookup
Z_SCORE_HIGH = 1.645
Z_SCORE_LOW = 1.28
DEFAULT_SERVICE_LEVEL_THRESHOLD = 0.95

# Lead time (days) at which the lead-time sub-score of a supplier reaches zero
SUPPLIER_LEAD_TIME_HORIZON = 14.0

ZScoreStrategy = Callable[[float], float]

def two_bucket_z_score(
    service_level: float,
    threshold: float = DEFAULT_SERVICE_LEVEL_THRESHOLD
) -> float:
    """Coarse service level to Z-score lookup.

    Args:
        service_level: Target service level as a fraction (e.g. 0.95)
        threshold: Service level at or above which the high Z-score applies

    Returns:
        1.645 at or above the threshold, 1.28 below it
    """
    require_fraction(service_level=service_level)
    return Z_SCORE_HIGH if service_level >= threshold else Z_SCORE_LOW

def normal_z_score(service_level: float) -> float:
    """Continuous service level to Z-score via the inverse normal CDF.

    Args:
        service_level: Target service level as a fraction (e.g. 0.95)

    Returns:
        Z-score, 0 for service levels of 0.5 or less
    """
    require_fraction(service_level=service_level)
    if service_level >= 1:
        raise InvalidParameterError("service_level must be below 1 for the normal Z-score")
    return max(0.0, float(stats.norm.ppf(service_level)))

def get_z_score_strategy(name: str, threshold: float = DEFAULT_SERVICE_LEVEL_THRESHOLD) -> ZScoreStrategy:
    """Resolve a configured Z-score strategy name.

    Args:
        name: 'two_bucket' or 'normal'
        threshold: Threshold for the two-bucket lookup

    Returns:
        Callable mapping service level to Z-score
    """
    if name == 'two_bucket':
        return lambda service_level: two_bucket_z_score(service_level, threshold)
    if name == 'normal':
        return normal_z_score
    raise InvalidParameterError(f"Unknown Z-score strategy: {name}")

def calculate_eoq(
    annual_demand: float,
    ordering_cost: float,
    unit_cost: float,
    holding_cost_rate: float
) -> float:
    """Calculate the Economic Order Quantity.

    EOQ = sqrt((2 * Annual Demand * Ordering Cost) / (Unit Cost * Holding Cost Rate))

    Args:
        annual_demand: Annual demand in units
        ordering_cost: Fixed cost of placing one order
        unit_cost: Cost of one unit
        holding_cost_rate: Annual holding cost as a fraction of unit cost

    Returns:
        EOQ in units; 0 when demand, ordering cost or holding cost is zero
    """
    require_non_negative(
        annual_demand=annual_demand,
        ordering_cost=ordering_cost,
        unit_cost=unit_cost,
        holding_cost_rate=holding_cost_rate
    )

    holding_cost = unit_cost * holding_cost_rate
    if annual_demand == 0 or ordering_cost == 0 or holding_cost == 0:
        return 0.0

    return math.sqrt((2 * annual_demand * ordering_cost) / holding_cost)

def calculate_safety_stock(
    daily_demand: float,
    demand_variability: float,
    lead_time_days: float,
    service_level: float = 0.95,
    z_score: ZScoreStrategy = two_bucket_z_score
) -> int:
    """Calculate safety stock in units.

    SS = ceil(Z * (Daily Demand * Variability) * sqrt(Lead Time))

    Args:
        daily_demand: Average daily demand in units
        demand_variability: Coefficient of variation of daily demand
        lead_time_days: Lead time in days
        service_level: Target service level as a fraction
        z_score: Strategy mapping service level to Z-score

    Returns:
        Safety stock in whole units
    """
    require_non_negative(
        daily_demand=daily_demand,
        demand_variability=demand_variability,
        lead_time_days=lead_time_days
    )

    demand_std_dev = daily_demand * demand_variability
    return math.ceil(z_score(service_level) * demand_std_dev * math.sqrt(lead_time_days))

def calculate_reorder_point(
    daily_demand: float,
    lead_time_days: float,
    safety_stock: float
) -> int:
    """Calculate the reorder point: lead-time demand plus safety stock."""
    require_non_negative(
        daily_demand=daily_demand,
        lead_time_days=lead_time_days,
        safety_stock=safety_stock
    )
    return math.ceil((daily_demand * lead_time_days) + safety_stock)

def calculate_inventory_turnover(
    total_sold: float,
    unit_cost: float,
    current_stock: float
) -> float:
    """Calculate inventory turnover as COGS over inventory value.

    Returns:
        Turnover ratio; 0 when there is no stock or no inventory value
    """
    require_non_negative(total_sold=total_sold, unit_cost=unit_cost, current_stock=current_stock)

    if current_stock == 0:
        return 0.0

    cogs = total_sold * unit_cost
    inventory_value = current_stock * unit_cost
    return cogs / inventory_value if inventory_value > 0 else 0.0

def calculate_supplier_performance(
    average_lead_time: float,
    on_time_delivery_rate: float,
    quality_rating: float
) -> float:
    """Calculate a 0-100 supplier performance score.

    Average of three sub-scores: lead time (shorter is better, zero at 14
    days), on-time delivery rate, and quality rating out of 5.
    """
    require_non_negative(average_lead_time=average_lead_time, quality_rating=quality_rating)
    require_fraction(on_time_delivery_rate=on_time_delivery_rate)

    lead_time_score = max(0.0, (SUPPLIER_LEAD_TIME_HORIZON - average_lead_time) / SUPPLIER_LEAD_TIME_HORIZON)
    delivery_score = on_time_delivery_rate
    quality_score = quality_rating / 5

    return (lead_time_score + delivery_score + quality_score) / 3 * 100

ON_TIME_RATE_STEP = 0.01
LATE_RATE_PENALTY = 0.02

def on_time_rate_step(on_time: bool) -> float:
    return ON_TIME_RATE_STEP if on_time else -LATE_RATE_PENALTY

def update_on_time_rate(current_rate: float, on_time: bool) -> float:
    """Nudge a supplier's on-time delivery rate after a delivery.

    +0.01 for an on-time delivery (capped at 1), -0.02 for a late one
    (floored at 0).
    """
    require_fraction(current_rate=current_rate)
    return min(1.0, max(0.0, current_rate + on_time_rate_step(on_time)))
