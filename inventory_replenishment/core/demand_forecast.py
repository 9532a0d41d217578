# inventory_replenishment/core/demand_forecast.py
from datetime import date, timedelta
from typing import Optional

import numpy as np

from ..exceptions import InvalidParameterError
from ..utils.validation import require_non_negative
from .entities import ForecastPoint, ForecastSeries, StockItem, StockoutRisk

DEFAULT_FORECAST_DAYS = 30

REORDER_RECOMMENDED = 'Reorder recommended'
STOCK_SUFFICIENT = 'Stock sufficient'

def seeded_rng(seed: int) -> np.random.Generator:
    """Deterministic noise source for reproducible forecasts."""
    return np.random.default_rng(seed)

def forecast_demand(
    item: StockItem,
    days: int = DEFAULT_FORECAST_DAYS,
    rng: Optional[np.random.Generator] = None,
    start_date: Optional[date] = None
) -> ForecastSeries:
    """Project daily demand for one item over a fixed horizon.

    Each day is the base daily demand perturbed by uniform noise in
    [-1, 1) scaled by the item's demand variability, floored at zero and
    rounded to 2 decimals.

    Args:
        item: Stock item snapshot
        days: Horizon in days
        rng: Noise source; an unseeded generator when omitted
        start_date: Day before the first projected day (defaults to today)

    Returns:
        ForecastSeries with daily points and a stock-out verdict
    """
    if days is None or int(days) != days or days < 1:
        raise InvalidParameterError(f"Forecast horizon must be a positive number of days, got {days}")
    require_non_negative(
        current_stock=item.current_stock,
        annual_demand=item.annual_demand,
        demand_variability=item.demand_variability
    )

    if rng is None:
        rng = np.random.default_rng()
    if start_date is None:
        start_date = date.today()

    base_daily_demand = item.annual_demand / 365
    variability = base_daily_demand * item.demand_variability

    noise = rng.uniform(-1.0, 1.0, size=int(days))

    points = []
    for i, factor in enumerate(noise, start=1):
        projected = max(0.0, base_daily_demand + variability * float(factor))
        points.append(ForecastPoint(
            date=start_date + timedelta(days=i),
            projected_demand=round(projected, 2)
        ))

    total_projected_demand = round(sum(p.projected_demand for p in points), 2)

    if item.current_stock < total_projected_demand:
        risk, action = StockoutRisk.HIGH, REORDER_RECOMMENDED
    else:
        risk, action = StockoutRisk.LOW, STOCK_SUFFICIENT

    return ForecastSeries(
        product_id=item.product_id,
        points=points,
        total_projected_demand=total_projected_demand,
        stockout_risk=risk,
        recommended_action=action
    )
