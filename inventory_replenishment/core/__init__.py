from .entities import (
    StockItem, SupplierProfile, ReplenishmentDecision, PlanLine, ReorderPlan,
    PlanOrigin, ForecastPoint, ForecastSeries, StockoutRisk, ABCAnalysis,
    ReorderAlertEvent
)
from .replenishment_math import (
    calculate_eoq, calculate_safety_stock, calculate_reorder_point,
    calculate_inventory_turnover, calculate_supplier_performance,
    update_on_time_rate, two_bucket_z_score, normal_z_score,
    get_z_score_strategy
)
from .reorder_evaluation import evaluate_item, find_reorder_candidates
from .abc_analysis import classify_abc, summarize_buckets
from .demand_forecast import forecast_demand, seeded_rng
from .reorder_planning import plan_auto_reorder, build_manual_plan

__all__ = [
    'StockItem',
    'SupplierProfile',
    'ReplenishmentDecision',
    'PlanLine',
    'ReorderPlan',
    'PlanOrigin',
    'ForecastPoint',
    'ForecastSeries',
    'StockoutRisk',
    'ABCAnalysis',
    'ReorderAlertEvent',
    'calculate_eoq',
    'calculate_safety_stock',
    'calculate_reorder_point',
    'calculate_inventory_turnover',
    'calculate_supplier_performance',
    'update_on_time_rate',
    'two_bucket_z_score',
    'normal_z_score',
    'get_z_score_strategy',
    'evaluate_item',
    'find_reorder_candidates',
    'classify_abc',
    'summarize_buckets',
    'forecast_demand',
    'seeded_rng',
    'plan_auto_reorder',
    'build_manual_plan'
]
