"""
Value objects read and produced by the replenishment calculations.

Snapshots only: nothing here talks to the database, and nothing is cached
on an entity. Decisions are derived fresh from a snapshot on every call.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .replenishment_math import calculate_supplier_performance


class PlanOrigin(Enum):
    MANUAL = 'manual'
    AUTO_GENERATED = 'auto-generated'


class StockoutRisk(Enum):
    LOW = 'Low'
    HIGH = 'High'


@dataclass(frozen=True)
class StockItem:
    """Read-only view of a product record."""
    product_id: Any
    sku: str
    name: str = ''
    category: str = 'Other'
    current_stock: int = 0
    reorder_point: int = 0          # Operator-maintained trigger level
    max_stock: int = 0
    unit_cost: float = 0.0
    selling_price: float = 0.0
    annual_demand: float = 0.0
    ordering_cost: float = 50.0
    holding_cost_rate: float = 0.2  # Fraction of unit cost per year
    lead_time_days: float = 7.0
    demand_variability: float = 0.1  # Coefficient of variation
    service_level: float = 0.95
    total_sold: int = 0
    supplier_id: Any = None
    supplier_name: Optional[str] = None

    @property
    def inventory_value(self) -> float:
        return self.current_stock * self.unit_cost


@dataclass(frozen=True)
class SupplierProfile:
    supplier_id: Any
    name: str = ''
    average_lead_time_days: float = 7.0
    on_time_delivery_rate: float = 0.95
    quality_rating: float = 4.5
    total_orders: int = 0
    total_value: float = 0.0

    @property
    def performance_score(self) -> float:
        return calculate_supplier_performance(
            self.average_lead_time_days,
            self.on_time_delivery_rate,
            self.quality_rating
        )


@dataclass(frozen=True)
class ReplenishmentDecision:
    product_id: Any
    daily_demand: float
    eoq: float
    safety_stock: int
    reorder_point: int
    trigger_point: int
    needs_reorder: bool
    recommended_order_quantity: float

    def to_dict(self) -> Dict:
        return {
            'product_id': self.product_id,
            'daily_demand': round(self.daily_demand, 4),
            'eoq': round(self.eoq, 2),
            'safety_stock': self.safety_stock,
            'reorder_point': self.reorder_point,
            'trigger_point': self.trigger_point,
            'needs_reorder': self.needs_reorder,
            'recommended_order_quantity': round(self.recommended_order_quantity, 2)
        }


@dataclass(frozen=True)
class PlanLine:
    product_id: Any
    quantity: int
    unit_cost: float
    line_total: float


@dataclass(frozen=True)
class ReorderPlan:
    supplier_id: Any
    lines: List[PlanLine]
    total_amount: float
    expected_delivery_date: date
    origin: PlanOrigin
    created_at: datetime

    @property
    def product_ids(self) -> List:
        return [line.product_id for line in self.lines]


@dataclass(frozen=True)
class ForecastPoint:
    date: date
    projected_demand: float


@dataclass(frozen=True)
class ForecastSeries:
    product_id: Any
    points: List[ForecastPoint]
    total_projected_demand: float
    stockout_risk: StockoutRisk
    recommended_action: str

    def to_dict(self) -> Dict:
        return {
            'product_id': self.product_id,
            'forecast': [
                {'date': p.date.isoformat(), 'demand': p.projected_demand}
                for p in self.points
            ],
            'summary': {
                'total_forecast_demand': self.total_projected_demand,
                'recommended_action': self.recommended_action,
                'stockout_risk': self.stockout_risk.value
            }
        }


@dataclass
class ABCAnalysis:
    A: List[StockItem] = field(default_factory=list)
    B: List[StockItem] = field(default_factory=list)
    C: List[StockItem] = field(default_factory=list)
    unclassified: List[StockItem] = field(default_factory=list)
    total_value: float = 0.0

    def bucket(self, name: str) -> List[StockItem]:
        return {'A': self.A, 'B': self.B, 'C': self.C}[name]


@dataclass(frozen=True)
class ReorderAlertEvent:
    count: int
    items: List[Dict]

    @classmethod
    def from_items(cls, items: List[StockItem]) -> 'ReorderAlertEvent':
        return cls(
            count=len(items),
            items=[
                {
                    'id': item.product_id,
                    'name': item.name,
                    'sku': item.sku,
                    'current_stock': item.current_stock,
                    'reorder_point': item.reorder_point,
                    'supplier_name': item.supplier_name
                }
                for item in items
            ]
        )

    def to_dict(self) -> Dict:
        return {'count': self.count, 'products': list(self.items)}
