# inventory_replenishment/services/analytics_service.py
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import numpy as np
from sqlalchemy.orm import Session, joinedload

from inventory_replenishment.config import config
from inventory_replenishment.models import PurchaseOrder, Supplier, OrderStatus, OPEN_ORDER_STATUSES
from inventory_replenishment.core.abc_analysis import classify_abc, summarize_buckets
from inventory_replenishment.core.demand_forecast import forecast_demand
from inventory_replenishment.core.entities import ForecastSeries, StockoutRisk
from inventory_replenishment.core.replenishment_math import calculate_inventory_turnover
from inventory_replenishment.services.product_service import ProductService
from inventory_replenishment.exceptions import InvalidParameterError, ReplenishmentError
from inventory_replenishment.logging_setup import get_logger

logger = get_logger('analytics')

TOP_TURNOVER_COUNT = 10
DEFAULT_ORDER_PERIOD_DAYS = 30

class AnalyticsService:
    """Read-side analytics over the active catalog."""

    def __init__(self, session: Session):
        """Initialize the analytics service.

        Args:
            session: Database session
        """
        self.session = session
        self.product_service = ProductService(session)

    def abc_analysis(self, required: bool = False) -> Dict:
        """Classify the active catalog into A/B/C value classes.

        Returns:
            Dictionary with per-class summaries and member SKUs
        """
        analysis = classify_abc(self.product_service.get_active_catalog(), required=required)
        return {
            'summary': summarize_buckets(analysis),
            'classes': {
                name: [item.sku for item in analysis.bucket(name)]
                for name in ('A', 'B', 'C')
            },
            'unclassified': [item.sku for item in analysis.unclassified],
            'total_value': round(analysis.total_value, 2)
        }

    def inventory_overview(self) -> Dict:
        """Category statistics, top turnover items and total inventory value."""
        catalog = self.product_service.get_active_catalog()

        category_stats: Dict[str, Dict] = {}
        turnover = []
        for item in catalog:
            stats = category_stats.setdefault(item.category, {'count': 0, 'value': 0.0, 'low_stock': 0})
            stats['count'] += 1
            stats['value'] += item.inventory_value
            if item.current_stock <= item.reorder_point:
                stats['low_stock'] += 1

            try:
                ratio = calculate_inventory_turnover(item.total_sold, item.unit_cost, item.current_stock)
            except ReplenishmentError as e:
                logger.warning(f"Skipping turnover for {item.sku}: {str(e)}")
                continue
            turnover.append({
                'name': item.name,
                'sku': item.sku,
                'turnover': round(ratio, 2),
                'category': item.category
            })

        turnover.sort(key=lambda row: row['turnover'], reverse=True)

        return {
            'category_stats': category_stats,
            'turnover_analysis': turnover[:TOP_TURNOVER_COUNT],
            'total_inventory_value': round(sum(item.inventory_value for item in catalog), 2)
        }

    def dashboard_overview(self) -> Dict:
        """Headline counts for the dashboard."""
        catalog = self.product_service.get_active_catalog()
        pending_orders = (
            self.session.query(PurchaseOrder)
            .filter(PurchaseOrder.status.in_(OPEN_ORDER_STATUSES))
            .count()
        )
        total_suppliers = self.session.query(Supplier).filter(Supplier.is_active.is_(True)).count()

        return {
            'total_products': len(catalog),
            'low_stock_products': len(self.product_service.get_low_stock_products()),
            'pending_orders': pending_orders,
            'total_suppliers': total_suppliers,
            'total_inventory_value': round(sum(item.inventory_value for item in catalog), 2)
        }

    def forecast_product(
        self,
        product_id: int,
        days: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ) -> ForecastSeries:
        """Forecast daily demand for one product.

        Raises:
            NotFoundError if the product does not exist
        """
        product = self.product_service.require_product(product_id)
        if days is None:
            days = config.business_rules['forecast_days']
        return forecast_demand(product.to_stock_item(), days=days, rng=rng)

    def forecast_catalog(
        self,
        days: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ) -> Dict:
        """Forecast every active product, skipping items with bad data.

        Returns:
            Dictionary with forecasts keyed by SKU and the skipped SKUs
        """
        if days is None:
            days = config.business_rules['forecast_days']
        if rng is None:
            rng = np.random.default_rng()

        forecasts: Dict[str, ForecastSeries] = {}
        skipped: List[Dict] = []
        for item in self.product_service.get_active_catalog():
            try:
                forecasts[item.sku] = forecast_demand(item, days=days, rng=rng)
            except ReplenishmentError as e:
                logger.warning(f"Skipping forecast for {item.sku}: {str(e)}")
                skipped.append({'sku': item.sku, 'error': e.to_dict()})

        return {
            'forecasts': forecasts,
            'skipped': skipped,
            'high_risk': [sku for sku, series in forecasts.items() if series.stockout_risk == StockoutRisk.HIGH]
        }

    def order_analytics(self, period_days: int = DEFAULT_ORDER_PERIOD_DAYS, now: Optional[datetime] = None) -> Dict:
        """Purchase order activity over the trailing period.

        Orders placed on or after ``now - period_days`` are grouped by order
        day, by status and by supplier. A supplier delivery counts only once
        the order is Delivered; it is on time when it arrived by the expected
        date.

        Args:
            period_days: Length of the trailing window in days
            now: End of the window (current time by default)

        Returns:
            Dictionary with order_trends, status_stats, supplier_stats,
            total_orders and total_value
        """
        if period_days is None or period_days <= 0:
            raise InvalidParameterError(f"Period must be a positive number of days, got {period_days}")

        end = now or datetime.now()
        start = end - timedelta(days=period_days)
        orders = (
            self.session.query(PurchaseOrder)
            .options(joinedload(PurchaseOrder.supplier))
            .filter(PurchaseOrder.order_date >= start, PurchaseOrder.order_date <= end)
            .order_by(PurchaseOrder.order_date, PurchaseOrder.id)
            .all()
        )

        order_trends: Dict[str, Dict] = {}
        status_stats: Dict[str, int] = {}
        supplier_stats: Dict[int, Dict] = {}
        for order in orders:
            day = order_trends.setdefault(order.order_date.date().isoformat(), {'count': 0, 'value': 0.0})
            day['count'] += 1
            day['value'] += order.total_amount

            status = str(order.status)
            status_stats[status] = status_stats.get(status, 0) + 1

            stats = supplier_stats.setdefault(order.supplier_id, {
                'name': order.supplier.name,
                'order_count': 0,
                'total_value': 0.0,
                'on_time_deliveries': 0,
                'total_deliveries': 0
            })
            stats['order_count'] += 1
            stats['total_value'] += order.total_amount
            if order.status == OrderStatus.DELIVERED:
                stats['total_deliveries'] += 1
                if order.delivered_on_time:
                    stats['on_time_deliveries'] += 1

        logger.info(f"Order analytics over {period_days} days: {len(orders)} orders")

        return {
            'order_trends': order_trends,
            'status_stats': status_stats,
            'supplier_stats': list(supplier_stats.values()),
            'total_orders': len(orders),
            'total_value': round(sum(order.total_amount for order in orders), 2)
        }
