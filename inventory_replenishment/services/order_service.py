# inventory_replenishment/services/order_service.py
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from inventory_replenishment.config import config
from inventory_replenishment.models import PurchaseOrder, PurchaseOrderLine, OrderStatus
from inventory_replenishment.core.entities import PlanOrigin, ReorderPlan
from inventory_replenishment.core.reorder_planning import plan_auto_reorder, build_manual_plan
from inventory_replenishment.core.replenishment_math import get_z_score_strategy
from inventory_replenishment.services.notification_service import (
    NotificationSink, LoggingNotificationSink,
    ORDER_CREATED, ORDER_UPDATED, STOCK_UPDATED
)
from inventory_replenishment.services.product_service import ProductService
from inventory_replenishment.services.supplier_service import SupplierService
from inventory_replenishment.utils.concurrency import SingleFlight
from inventory_replenishment.utils.date_utils import convert_to_date
from inventory_replenishment.exceptions import NotFoundError, OrderError
from inventory_replenishment.logging_setup import get_logger

logger = get_logger('order_service')

AUTO_REORDER_NOTE = 'Auto-generated reorder based on reorder points'

# One auto-reorder planning pass at a time per process
AUTO_REORDER_KEY = 'auto-reorder'
auto_reorder_flight = SingleFlight()

class OrderService:
    """Service for creating, planning and receiving purchase orders."""

    def __init__(
        self,
        session: Session,
        notification_sink: Optional[NotificationSink] = None,
        single_flight: Optional[SingleFlight] = None
    ):
        """Initialize the order service.

        Args:
            session: Database session
            notification_sink: Where order and stock events are sent
            single_flight: Guard for the auto-reorder pass (process-wide by default)
        """
        self.session = session
        self.notification_sink = notification_sink or LoggingNotificationSink()
        self.single_flight = single_flight or auto_reorder_flight
        self.product_service = ProductService(session)
        self.supplier_service = SupplierService(session)

    def get_order(self, order_id: int) -> Optional[PurchaseOrder]:
        """Get an order by ID.

        Args:
            order_id: Order ID

        Returns:
            PurchaseOrder object or None if not found
        """
        return self.session.get(PurchaseOrder, order_id)

    def get_orders(
        self,
        supplier_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
        origin: Optional[PlanOrigin] = None,
        from_date: Optional[date] = None
    ) -> List[PurchaseOrder]:
        """Get orders matching criteria, most recent first.

        Args:
            supplier_id: Optional supplier ID filter
            status: Optional order status filter
            origin: Optional manual/auto-generated filter
            from_date: Optional earliest order date

        Returns:
            List of purchase orders
        """
        query = self.session.query(PurchaseOrder)

        if supplier_id is not None:
            query = query.filter(PurchaseOrder.supplier_id == supplier_id)

        if status is not None:
            query = query.filter(PurchaseOrder.status == status)

        if origin is not None:
            query = query.filter(PurchaseOrder.origin == origin)

        if from_date is not None:
            query = query.filter(PurchaseOrder.order_date >= datetime.combine(from_date, datetime.min.time()))

        return query.order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc()).all()

    def _persist_plan(self, plan: ReorderPlan, notes: Optional[str] = None) -> PurchaseOrder:
        order = PurchaseOrder(
            supplier_id=plan.supplier_id,
            order_date=plan.created_at,
            expected_delivery_date=plan.expected_delivery_date,
            status=OrderStatus.PENDING,
            origin=plan.origin,
            total_amount=plan.total_amount,
            notes=notes
        )
        for line in plan.lines:
            order.lines.append(PurchaseOrderLine(
                product_id=line.product_id,
                quantity=line.quantity,
                unit_cost=line.unit_cost,
                total_cost=line.line_total
            ))

        self.session.add(order)
        self.session.flush()
        self.supplier_service.record_order(plan.supplier_id, plan.total_amount)
        return order

    def create_order(
        self,
        supplier_id: int,
        items: List[Dict],
        expected_delivery_date: Optional[Union[str, date]] = None,
        notes: Optional[str] = None
    ) -> PurchaseOrder:
        """Create a manual purchase order.

        Args:
            supplier_id: Supplier ID
            items: Dicts with 'product_id', 'quantity' and optional 'unit_cost'
                (defaults to the product's current unit cost)
            expected_delivery_date: Optional override of now + supplier lead time
            notes: Optional free text

        Returns:
            Created purchase order

        Raises:
            NotFoundError if the supplier or any product does not exist
            InvalidParameterError for an empty order or a bad quantity
        """
        supplier = self.supplier_service.require_supplier(supplier_id)

        lines = []
        for entry in items:
            product = self.product_service.get_product(entry.get('product_id'))
            if product is None:
                raise NotFoundError(f"Product not found: {entry.get('product_id')}")
            unit_cost = entry.get('unit_cost')
            lines.append((product.id, entry.get('quantity'), product.unit_cost if unit_cost is None else unit_cost))

        plan = build_manual_plan(supplier.to_profile(), lines)
        order = self._persist_plan(plan, notes=notes)

        if expected_delivery_date is not None:
            order.expected_delivery_date = convert_to_date(expected_delivery_date)

        logger.info(f"Created order {order.id} for supplier {supplier_id}: {len(lines)} lines, total {order.total_amount:.2f}")
        self.notification_sink.emit(ORDER_CREATED, self.order_to_dict(order))
        return order

    def plan_auto_reorder(self) -> List[ReorderPlan]:
        """Dry-run of the auto-reorder pass: plans only, nothing persisted."""
        rules = config.business_rules
        return plan_auto_reorder(
            self.product_service.get_active_catalog(),
            self.supplier_service.get_supplier_profiles(),
            z_score=get_z_score_strategy(rules['z_score_strategy'], rules['service_level_threshold']),
            reorder_point_source=rules['reorder_point_source']
        )

    def _generate_auto_reorders(self) -> List[int]:
        plans = self.plan_auto_reorder()
        if not plans:
            logger.info("No products need reordering")
            return []

        orders = [self._persist_plan(plan, notes=AUTO_REORDER_NOTE) for plan in plans]
        # Plans must be durable before another pass may read the catalog
        self.session.commit()

        logger.info(f"{len(orders)} reorder(s) created successfully")
        for order in orders:
            self.notification_sink.emit(ORDER_CREATED, self.order_to_dict(order))
        return [order.id for order in orders]

    def generate_auto_reorders(self) -> Dict:
        """Create one auto-generated purchase order per supplier with items to reorder.

        Concurrent calls share the in-flight pass instead of creating
        duplicate orders for the same deficit.

        Returns:
            Dictionary with created order ids and whether the result was shared
        """
        try:
            order_ids, shared = self.single_flight.do(AUTO_REORDER_KEY, self._generate_auto_reorders)
        except Exception as e:
            self.session.rollback()
            logger.error(f"Auto-reorder failed: {str(e)}")
            raise

        if shared:
            logger.info("Auto-reorder pass already in flight; returning its result")

        return {
            'success': True,
            'shared': shared,
            'orders_created': len(order_ids),
            'order_ids': order_ids,
            'message': f"{len(order_ids)} reorder(s) created successfully" if order_ids else 'No products need reordering'
        }

    def update_order_status(
        self,
        order_id: int,
        status: Union[str, OrderStatus],
        actual_delivery_date: Optional[Union[str, date]] = None
    ) -> PurchaseOrder:
        """Move an order to a new status.

        Delivering an order adds each line's quantity to stock. When an
        actual delivery date is given, the supplier's on-time rate is nudged.

        Raises:
            NotFoundError if the order does not exist
            OrderError if the order was already delivered or cancelled
        """
        order = self.get_order(order_id)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found")

        if isinstance(status, str):
            try:
                status = OrderStatus.from_string(status)
            except ValueError as e:
                raise OrderError(str(e))

        if order.status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            raise OrderError(f"Order {order_id} is already {order.status.value}")

        order.status = status
        if actual_delivery_date is not None:
            order.actual_delivery_date = convert_to_date(actual_delivery_date)

        if status == OrderStatus.DELIVERED:
            for line in order.lines:
                product = self.product_service.adjust_stock(line.product_id, line.quantity, 'add')
                self.notification_sink.emit(STOCK_UPDATED, {
                    'id': product.id,
                    'sku': product.sku,
                    'current_stock': product.current_stock
                })

            on_time = order.delivered_on_time
            if on_time is not None:
                self.supplier_service.record_delivery(order.supplier_id, on_time)

        self.session.flush()
        logger.info(f"Order {order_id} status set to {status.value}")
        self.notification_sink.emit(ORDER_UPDATED, self.order_to_dict(order))
        return order

    @staticmethod
    def order_to_dict(order: PurchaseOrder) -> Dict:
        return {
            'id': order.id,
            'supplier_id': order.supplier_id,
            'status': order.status.value if order.status else None,
            'origin': order.origin.value if order.origin else None,
            'total_amount': round(order.total_amount, 2),
            'expected_delivery_date': order.expected_delivery_date.isoformat() if order.expected_delivery_date else None,
            'items': [
                {
                    'product_id': line.product_id,
                    'quantity': line.quantity,
                    'unit_cost': line.unit_cost,
                    'total_cost': line.total_cost
                }
                for line in order.lines
            ]
        }
