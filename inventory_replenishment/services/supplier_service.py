# inventory_replenishment/services/supplier_service.py
from typing import Dict, List, Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from inventory_replenishment.models import Supplier
from inventory_replenishment.core.entities import SupplierProfile
from inventory_replenishment.core.replenishment_math import (
    calculate_supplier_performance, on_time_rate_step
)
from inventory_replenishment.exceptions import NotFoundError
from inventory_replenishment.logging_setup import get_logger

logger = get_logger('supplier_service')

class SupplierService:
    """Service for handling supplier-related operations."""

    def __init__(self, session: Session):
        """Initialize the supplier service.

        Args:
            session: Database session
        """
        self.session = session

    def get_supplier(self, supplier_id: int) -> Optional[Supplier]:
        """Get a supplier by ID.

        Args:
            supplier_id: Supplier ID

        Returns:
            Supplier object or None if not found
        """
        return self.session.get(Supplier, supplier_id)

    def require_supplier(self, supplier_id: int) -> Supplier:
        supplier = self.get_supplier(supplier_id)
        if supplier is None:
            raise NotFoundError(f"Supplier with ID {supplier_id} not found")
        return supplier

    def get_active_suppliers(self) -> List[Supplier]:
        return self.session.query(Supplier).filter(Supplier.is_active.is_(True)).order_by(Supplier.id).all()

    def get_supplier_profiles(self) -> Dict[int, SupplierProfile]:
        """Profiles of every supplier keyed by supplier ID."""
        return {s.id: s.to_profile() for s in self.session.query(Supplier).all()}

    def get_performance_score(self, supplier_id: int) -> float:
        """Get the 0-100 performance score for a supplier.

        Args:
            supplier_id: Supplier ID

        Returns:
            Score rounded to one decimal
        """
        supplier = self.require_supplier(supplier_id)
        score = calculate_supplier_performance(
            supplier.average_lead_time,
            supplier.on_time_delivery_rate,
            supplier.quality_rating
        )
        return round(score, 1)

    def record_order(self, supplier_id: int, amount: float) -> None:
        """Add an order to the supplier's running totals."""
        updated = self.session.query(Supplier).filter(Supplier.id == supplier_id).update(
            {
                Supplier.total_orders: Supplier.total_orders + 1,
                Supplier.total_value: Supplier.total_value + amount
            },
            synchronize_session='fetch'
        )
        if not updated:
            raise NotFoundError(f"Supplier with ID {supplier_id} not found")

    def record_delivery(self, supplier_id: int, on_time: bool) -> float:
        """Nudge the supplier's on-time delivery rate after a delivery.

        Args:
            supplier_id: Supplier ID
            on_time: Whether the delivery arrived by its expected date

        Returns:
            New on-time delivery rate
        """
        nudged = Supplier.on_time_delivery_rate + on_time_rate_step(on_time)
        updated = self.session.query(Supplier).filter(Supplier.id == supplier_id).update(
            {Supplier.on_time_delivery_rate: case((nudged > 1.0, 1.0), (nudged < 0.0, 0.0), else_=nudged)},
            synchronize_session='fetch'
        )
        if not updated:
            raise NotFoundError(f"Supplier with ID {supplier_id} not found")

        new_rate = (
            self.session.query(Supplier.on_time_delivery_rate)
            .filter(Supplier.id == supplier_id)
            .scalar()
        )
        logger.info(
            f"Supplier {supplier_id} delivery {'on time' if on_time else 'late'}: "
            f"on-time rate now {new_rate:.2f}"
        )
        return new_rate
