# inventory_replenishment/services/product_service.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from inventory_replenishment.config import config
from inventory_replenishment.models import Product
from inventory_replenishment.core.entities import ReplenishmentDecision, StockItem
from inventory_replenishment.core.reorder_evaluation import evaluate_item
from inventory_replenishment.core.replenishment_math import get_z_score_strategy
from inventory_replenishment.exceptions import (
    InsufficientStockError, InvalidParameterError, NotFoundError
)
from inventory_replenishment.logging_setup import get_logger

logger = get_logger('product_service')

STOCK_OPERATIONS = ('add', 'subtract')

class ProductService:
    """Service for reading the catalog and applying stock movements."""

    def __init__(self, session: Session):
        """Initialize the product service.

        Args:
            session: Database session
        """
        self.session = session
        rules = config.business_rules
        self.z_score = get_z_score_strategy(rules['z_score_strategy'], rules['service_level_threshold'])
        self.reorder_point_source = rules['reorder_point_source']

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get a product by ID.

        Args:
            product_id: Product ID

        Returns:
            Product object or None if not found
        """
        return self.session.get(Product, product_id)

    def require_product(self, product_id: int) -> Product:
        product = self.get_product(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return product

    def get_active_products(self) -> List[Product]:
        return (
            self.session.query(Product)
            .options(joinedload(Product.supplier))
            .filter(Product.is_active.is_(True))
            .order_by(Product.id)
            .all()
        )

    def get_active_catalog(self) -> List[StockItem]:
        """Snapshot every active product, supplier name included."""
        return [product.to_stock_item() for product in self.get_active_products()]

    def get_low_stock_products(self) -> List[Product]:
        """Active products at or below their stored reorder point."""
        return (
            self.session.query(Product)
            .filter(Product.is_active.is_(True))
            .filter(Product.current_stock <= Product.reorder_point)
            .order_by(Product.id)
            .all()
        )

    def evaluate_product(self, product_id: int) -> ReplenishmentDecision:
        """Replenishment decision for one product, computed from a fresh read."""
        product = self.require_product(product_id)
        return evaluate_item(
            product.to_stock_item(),
            z_score=self.z_score,
            reorder_point_source=self.reorder_point_source
        )

    def adjust_stock(self, product_id: int, quantity: int, operation: str) -> Product:
        """Apply a stock movement to a product.

        'subtract' is a single conditional UPDATE, so a decrement that would
        drive stock negative changes nothing.

        Args:
            product_id: Product ID
            quantity: Units to add or remove (positive whole number)
            operation: 'add' or 'subtract'

        Returns:
            Updated product

        Raises:
            InvalidParameterError for a bad quantity or operation
            NotFoundError if the product does not exist
            InsufficientStockError if a decrement exceeds current stock
        """
        if operation not in STOCK_OPERATIONS:
            raise InvalidParameterError(f"Unknown stock operation: {operation}")
        if quantity is None or int(quantity) != quantity or quantity <= 0:
            raise InvalidParameterError(f"Quantity must be a positive whole number, got {quantity}")
        quantity = int(quantity)

        query = self.session.query(Product).filter(Product.id == product_id)

        if operation == 'add':
            updated = query.update(
                {
                    Product.current_stock: Product.current_stock + quantity,
                    Product.last_restocked: datetime.now()
                },
                synchronize_session='fetch'
            )
        else:
            updated = query.filter(Product.current_stock >= quantity).update(
                {
                    Product.current_stock: Product.current_stock - quantity,
                    Product.total_sold: Product.total_sold + quantity
                },
                synchronize_session='fetch'
            )

        if not updated:
            product = self.require_product(product_id)
            self.session.refresh(product)
            raise InsufficientStockError(
                f"Cannot remove {quantity} units of {product.sku}: only {product.current_stock} in stock",
                details={'product_id': product_id, 'requested': quantity, 'available': product.current_stock}
            )

        product = self.require_product(product_id)
        self.session.refresh(product)
        logger.info(f"Stock {operation} {quantity} for product {product_id}: now {product.current_stock}")
        return product
