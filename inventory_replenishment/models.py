# inventory_replenishment/models.py
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Boolean, ForeignKey, Text, Enum
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
import enum

from inventory_replenishment.config import config
from inventory_replenishment.core.entities import StockItem, SupplierProfile, PlanOrigin

Base = declarative_base()

class OrderStatus(enum.Enum):
    """Purchase order lifecycle.

    Values:
        PENDING: Created, not yet confirmed by the supplier
        CONFIRMED: Accepted by the supplier
        SHIPPED: In transit
        DELIVERED: Received; stock has been incremented
        CANCELLED: Will not be delivered
    """
    PENDING = 'Pending'
    CONFIRMED = 'Confirmed'
    SHIPPED = 'Shipped'
    DELIVERED = 'Delivered'
    CANCELLED = 'Cancelled'

    def __str__(self):
        """Return the string value of the enum."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> 'OrderStatus':
        """Create an OrderStatus from its display value or member name.

        Raises:
            ValueError if the value is not a known status
        """
        for status in cls:
            if value in (status.value, status.name):
                return status
        valid = ', '.join(s.value for s in cls)
        raise ValueError(f"Invalid order status: {value}. Valid values are: {valid}")

OPEN_ORDER_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED)

def business_rule_default(key):
    """Column default read from BUSINESS_RULES at insert time."""
    return lambda: config.business_rules[key]

def _or_rule(value, key):
    # Unsaved rows have no column defaults applied yet
    return value if value is not None else config.business_rules[key]

class Supplier(Base):
    __tablename__ = 'supplier'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    contact_person = Column(String(100))
    email = Column(String(255))
    phone = Column(String(50))

    # Performance metrics
    average_lead_time = Column(Float, default=business_rule_default('default_lead_time_days'))
    on_time_delivery_rate = Column(Float, default=0.95)
    quality_rating = Column(Float, default=4.5)
    total_orders = Column(Integer, default=0)
    total_value = Column(Float, default=0.0)

    payment_terms = Column(String(20), default='Net 30')
    minimum_order_value = Column(Float, default=0.0)
    is_active = Column(Boolean, default=True)

    products = relationship("Product", back_populates="supplier")
    orders = relationship("PurchaseOrder", back_populates="supplier")

    def to_profile(self) -> SupplierProfile:
        return SupplierProfile(
            supplier_id=self.id,
            name=self.name,
            average_lead_time_days=_or_rule(self.average_lead_time, 'default_lead_time_days'),
            on_time_delivery_rate=self.on_time_delivery_rate,
            quality_rating=self.quality_rating,
            total_orders=self.total_orders or 0,
            total_value=self.total_value or 0.0
        )

class Product(Base):
    """Stocked item with its EOQ and safety stock parameters."""
    __tablename__ = 'product'

    id = Column(Integer, primary_key=True)
    sku = Column(String(50), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(50), nullable=False, default='Other')

    current_stock = Column(Integer, nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=0)
    max_stock = Column(Integer, nullable=False, default=0)
    unit_cost = Column(Float, nullable=False, default=0.0)
    selling_price = Column(Float, nullable=False, default=0.0)
    supplier_id = Column(Integer, ForeignKey('supplier.id'), nullable=False)

    # EOQ parameters
    annual_demand = Column(Float, nullable=False, default=0.0)
    ordering_cost = Column(Float, nullable=False, default=business_rule_default('default_ordering_cost'))
    holding_cost_rate = Column(Float, nullable=False, default=business_rule_default('default_holding_cost_rate'))

    # Safety stock parameters
    lead_time_days = Column(Float, nullable=False, default=business_rule_default('default_lead_time_days'))
    demand_variability = Column(Float, default=business_rule_default('default_demand_variability'))
    service_level = Column(Float, default=business_rule_default('default_service_level'))

    last_restocked = Column(DateTime, server_default=func.now())
    total_sold = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)

    supplier = relationship("Supplier", back_populates="products")

    def to_stock_item(self) -> StockItem:
        """Snapshot the row for the pure replenishment calculations."""
        return StockItem(
            product_id=self.id,
            sku=self.sku,
            name=self.name,
            category=self.category,
            current_stock=self.current_stock,
            reorder_point=self.reorder_point,
            max_stock=self.max_stock,
            unit_cost=self.unit_cost,
            selling_price=self.selling_price,
            annual_demand=self.annual_demand,
            ordering_cost=_or_rule(self.ordering_cost, 'default_ordering_cost'),
            holding_cost_rate=_or_rule(self.holding_cost_rate, 'default_holding_cost_rate'),
            lead_time_days=_or_rule(self.lead_time_days, 'default_lead_time_days'),
            demand_variability=_or_rule(self.demand_variability, 'default_demand_variability'),
            service_level=_or_rule(self.service_level, 'default_service_level'),
            total_sold=self.total_sold or 0,
            supplier_id=self.supplier_id,
            supplier_name=self.supplier.name if self.supplier else None
        )

class PurchaseOrder(Base):
    __tablename__ = 'purchase_order'

    id = Column(Integer, primary_key=True)
    supplier_id = Column(Integer, ForeignKey('supplier.id'), nullable=False)
    order_date = Column(DateTime, nullable=False, server_default=func.now())
    expected_delivery_date = Column(Date)
    actual_delivery_date = Column(Date)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    origin = Column(Enum(PlanOrigin), nullable=False, default=PlanOrigin.MANUAL)
    total_amount = Column(Float, nullable=False, default=0.0)
    notes = Column(Text)

    supplier = relationship("Supplier", back_populates="orders")
    lines = relationship("PurchaseOrderLine", back_populates="order", cascade="all, delete-orphan")

    @property
    def is_auto_generated(self) -> bool:
        return self.origin == PlanOrigin.AUTO_GENERATED

    @property
    def delivered_on_time(self):
        """None until both an expected and an actual delivery date exist."""
        if self.expected_delivery_date is None or self.actual_delivery_date is None:
            return None
        return self.actual_delivery_date <= self.expected_delivery_date

class PurchaseOrderLine(Base):
    __tablename__ = 'purchase_order_line'

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey('purchase_order.id'), nullable=False)
    product_id = Column(Integer, ForeignKey('product.id'), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_cost = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)

    order = relationship("PurchaseOrder", back_populates="lines")
    product = relationship("Product")
