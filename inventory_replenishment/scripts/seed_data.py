#!/usr/bin/env python
# seed_data.py - Load a small sample catalog into the replenishment database

from typing import Dict

from inventory_replenishment.db import db, session_scope
from inventory_replenishment.models import Supplier, Product, PurchaseOrderLine, PurchaseOrder
from inventory_replenishment.logging_setup import get_logger

logger = get_logger('seed_data')

SUPPLIERS = [
    {
        'name': 'TechCorp Solutions',
        'contact_person': 'John Smith',
        'email': 'john@techcorp.com',
        'phone': '+1-555-0101',
        'average_lead_time': 5,
        'on_time_delivery_rate': 0.95,
        'quality_rating': 4.5
    },
    {
        'name': 'Global Electronics Ltd',
        'contact_person': 'Sarah Johnson',
        'email': 'sarah@globalelectronics.com',
        'phone': '+1-555-0102',
        'average_lead_time': 7,
        'on_time_delivery_rate': 0.92,
        'quality_rating': 4.2
    },
    {
        'name': 'Fashion Forward Inc',
        'contact_person': 'Mike Chen',
        'email': 'mike@fashionforward.com',
        'phone': '+1-555-0103',
        'average_lead_time': 10,
        'on_time_delivery_rate': 0.88,
        'quality_rating': 4.0
    }
]

# (sku, name, category, stock, reorder point, max stock, unit cost, price,
#  supplier index, annual demand, ordering cost, holding rate, lead time, variability)
PRODUCTS = [
    ('LAPTOP-001', 'Business Laptop Pro', 'Electronics', 25, 10, 100, 800, 1200, 0, 120, 50, 0.2, 5, 0.15),
    ('PHONE-001', 'Smartphone X1', 'Electronics', 8, 15, 80, 400, 699, 1, 200, 40, 0.25, 7, 0.2),
    ('SHIRT-001', 'Cotton Business Shirt', 'Clothing', 50, 20, 200, 25, 49, 2, 300, 30, 0.15, 10, 0.1),
    ('TABLET-001', 'Professional Tablet', 'Electronics', 5, 12, 60, 300, 499, 0, 80, 45, 0.22, 5, 0.18),
    ('HEADPHONE-001', 'Wireless Headphones', 'Electronics', 30, 15, 100, 80, 149, 1, 150, 35, 0.18, 7, 0.12),
]

def clear_data(session) -> None:
    """Delete existing orders, products and suppliers."""
    session.query(PurchaseOrderLine).delete()
    session.query(PurchaseOrder).delete()
    session.query(Product).delete()
    session.query(Supplier).delete()

def seed_database(reset: bool = True) -> Dict:
    """Create the sample suppliers and products.

    Args:
        reset: Delete existing data first

    Returns:
        Dictionary with created counts
    """
    db.create_all_tables()

    with session_scope() as session:
        if reset:
            logger.info("Clearing existing data...")
            clear_data(session)

        suppliers = [Supplier(**fields) for fields in SUPPLIERS]
        session.add_all(suppliers)
        session.flush()
        logger.info(f"Created {len(suppliers)} suppliers")

        for (sku, name, category, stock, reorder_point, max_stock, unit_cost, price,
             supplier_index, annual_demand, ordering_cost, holding_rate, lead_time, variability) in PRODUCTS:
            session.add(Product(
                sku=sku,
                name=name,
                category=category,
                current_stock=stock,
                reorder_point=reorder_point,
                max_stock=max_stock,
                unit_cost=unit_cost,
                selling_price=price,
                supplier_id=suppliers[supplier_index].id,
                annual_demand=annual_demand,
                ordering_cost=ordering_cost,
                holding_cost_rate=holding_rate,
                lead_time_days=lead_time,
                demand_variability=variability
            ))
        logger.info(f"Created {len(PRODUCTS)} products")

    return {'suppliers': len(SUPPLIERS), 'products': len(PRODUCTS)}

if __name__ == "__main__":
    db.initialize()
    seed_database()
