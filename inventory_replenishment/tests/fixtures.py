"""
Shared database fixtures for the service tests.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from inventory_replenishment.models import Base, Supplier, Product

def make_session():
    """Fresh in-memory SQLite database with the schema created."""
    engine = create_engine('sqlite://')
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)()

def add_supplier(session, name='TechCorp Solutions', **fields):
    values = {
        'average_lead_time': 5,
        'on_time_delivery_rate': 0.95,
        'quality_rating': 4.5
    }
    values.update(fields)
    supplier = Supplier(name=name, **values)
    session.add(supplier)
    session.flush()
    return supplier

def add_product(session, supplier, sku, **fields):
    values = {
        'name': sku.title(),
        'category': 'Electronics',
        'current_stock': 25,
        'reorder_point': 10,
        'max_stock': 100,
        'unit_cost': 800.0,
        'selling_price': 1200.0,
        'annual_demand': 120.0,
        'ordering_cost': 50.0,
        'holding_cost_rate': 0.2,
        'lead_time_days': 5.0,
        'demand_variability': 0.15,
        'service_level': 0.95
    }
    values.update(fields)
    product = Product(sku=sku, supplier_id=supplier.id, **values)
    session.add(product)
    session.flush()
    return product
