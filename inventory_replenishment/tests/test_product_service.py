"""
Tests for ProductService and SupplierService against SQLite.
"""
import os
import tempfile
import threading
import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from inventory_replenishment.models import Base, Product
from inventory_replenishment.services.product_service import ProductService
from inventory_replenishment.services.supplier_service import SupplierService
from inventory_replenishment.exceptions import (
    InsufficientStockError, InvalidParameterError, NotFoundError
)
from inventory_replenishment.tests.fixtures import make_session, add_supplier, add_product

class TestProductService(unittest.TestCase):
    """Test cases for ProductService."""

    def setUp(self):
        self.session = make_session()
        self.supplier = add_supplier(self.session)
        self.laptop = add_product(self.session, self.supplier, 'LAPTOP-001', current_stock=25)
        self.tablet = add_product(self.session, self.supplier, 'TABLET-001', current_stock=5, reorder_point=12)
        self.retired = add_product(self.session, self.supplier, 'RETIRED-001', current_stock=0, is_active=False)
        self.session.commit()
        self.service = ProductService(self.session)

    def tearDown(self):
        self.session.close()

    def test_active_catalog(self):
        catalog = self.service.get_active_catalog()

        self.assertEqual([item.sku for item in catalog], ['LAPTOP-001', 'TABLET-001'])
        self.assertEqual(catalog[0].supplier_name, 'TechCorp Solutions')
        self.assertEqual(catalog[0].current_stock, 25)

    def test_low_stock_products(self):
        self.assertEqual([p.sku for p in self.service.get_low_stock_products()], ['TABLET-001'])

    def test_evaluate_product(self):
        decision = self.service.evaluate_product(self.tablet.id)

        self.assertTrue(decision.needs_reorder)
        self.assertEqual(decision.trigger_point, 12)
        self.assertEqual(decision.product_id, self.tablet.id)

        with self.assertRaises(NotFoundError):
            self.service.evaluate_product(999)

    def test_subtract_stock(self):
        product = self.service.adjust_stock(self.laptop.id, 10, 'subtract')

        self.assertEqual(product.current_stock, 15)
        self.assertEqual(product.total_sold, 10)

    def test_subtract_to_zero(self):
        product = self.service.adjust_stock(self.laptop.id, 25, 'subtract')
        self.assertEqual(product.current_stock, 0)

    def test_over_decrement_leaves_stock_unchanged(self):
        with self.assertRaises(InsufficientStockError) as context:
            self.service.adjust_stock(self.tablet.id, 6, 'subtract')

        self.assertEqual(context.exception.details['available'], 5)
        self.session.refresh(self.tablet)
        self.assertEqual(self.tablet.current_stock, 5)
        self.assertEqual(self.tablet.total_sold, 0)

    def test_add_stock(self):
        product = self.service.adjust_stock(self.tablet.id, 20, 'add')

        self.assertEqual(product.current_stock, 25)
        self.assertIsNotNone(product.last_restocked)

    def test_missing_product(self):
        with self.assertRaises(NotFoundError):
            self.service.adjust_stock(999, 1, 'subtract')
        with self.assertRaises(NotFoundError):
            self.service.adjust_stock(999, 1, 'add')

    def test_invalid_adjustments(self):
        with self.assertRaises(InvalidParameterError):
            self.service.adjust_stock(self.laptop.id, 0, 'add')
        with self.assertRaises(InvalidParameterError):
            self.service.adjust_stock(self.laptop.id, -3, 'subtract')
        with self.assertRaises(InvalidParameterError):
            self.service.adjust_stock(self.laptop.id, 2, 'set')

class TestConcurrentDecrement(unittest.TestCase):
    """Two sessions racing for the same stock on a file-backed database."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.engine = create_engine(
            f"sqlite:///{os.path.join(self.tmpdir.name, 'stock.db')}",
            connect_args={'check_same_thread': False, 'timeout': 10}
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine)

        session = self.Session()
        supplier = add_supplier(session)
        self.product_id = add_product(session, supplier, 'TABLET-001', current_stock=5).id
        session.commit()
        session.close()

    def tearDown(self):
        self.engine.dispose()
        self.tmpdir.cleanup()

    def test_only_one_over_budget_decrement_wins(self):
        barrier = threading.Barrier(2)
        outcomes = []
        lock = threading.Lock()

        def decrement():
            session = self.Session()
            try:
                barrier.wait()
                ProductService(session).adjust_stock(self.product_id, 4, 'subtract')
                session.commit()
                result = 'ok'
            except InsufficientStockError:
                session.rollback()
                result = 'insufficient'
            finally:
                session.close()
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=decrement) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        self.assertEqual(sorted(outcomes), ['insufficient', 'ok'])

        session = self.Session()
        try:
            product = session.get(Product, self.product_id)
            self.assertEqual(product.current_stock, 1)
            self.assertEqual(product.total_sold, 4)
        finally:
            session.close()

class TestSupplierService(unittest.TestCase):
    """Test cases for SupplierService."""

    def setUp(self):
        self.session = make_session()
        self.supplier = add_supplier(self.session, average_lead_time=7, on_time_delivery_rate=0.95, quality_rating=4.5)
        self.session.commit()
        self.service = SupplierService(self.session)

    def tearDown(self):
        self.session.close()

    def test_performance_score(self):
        self.assertEqual(self.service.get_performance_score(self.supplier.id), 78.3)
        with self.assertRaises(NotFoundError):
            self.service.get_performance_score(999)

    def test_profiles(self):
        profiles = self.service.get_supplier_profiles()

        self.assertEqual(list(profiles), [self.supplier.id])
        self.assertEqual(profiles[self.supplier.id].average_lead_time_days, 7)

    def test_record_order(self):
        self.service.record_order(self.supplier.id, 250.0)
        self.service.record_order(self.supplier.id, 100.0)

        self.assertEqual(self.supplier.total_orders, 2)
        self.assertEqual(self.supplier.total_value, 350.0)

        with self.assertRaises(NotFoundError):
            self.service.record_order(999, 10.0)

    def test_record_delivery(self):
        self.assertAlmostEqual(self.service.record_delivery(self.supplier.id, True), 0.96)
        self.assertAlmostEqual(self.service.record_delivery(self.supplier.id, False), 0.94)

    def test_record_delivery_clamps_in_one_update(self):
        capped = add_supplier(self.session, name='Reliable', on_time_delivery_rate=0.995)
        floored = add_supplier(self.session, name='Slow', on_time_delivery_rate=0.01)

        self.assertEqual(self.service.record_delivery(capped.id, True), 1.0)
        self.assertEqual(self.service.record_delivery(floored.id, False), 0.0)
        self.assertEqual(capped.on_time_delivery_rate, 1.0)

        with self.assertRaises(NotFoundError):
            self.service.record_delivery(999, True)

if __name__ == '__main__':
    unittest.main()
