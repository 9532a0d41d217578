"""
Unit tests for the periodic reorder check.
"""
import threading
import unittest
from unittest.mock import MagicMock, patch

from inventory_replenishment.batch.reorder_monitor import ReorderMonitor, run_reorder_check_job
from inventory_replenishment.core.entities import StockItem
from inventory_replenishment.services.notification_service import CollectingNotificationSink, REORDER_ALERT
from inventory_replenishment.exceptions import BatchProcessError

def make_item(product_id, current_stock, reorder_point=10, **fields):
    return StockItem(
        product_id=product_id,
        sku=f"SKU-{product_id}",
        name=f"Product {product_id}",
        current_stock=current_stock,
        reorder_point=reorder_point,
        unit_cost=50.0,
        annual_demand=365.0,
        supplier_id=1,
        supplier_name='TechCorp Solutions',
        **fields
    )

class TestReorderMonitor(unittest.TestCase):
    """Test cases for ReorderMonitor."""

    def setUp(self):
        self.sink = CollectingNotificationSink()
        self.catalog = [
            make_item(1, current_stock=4),
            make_item(2, current_stock=40),
            make_item(3, current_stock=2, lead_time_days=-1),
            make_item(4, current_stock=10)
        ]
        self.provider = MagicMock(return_value=self.catalog)
        self.monitor = ReorderMonitor(
            catalog_provider=self.provider,
            notification_sink=self.sink,
            reorder_point_source='stored'
        )

    def test_alert_lists_eligible_items(self):
        eligible = self.monitor.check_reorder_points()

        self.assertEqual([item.product_id for item in eligible], [1, 4])
        alerts = self.sink.of_type(REORDER_ALERT)
        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0]['count'], 2)
        self.assertEqual(alerts[0]['products'][0], {
            'id': 1,
            'name': 'Product 1',
            'sku': 'SKU-1',
            'current_stock': 4,
            'reorder_point': 10,
            'supplier_name': 'TechCorp Solutions'
        })

    def test_malformed_item_skipped(self):
        eligible = self.monitor.check_reorder_points()
        self.assertNotIn(3, [item.product_id for item in eligible])

    def test_item_without_stock_value_skipped(self):
        catalog = [make_item(5, current_stock=None), make_item(1, current_stock=4)]

        eligible = self.monitor.check_reorder_points(catalog)

        self.assertEqual([item.product_id for item in eligible], [1])
        alerts = self.sink.of_type(REORDER_ALERT)
        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0]['count'], 1)

    def test_no_alert_when_nothing_eligible(self):
        eligible = self.monitor.check_reorder_points([make_item(2, current_stock=40)])

        self.assertEqual(eligible, [])
        self.assertEqual(self.sink.events, [])
        self.provider.assert_not_called()

    def test_on_tick_reads_catalog(self):
        eligible = self.monitor.on_tick()

        self.provider.assert_called_once_with()
        self.assertEqual(len(eligible), 2)
        self.assertFalse(self.monitor.guard.busy)

    def test_overlapping_tick_skipped(self):
        entered = threading.Event()
        release = threading.Event()

        def slow_catalog():
            entered.set()
            release.wait(5)
            return self.catalog

        monitor = ReorderMonitor(catalog_provider=slow_catalog, notification_sink=self.sink)
        results = {}
        worker = threading.Thread(target=lambda: results.setdefault('first', monitor.on_tick()))
        worker.start()
        self.assertTrue(entered.wait(5))

        self.assertIsNone(monitor.on_tick())

        release.set()
        worker.join(5)
        self.assertEqual(len(results['first']), 2)
        self.assertEqual(len(self.sink.of_type(REORDER_ALERT)), 1)

    def test_guard_released_after_failure(self):
        self.provider.side_effect = RuntimeError('database unavailable')

        with self.assertRaises(RuntimeError):
            self.monitor.on_tick()
        self.assertFalse(self.monitor.guard.busy)

class TestRunReorderCheckJob(unittest.TestCase):

    def setUp(self):
        self.sink = CollectingNotificationSink()

    @patch('inventory_replenishment.batch.reorder_monitor.log_manager')
    def test_job_results(self, mock_log_manager):
        monitor = ReorderMonitor(
            catalog_provider=lambda: [make_item(1, current_stock=4), make_item(2, current_stock=40)],
            notification_sink=self.sink
        )
        results = run_reorder_check_job(monitor)

        self.assertTrue(results['success'])
        self.assertFalse(results['skipped'])
        self.assertEqual(results['products_to_reorder'], 1)
        self.assertEqual(results['skus'], ['SKU-1'])
        mock_log_manager.job_started.assert_called_once_with('reorder_check')
        mock_log_manager.job_finished.assert_called_once()

    @patch('inventory_replenishment.batch.reorder_monitor.log_manager')
    def test_job_failure(self, mock_log_manager):
        monitor = ReorderMonitor(catalog_provider=MagicMock(side_effect=RuntimeError('boom')))

        with self.assertRaises(BatchProcessError):
            run_reorder_check_job(monitor)
        self.assertFalse(mock_log_manager.job_finished.call_args[1]['success'])

if __name__ == '__main__':
    unittest.main()
