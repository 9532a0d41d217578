"""
Unit tests for reorder evaluation and auto-reorder planning.
"""
import math
import unittest
from datetime import date, datetime

from inventory_replenishment.core.entities import StockItem, SupplierProfile, PlanOrigin
from inventory_replenishment.core.reorder_evaluation import evaluate_item, find_reorder_candidates
from inventory_replenishment.core.reorder_planning import plan_auto_reorder, build_manual_plan
from inventory_replenishment.exceptions import InvalidParameterError, NotFoundError

def make_item(product_id, supplier_id, current_stock, reorder_point=10, **fields):
    values = {
        'sku': f"SKU-{product_id}",
        'unit_cost': 800.0,
        'annual_demand': 120.0,
        'ordering_cost': 50.0,
        'holding_cost_rate': 0.2,
        'lead_time_days': 5.0,
        'demand_variability': 0.15
    }
    values.update(fields)
    return StockItem(
        product_id=product_id,
        supplier_id=supplier_id,
        current_stock=current_stock,
        reorder_point=reorder_point,
        **values
    )

class TestEvaluateItem(unittest.TestCase):
    """Test cases for evaluate_item."""

    def test_decision_chain(self):
        decision = evaluate_item(make_item(1, 1, current_stock=25))

        self.assertAlmostEqual(decision.daily_demand, 120 / 365)
        self.assertEqual(decision.safety_stock, 1)
        self.assertEqual(decision.reorder_point, 3)
        self.assertAlmostEqual(decision.eoq, math.sqrt(75))
        self.assertEqual(decision.trigger_point, 10)
        self.assertFalse(decision.needs_reorder)

    def test_stored_reorder_point_triggers(self):
        decision = evaluate_item(make_item(1, 1, current_stock=10))
        self.assertTrue(decision.needs_reorder)

    def test_calculated_reorder_point_source(self):
        item = make_item(1, 1, current_stock=5)

        stored = evaluate_item(item, reorder_point_source='stored')
        calculated = evaluate_item(item, reorder_point_source='calculated')

        self.assertTrue(stored.needs_reorder)
        self.assertFalse(calculated.needs_reorder)
        self.assertEqual(calculated.trigger_point, calculated.reorder_point)

    def test_unknown_reorder_point_source(self):
        with self.assertRaises(InvalidParameterError):
            evaluate_item(make_item(1, 1, current_stock=5), reorder_point_source='average')

    def test_recommended_quantity_covers_deficit(self):
        for stock, reorder_point in [(0, 50), (5, 10), (10, 10), (30, 10), (0, 0)]:
            item = make_item(1, 1, current_stock=stock, reorder_point=reorder_point)
            decision = evaluate_item(item)
            self.assertGreaterEqual(
                decision.recommended_order_quantity,
                max(0, decision.trigger_point - item.current_stock)
            )
            self.assertGreaterEqual(decision.recommended_order_quantity, decision.eoq)

    def test_deficit_above_eoq(self):
        decision = evaluate_item(make_item(1, 1, current_stock=0, reorder_point=50))
        self.assertEqual(decision.recommended_order_quantity, 50)

    def test_item_not_mutated(self):
        item = make_item(1, 1, current_stock=5)
        before = item
        evaluate_item(item)
        self.assertEqual(item, before)
        self.assertEqual(item.current_stock, 5)

    def test_missing_or_nan_stock_rejected(self):
        with self.assertRaises(InvalidParameterError):
            evaluate_item(make_item(1, 1, current_stock=None))
        with self.assertRaises(InvalidParameterError):
            evaluate_item(make_item(1, 1, current_stock=5, reorder_point=float('nan')))

    def test_negative_input_propagates(self):
        with self.assertRaises(InvalidParameterError):
            evaluate_item(make_item(1, 1, current_stock=5, annual_demand=-1))

    def test_candidates_keep_catalog_order(self):
        items = [make_item(3, 1, 0), make_item(1, 1, 50), make_item(2, 1, 1)]
        candidates = find_reorder_candidates(items)
        self.assertEqual([item.product_id for item, _ in candidates], [3, 2])

class TestPlanAutoReorder(unittest.TestCase):
    """Test cases for plan_auto_reorder."""

    def setUp(self):
        self.now = datetime(2024, 3, 1, 9, 30)
        self.suppliers = {
            1: SupplierProfile(supplier_id=1, name='TechCorp Solutions', average_lead_time_days=5),
            2: SupplierProfile(supplier_id=2, name='Global Electronics Ltd', average_lead_time_days=7)
        }

    def test_one_plan_per_supplier(self):
        items = [
            make_item(1, 1, current_stock=5),
            make_item(2, 2, current_stock=8),
            make_item(3, 1, current_stock=25),
            make_item(4, 1, current_stock=0, unit_cost=300.0),
        ]
        plans = plan_auto_reorder(items, self.suppliers, now=self.now)

        self.assertEqual(len(plans), 2)
        self.assertEqual([plan.supplier_id for plan in plans], [1, 2])
        self.assertEqual(sum(len(plan.lines) for plan in plans), 3)
        self.assertEqual(plans[0].product_ids, [1, 4])

        for plan in plans:
            self.assertEqual(plan.origin, PlanOrigin.AUTO_GENERATED)
            self.assertEqual(plan.created_at, self.now)
            self.assertAlmostEqual(plan.total_amount, sum(line.line_total for line in plan.lines))

        self.assertEqual(plans[0].expected_delivery_date, date(2024, 3, 6))
        self.assertEqual(plans[1].expected_delivery_date, date(2024, 3, 8))

    def test_line_quantity_rounds_up_recommendation(self):
        plans = plan_auto_reorder([make_item(1, 1, current_stock=5)], self.suppliers, now=self.now)
        line = plans[0].lines[0]

        # max(sqrt(75), 10 - 5) = 8.66
        self.assertEqual(line.quantity, 9)
        self.assertEqual(line.unit_cost, 800.0)
        self.assertEqual(line.line_total, 7200.0)

    def test_nothing_to_reorder(self):
        items = [make_item(1, 1, current_stock=50), make_item(2, 2, current_stock=40)]
        self.assertEqual(plan_auto_reorder(items, self.suppliers, now=self.now), [])
        self.assertEqual(plan_auto_reorder([], self.suppliers), [])

    def test_item_with_nothing_to_order_gets_no_line(self):
        idle = make_item(5, 2, current_stock=0, reorder_point=0, annual_demand=0.0)
        plans = plan_auto_reorder([make_item(1, 1, current_stock=5), idle], self.suppliers, now=self.now)

        self.assertEqual([plan.supplier_id for plan in plans], [1])
        self.assertEqual(plans[0].product_ids, [1])
        self.assertEqual(plan_auto_reorder([idle], self.suppliers, now=self.now), [])

    def test_missing_supplier_raises(self):
        with self.assertRaises(NotFoundError):
            plan_auto_reorder([make_item(1, 99, current_stock=0)], self.suppliers, now=self.now)

    def test_formula_error_propagates(self):
        items = [make_item(1, 1, current_stock=0), make_item(2, 1, current_stock=0, lead_time_days=-2)]
        with self.assertRaises(InvalidParameterError):
            plan_auto_reorder(items, self.suppliers, now=self.now)

class TestBuildManualPlan(unittest.TestCase):

    def setUp(self):
        self.supplier = SupplierProfile(supplier_id=1, average_lead_time_days=10)
        self.now = datetime(2024, 3, 1)

    def test_manual_plan(self):
        plan = build_manual_plan(self.supplier, [(1, 4, 25.0), (2, 2, 80.0)], now=self.now)

        self.assertEqual(plan.origin, PlanOrigin.MANUAL)
        self.assertEqual(plan.total_amount, 260.0)
        self.assertEqual(plan.expected_delivery_date, date(2024, 3, 11))

    def test_invalid_lines(self):
        with self.assertRaises(InvalidParameterError):
            build_manual_plan(self.supplier, [], now=self.now)
        with self.assertRaises(InvalidParameterError):
            build_manual_plan(self.supplier, [(1, 0, 25.0)], now=self.now)
        with self.assertRaises(InvalidParameterError):
            build_manual_plan(self.supplier, [(1, 2, -1.0)], now=self.now)

if __name__ == '__main__':
    unittest.main()
