import argparse
import sys
from datetime import date

from tabulate import tabulate

from inventory_replenishment.config import config
from inventory_replenishment.db import db, session_scope
from inventory_replenishment.logging_setup import get_logger, log_exception
from inventory_replenishment.core.demand_forecast import seeded_rng
from inventory_replenishment.exceptions import ReplenishmentError

def init_application(db_url=None):
    """Initialize application components."""
    db.initialize(db_url)
    db.check_connection()

    log = get_logger('app')
    log.info("Inventory Replenishment Engine initialized")
    log.info(f"Using database: {db_url or config.get_db_url()}")

    return True

def init_db(args):
    if args.drop:
        db.drop_all_tables()
    db.create_all_tables()
    print("Database tables created")

def seed(args):
    from inventory_replenishment.scripts.seed_data import seed_database

    results = seed_database(reset=not args.keep)
    print(f"Seeded {results['suppliers']} suppliers and {results['products']} products")

def evaluate(args):
    from inventory_replenishment.services.product_service import ProductService

    with session_scope() as session:
        product_service = ProductService(session)
        sku = product_service.require_product(args.product_id).sku
        decision = product_service.evaluate_product(args.product_id)
        rows = [[key, value] for key, value in decision.to_dict().items()]

    print(f"\nReplenishment decision for {sku}:")
    print(tabulate(rows, headers=['Field', 'Value']))

def abc(args):
    from inventory_replenishment.services.analytics_service import AnalyticsService

    with session_scope() as session:
        analysis = AnalyticsService(session).abc_analysis()

    rows = []
    for name, summary in analysis['summary'].items():
        rows.append([
            name,
            summary['count'],
            f"{summary['total_value']:.2f}",
            f"{summary['value_percentage']:.1f}%",
            ', '.join(analysis['classes'][name])
        ])

    print("\nABC Analysis:")
    print(tabulate(rows, headers=['Class', 'Items', 'Value', 'Share', 'SKUs']))
    if analysis['unclassified']:
        print(f"\nUnclassified (no inventory value): {', '.join(analysis['unclassified'])}")
    print(f"\nTotal inventory value: {analysis['total_value']:.2f}")

def forecast(args):
    from inventory_replenishment.services.analytics_service import AnalyticsService

    rng = seeded_rng(args.seed) if args.seed is not None else None
    with session_scope() as session:
        series = AnalyticsService(session).forecast_product(args.product_id, days=args.days, rng=rng)

    rows = [[p.date.isoformat(), p.projected_demand] for p in series.points]
    print(f"\nDemand forecast for product {args.product_id}:")
    print(tabulate(rows, headers=['Date', 'Demand']))
    print(f"\nTotal: {series.total_projected_demand}  Risk: {series.stockout_risk.value}  "
          f"Action: {series.recommended_action}")

def check_reorder(args):
    from inventory_replenishment.batch.reorder_monitor import ReorderMonitor

    eligible = ReorderMonitor().check_reorder_points()
    if not eligible:
        print("No products need reordering")
        return

    rows = [
        [item.product_id, item.sku, item.name, item.current_stock, item.reorder_point, item.supplier_name]
        for item in eligible
    ]
    print("\nProducts needing reorder:")
    print(tabulate(rows, headers=['ID', 'SKU', 'Name', 'Stock', 'Reorder Point', 'Supplier']))
    print(f"\nTotal: {len(eligible)}")

def auto_reorder(args):
    from inventory_replenishment.services.order_service import OrderService

    with session_scope() as session:
        order_service = OrderService(session)

        if args.dry_run:
            plans = order_service.plan_auto_reorder()
            rows = [
                [plan.supplier_id, len(plan.lines), f"{plan.total_amount:.2f}", plan.expected_delivery_date.isoformat()]
                for plan in plans
            ]
            print("\nReorder plans (dry run):")
            print(tabulate(rows, headers=['Supplier', 'Lines', 'Total', 'Expected Delivery']))
            return

        results = order_service.generate_auto_reorders()

    print(results['message'])
    if results['order_ids']:
        print(f"Order IDs: {', '.join(str(order_id) for order_id in results['order_ids'])}")

def adjust_stock(args):
    from inventory_replenishment.services.product_service import ProductService

    with session_scope() as session:
        product = ProductService(session).adjust_stock(args.product_id, args.quantity, args.operation)
        print(f"{product.sku}: stock now {product.current_stock}")

def deliver(args):
    from inventory_replenishment.services.order_service import OrderService

    actual = args.date or date.today().isoformat()
    with session_scope() as session:
        order = OrderService(session).update_order_status(args.order_id, 'Delivered', actual_delivery_date=actual)
        on_time = order.delivered_on_time
        print(f"Order {order.id} delivered ({len(order.lines)} lines)"
              + ('' if on_time is None else f", {'on time' if on_time else 'late'}"))

def suppliers(args):
    from inventory_replenishment.services.supplier_service import SupplierService

    with session_scope() as session:
        rows = []
        for supplier in SupplierService(session).get_active_suppliers():
            profile = supplier.to_profile()
            rows.append([
                profile.supplier_id,
                profile.name,
                profile.average_lead_time_days,
                f"{profile.on_time_delivery_rate:.0%}",
                profile.quality_rating,
                profile.total_orders,
                f"{profile.performance_score:.1f}"
            ])

    print("\nSuppliers:")
    print(tabulate(rows, headers=['ID', 'Name', 'Lead Time', 'On Time', 'Quality', 'Orders', 'Score']))

def overview(args):
    from inventory_replenishment.services.analytics_service import AnalyticsService

    with session_scope() as session:
        analytics = AnalyticsService(session)
        dashboard = analytics.dashboard_overview()
        inventory = analytics.inventory_overview()

    print("\nDashboard:")
    print(tabulate(list(dashboard.items()), headers=['Metric', 'Value']))

    rows = [
        [category, stats['count'], f"{stats['value']:.2f}", stats['low_stock']]
        for category, stats in inventory['category_stats'].items()
    ]
    print("\nCategories:")
    print(tabulate(rows, headers=['Category', 'Products', 'Value', 'Low Stock']))

    rows = [[row['sku'], row['name'], row['category'], row['turnover']] for row in inventory['turnover_analysis']]
    print("\nTop inventory turnover:")
    print(tabulate(rows, headers=['SKU', 'Name', 'Category', 'Turnover']))

def order_analytics(args):
    from inventory_replenishment.services.analytics_service import AnalyticsService

    with session_scope() as session:
        analytics = AnalyticsService(session).order_analytics(period_days=args.period_days)

    print(f"\nOrders over the last {args.period_days} days: {analytics['total_orders']} "
          f"worth {analytics['total_value']:.2f}")

    rows = [[day, stats['count'], f"{stats['value']:.2f}"] for day, stats in analytics['order_trends'].items()]
    print("\nDaily orders:")
    print(tabulate(rows, headers=['Date', 'Orders', 'Value']))

    print("\nBy status:")
    print(tabulate(list(analytics['status_stats'].items()), headers=['Status', 'Orders']))

    rows = [
        [row['name'], row['order_count'], f"{row['total_value']:.2f}",
         f"{row['on_time_deliveries']}/{row['total_deliveries']}"]
        for row in analytics['supplier_stats']
    ]
    print("\nBy supplier:")
    print(tabulate(rows, headers=['Supplier', 'Orders', 'Value', 'On Time']))

def monitor(args):
    from inventory_replenishment.batch.reorder_monitor import run_reorder_check_job, run_periodic

    if args.once:
        results = run_reorder_check_job()
        print(f"{results['products_to_reorder']} product(s) need reordering")
        return

    try:
        run_periodic(interval_minutes=args.interval_minutes)
    except KeyboardInterrupt:
        print("Monitor stopped")

COMMANDS = {
    'init-db': init_db,
    'seed': seed,
    'evaluate': evaluate,
    'abc': abc,
    'forecast': forecast,
    'check-reorder': check_reorder,
    'auto-reorder': auto_reorder,
    'adjust-stock': adjust_stock,
    'deliver': deliver,
    'suppliers': suppliers,
    'overview': overview,
    'order-analytics': order_analytics,
    'monitor': monitor
}

def build_parser():
    parser = argparse.ArgumentParser(description='Inventory Replenishment Engine')
    parser.add_argument('--db-url', help='Database URL (overrides DATABASE.url)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    init_parser = subparsers.add_parser('init-db', help='Create the database schema')
    init_parser.add_argument('--drop', action='store_true', help='Drop existing tables first')

    seed_parser = subparsers.add_parser('seed', help='Load sample suppliers and products')
    seed_parser.add_argument('--keep', action='store_true', help='Keep existing data')

    evaluate_parser = subparsers.add_parser('evaluate', help='Show the replenishment decision for a product')
    evaluate_parser.add_argument('product_id', type=int)

    subparsers.add_parser('abc', help='Classify the catalog by inventory value')

    forecast_parser = subparsers.add_parser('forecast', help='Forecast daily demand for a product')
    forecast_parser.add_argument('product_id', type=int)
    forecast_parser.add_argument('--days', type=int, default=None,
                                 help='Forecast horizon (BUSINESS_RULES.forecast_days by default)')
    forecast_parser.add_argument('--seed', type=int, default=None, help='Seed for reproducible noise')

    subparsers.add_parser('check-reorder', help='List products at or below their reorder point')

    reorder_parser = subparsers.add_parser('auto-reorder', help='Create purchase orders for products needing reorder')
    reorder_parser.add_argument('--dry-run', action='store_true', help='Show the plans without creating orders')

    stock_parser = subparsers.add_parser('adjust-stock', help='Add or remove stock for a product')
    stock_parser.add_argument('product_id', type=int)
    stock_parser.add_argument('quantity', type=int)
    stock_parser.add_argument('--operation', choices=['add', 'subtract'], default='subtract')

    deliver_parser = subparsers.add_parser('deliver', help='Mark a purchase order delivered')
    deliver_parser.add_argument('order_id', type=int)
    deliver_parser.add_argument('--date', help='Actual delivery date (YYYY-MM-DD, today by default)')

    subparsers.add_parser('suppliers', help='List active suppliers with performance scores')

    subparsers.add_parser('overview', help='Show dashboard and inventory statistics')

    orders_parser = subparsers.add_parser('order-analytics', help='Summarize recent purchase orders')
    orders_parser.add_argument('--period-days', type=int, default=30, help='Trailing window in days')

    monitor_parser = subparsers.add_parser('monitor', help='Run the periodic reorder check')
    monitor_parser.add_argument('--interval-minutes', type=int, default=None)
    monitor_parser.add_argument('--once', action='store_true', help='Run a single pass and exit')

    return parser

def main(argv=None):
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    init_application(args.db_url)

    try:
        COMMANDS[args.command](args)
    except ReplenishmentError as e:
        log_exception('cli', e, f"{args.command} failed")
        print(f"Error: {str(e)}", file=sys.stderr)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
