#!/usr/bin/env python
# run_reorder_check.py - Script to run one reorder check pass, or the auto-reorder pass after it

import sys
import argparse

from inventory_replenishment.db import db, session_scope
from inventory_replenishment.batch.reorder_monitor import run_reorder_check_job
from inventory_replenishment.services.order_service import OrderService
from inventory_replenishment.exceptions import ReplenishmentError
from inventory_replenishment.logging_setup import get_logger

def main():
    """Run the reorder check."""
    parser = argparse.ArgumentParser(description='Run the inventory reorder check')
    parser.add_argument('--create-orders', action='store_true',
                        help='Create purchase orders for the products needing reorder')
    parser.add_argument('--db-url', help='Database URL (overrides DATABASE.url)')

    args = parser.parse_args()

    logger = get_logger('reorder_check_runner')
    db.initialize(args.db_url)

    logger.info("Starting reorder check runner...")

    try:
        results = run_reorder_check_job()

        if results['skipped']:
            logger.warning("Reorder check skipped: a previous pass is still running")
            return 0

        logger.info(f"Products needing reorder: {results['products_to_reorder']}")
        for sku in results['skus']:
            logger.info(f"  {sku}")

        if args.create_orders and results['products_to_reorder']:
            with session_scope() as session:
                order_results = OrderService(session).generate_auto_reorders()
            logger.info(order_results['message'])

        return 0

    except ReplenishmentError as e:
        logger.exception(f"Error running reorder check: {str(e)}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
