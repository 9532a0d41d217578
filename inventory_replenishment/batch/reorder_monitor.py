# inventory_replenishment/batch/reorder_monitor.py
import threading
from typing import Callable, Dict, List, Optional

from inventory_replenishment.config import config
from inventory_replenishment.db import session_scope
from inventory_replenishment.core.entities import ReorderAlertEvent, StockItem
from inventory_replenishment.core.reorder_evaluation import evaluate_item
from inventory_replenishment.core.replenishment_math import ZScoreStrategy, get_z_score_strategy
from inventory_replenishment.services.notification_service import (
    NotificationSink, LoggingNotificationSink, REORDER_ALERT
)
from inventory_replenishment.services.product_service import ProductService
from inventory_replenishment.utils.concurrency import NonOverlappingGuard
from inventory_replenishment.exceptions import BatchProcessError, ReplenishmentError
from inventory_replenishment.logging_setup import get_logger, logger as log_manager

logger = get_logger('reorder_monitor')

def load_active_catalog() -> List[StockItem]:
    """Snapshot the active catalog in a short-lived session."""
    with session_scope() as session:
        return ProductService(session).get_active_catalog()

class ReorderMonitor:
    """Periodic check that announces which items are at or below their reorder point.

    The monitor only reports. Purchase orders are created by the
    auto-reorder pass, never here.
    """

    def __init__(
        self,
        catalog_provider: Callable[[], List[StockItem]] = load_active_catalog,
        notification_sink: Optional[NotificationSink] = None,
        z_score: Optional[ZScoreStrategy] = None,
        reorder_point_source: Optional[str] = None
    ):
        """Initialize the monitor.

        Args:
            catalog_provider: Returns the current catalog snapshot
            notification_sink: Receives the reorder alert
            z_score: Service level to Z-score strategy (configured one by default)
            reorder_point_source: 'stored' or 'calculated' (configured one by default)
        """
        rules = config.business_rules
        self.catalog_provider = catalog_provider
        self.notification_sink = notification_sink or LoggingNotificationSink()
        self.z_score = z_score or get_z_score_strategy(rules['z_score_strategy'], rules['service_level_threshold'])
        self.reorder_point_source = reorder_point_source or rules['reorder_point_source']
        self.guard = NonOverlappingGuard()

    def check_reorder_points(self, catalog: Optional[List[StockItem]] = None) -> List[StockItem]:
        """Evaluate the catalog and alert on every item that needs reordering.

        Items whose data fails validation are logged and skipped so one bad
        record does not hide the rest.

        Args:
            catalog: Snapshot to check; read from the catalog provider when omitted

        Returns:
            Items needing reorder, in catalog order
        """
        if catalog is None:
            catalog = self.catalog_provider()

        eligible = []
        skipped = 0
        for item in catalog:
            try:
                decision = evaluate_item(
                    item,
                    z_score=self.z_score,
                    reorder_point_source=self.reorder_point_source
                )
            except ReplenishmentError as e:
                skipped += 1
                logger.warning(f"Skipping product {item.product_id} ({item.sku}): {str(e)}")
                continue

            if decision.needs_reorder:
                eligible.append(item)

        logger.info(f"Reorder check: {len(eligible)} of {len(catalog)} products need reordering, {skipped} skipped")

        if eligible:
            event = ReorderAlertEvent.from_items(eligible)
            self.notification_sink.emit(REORDER_ALERT, event.to_dict())

        return eligible

    def on_tick(self) -> Optional[List[StockItem]]:
        """Entry point for an external periodic trigger.

        Returns:
            Items needing reorder, or None when the previous pass is still running
        """
        if not self.guard.try_acquire():
            logger.warning("Previous reorder check still running; skipping this tick")
            return None

        try:
            return self.check_reorder_points()
        finally:
            self.guard.release()

def run_reorder_check_job(monitor: Optional[ReorderMonitor] = None) -> Dict:
    """Run one reorder check pass as a logged batch process.

    Args:
        monitor: Monitor to tick (a database-backed one by default)

    Returns:
        Dictionary with job results
    """
    job = log_manager.job_started('reorder_check')
    monitor = monitor or ReorderMonitor()

    try:
        eligible = monitor.on_tick()
    except Exception as e:
        log_manager.job_finished(job, success=False, results={'error': str(e)})
        raise BatchProcessError(f"Reorder check failed: {str(e)}")

    if eligible is None:
        results = {'success': True, 'skipped': True, 'products_to_reorder': 0, 'skus': []}
    else:
        results = {
            'success': True,
            'skipped': False,
            'products_to_reorder': len(eligible),
            'skus': [item.sku for item in eligible]
        }

    log_manager.job_finished(job, success=True, results=results)
    return results

def run_periodic(
    monitor: Optional[ReorderMonitor] = None,
    interval_minutes: Optional[int] = None,
    stop_event: Optional[threading.Event] = None
) -> None:
    """Tick the monitor every interval until the stop event is set.

    Args:
        monitor: Monitor to tick
        interval_minutes: Minutes between ticks (MONITOR.interval_minutes by default)
        stop_event: Set it to stop the loop
    """
    monitor = monitor or ReorderMonitor()
    if interval_minutes is None:
        interval_minutes = config.monitor_config['interval_minutes']
    stop_event = stop_event or threading.Event()

    logger.info(f"Reorder monitor started, interval {interval_minutes} minute(s)")
    while not stop_event.is_set():
        try:
            run_reorder_check_job(monitor)
        except BatchProcessError as e:
            logger.error(str(e))
        stop_event.wait(interval_minutes * 60)
    logger.info("Reorder monitor stopped")
