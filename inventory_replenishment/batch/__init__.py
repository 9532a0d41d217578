# inventory_replenishment/batch/__init__.py

from .reorder_monitor import ReorderMonitor, run_reorder_check_job, run_periodic, load_active_catalog

__all__ = [
    'ReorderMonitor',
    'run_reorder_check_job',
    'run_periodic',
    'load_active_catalog'
]
