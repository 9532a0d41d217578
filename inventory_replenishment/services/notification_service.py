# inventory_replenishment/services/notification_service.py
import threading
from typing import Dict, List, Optional, Tuple

from inventory_replenishment.logging_setup import get_logger

REORDER_ALERT = 'reorder_alert'
ORDER_CREATED = 'order_created'
ORDER_UPDATED = 'order_updated'
STOCK_UPDATED = 'stock_updated'

class NotificationSink:
    """Outbound event channel (socket push, email, message bus...)."""

    def emit(self, event_name: str, payload: Dict) -> None:
        raise NotImplementedError

class LoggingNotificationSink(NotificationSink):
    """Default sink: writes every event to the notifications log."""

    def __init__(self, logger_name: str = 'notifications'):
        self.logger = get_logger(logger_name)

    def emit(self, event_name: str, payload: Dict) -> None:
        self.logger.info(f"Event {event_name}: {payload}")

class CollectingNotificationSink(NotificationSink):
    """Keeps emitted events in memory."""

    def __init__(self):
        self._lock = threading.Lock()
        self.events: List[Tuple[str, Dict]] = []

    def emit(self, event_name: str, payload: Dict) -> None:
        with self._lock:
            self.events.append((event_name, payload))

    def of_type(self, event_name: str) -> List[Dict]:
        with self._lock:
            return [payload for name, payload in self.events if name == event_name]

    def last(self, event_name: Optional[str] = None) -> Optional[Dict]:
        events = self.of_type(event_name) if event_name else [p for _, p in self.events]
        return events[-1] if events else None
