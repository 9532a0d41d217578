from .notification_service import (
    NotificationSink, LoggingNotificationSink, CollectingNotificationSink,
    REORDER_ALERT, ORDER_CREATED, ORDER_UPDATED, STOCK_UPDATED
)
from .product_service import ProductService
from .supplier_service import SupplierService
from .order_service import OrderService
from .analytics_service import AnalyticsService

__all__ = [
    'NotificationSink',
    'LoggingNotificationSink',
    'CollectingNotificationSink',
    'REORDER_ALERT',
    'ORDER_CREATED',
    'ORDER_UPDATED',
    'STOCK_UPDATED',
    'ProductService',
    'SupplierService',
    'OrderService',
    'AnalyticsService'
]
