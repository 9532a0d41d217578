from .date_utils import add_days, convert_to_date
from .validation import require_non_negative, require_fraction, validate_stock_item
from .concurrency import SingleFlight, NonOverlappingGuard

__all__ = [
    'add_days',
    'convert_to_date',
    'require_non_negative',
    'require_fraction',
    'validate_stock_item',
    'SingleFlight',
    'NonOverlappingGuard'
]
