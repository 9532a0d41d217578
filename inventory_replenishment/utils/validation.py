import math
from typing import Dict

from inventory_replenishment.exceptions import InvalidParameterError

def require_non_negative(**values: float) -> None:
    """Fail fast on negative or NaN formula inputs.

    Args:
        **values: Parameter name to value

    Raises:
        InvalidParameterError naming the first offending parameter
    """
    for name, value in values.items():
        if value is None:
            raise InvalidParameterError(f"{name} is required", details={name: value})
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidParameterError(f"{name} must be numeric, got {value!r}", details={name: value})
        if math.isnan(number):
            raise InvalidParameterError(f"{name} must not be NaN", details={name: value})
        if number < 0:
            raise InvalidParameterError(f"{name} must not be negative, got {value}", details={name: value})

def require_fraction(**values: float) -> None:
    """Same as require_non_negative, with an upper bound of 1."""
    require_non_negative(**values)
    for name, value in values.items():
        if float(value) > 1:
            raise InvalidParameterError(f"{name} must be between 0 and 1, got {value}", details={name: value})

def validate_stock_item(item) -> Dict[str, str]:
    """Validate the descriptive fields of a stock item.

    Args:
        item: StockItem snapshot

    Returns:
        Dictionary with validation errors
    """
    errors = {}

    if item.product_id is None:
        errors['product_id'] = 'Product ID is required'

    if not item.sku:
        errors['sku'] = 'SKU is required'

    if item.supplier_id is None:
        errors['supplier_id'] = 'Supplier ID is required'

    if item.current_stock is None or item.current_stock < 0:
        errors['current_stock'] = 'Current stock must be a non-negative number'

    return errors
