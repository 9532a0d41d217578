class ReplenishmentError(Exception):
    """Base exception for the Inventory Replenishment Engine."""

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or "An error occurred in the Inventory Replenishment Engine"
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        """String representation of the error."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.__class__.__name__,
            'message': self.message,
        }

        if self.code:
            error_dict['code'] = self.code

        if self.details:
            error_dict['details'] = self.details

        return error_dict


class ConfigError(ReplenishmentError):
    """Exception raised for configuration errors."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Configuration error"
        super().__init__(message, code, details)


class DatabaseError(ReplenishmentError):
    """Exception raised for database-related errors."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Database error"
        super().__init__(message, code, details)


class InvalidParameterError(ReplenishmentError):
    """Exception raised when a formula receives a negative or NaN input."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Invalid parameter"
        super().__init__(message, code or 'INVALID_PARAMETER', details)


class EmptyCatalogError(ReplenishmentError):
    """Exception raised when a required classification has nothing to classify."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Catalog is empty"
        super().__init__(message, code or 'EMPTY_CATALOG', details)


class InsufficientStockError(ReplenishmentError):
    """Exception raised when a stock decrement would drive stock negative."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Insufficient stock"
        super().__init__(message, code or 'INSUFFICIENT_STOCK', details)


class NotFoundError(ReplenishmentError):
    """Exception raised when a requested resource is not found."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Resource not found"
        super().__init__(message, code or 'NOT_FOUND', details)


class OrderError(ReplenishmentError):
    """Exception raised for order-related errors."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Order error"
        super().__init__(message, code, details)


class BatchProcessError(ReplenishmentError):
    """Exception raised for batch process errors."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Batch process error"
        super().__init__(message, code, details)
