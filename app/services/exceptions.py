class StoreError(Exception):
    """Base class for errors raised by the service layer."""
    pass


class ValidationError(StoreError):
    """Exception raised when a request is malformed or missing required data."""
    pass


class NotFoundError(StoreError):
    """Exception raised when a referenced record does not exist."""
    pass


class ConflictError(StoreError):
    """Exception raised on insufficient stock or a duplicate unique field."""
    pass


class InsufficientStockError(ConflictError):
    """Exception raised when there's not enough stock to fulfill an order."""
    pass


class InternalError(StoreError):
    """Exception raised when the store fails unexpectedly."""
    pass
