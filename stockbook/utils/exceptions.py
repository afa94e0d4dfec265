"""Custom exception classes for the application."""


class BaseAppException(Exception):
    """Base exception class for all application exceptions."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InventoryError(BaseAppException):
    """Raised when an inventory operation fails a domain precondition."""
    pass


class ProductNotFoundError(InventoryError):
    """Raised when a referenced product does not exist."""
    pass


class InsufficientStockError(InventoryError):
    """Raised when a sale asks for more units than are in stock."""
    pass


class InvalidInputError(BaseAppException):
    """Raised when an operation receives a value that breaks a model invariant."""
    pass


class StorageError(BaseAppException):
    """Raised when the persistent store cannot load or save a collection."""
    pass


class ConfigurationError(BaseAppException):
    """Raised when there's a configuration error."""
    pass
