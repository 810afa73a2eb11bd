"""Exceptions raised by the kiosk core. All of them are recoverable by the caller."""


class KioskError(Exception):
    """Base class for kiosk errors."""
    pass


class InvalidArgumentError(KioskError, ValueError):
    """Exception raised for non-positive quantities or negative prices/counters."""
    pass


class NotFoundError(KioskError):
    """Exception raised when a requested entity doesn't exist."""
    pass


class ProductNotFoundError(NotFoundError):
    """Exception raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class CartNotFoundError(NotFoundError):
    """Exception raised when a cart session doesn't exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Cart {session_id} not found")


class InsufficientStockError(KioskError):
    """Exception raised when there's not enough stock to fulfill a line."""

    def __init__(self, product_id: int, product_name: str, requested: int, available: int):
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}, Requested: {requested}"
        )


class EmptyCartError(KioskError):
    """Exception raised when checking out a cart with no lines."""

    def __init__(self):
        super().__init__("Cart is empty")


class DuplicateIdError(KioskError):
    """Exception raised when registering a product id that already exists."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Duplicate product id: {product_id}")
