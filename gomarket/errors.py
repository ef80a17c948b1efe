"""
Cart error taxonomy and shared error messages.

Message strings are module constants so routers and tests reference one copy.
"""

# Context errors
ERROR_STORE_NOT_INITIALIZED = "Cart store is not initialized; create it with CartStore.create() first"
ERROR_STORE_NOT_LOADED = "Cart store has not been loaded yet"
ERROR_STORE_CLOSED = "Cart store is closed"

# Input errors
ERROR_EMPTY_PRODUCT_ID = "product id must be a non-empty string"
ERROR_NEGATIVE_PRICE = "price must be a non-negative number"
ERROR_MISSING_PRODUCT_FIELD = "product is missing a required field"

# Persistence errors
ERROR_MALFORMED_CART = "Stored cart data is malformed"
ERROR_CART_WRITE_FAILED = "Failed to write cart to storage"
ERROR_CART_READ_FAILED = "Failed to read cart from storage"


class CartError(Exception):
    """Base class for cart errors."""


class DeserializationError(CartError):
    """The persisted cart value exists but cannot be parsed into a cart."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"{ERROR_MALFORMED_CART} at {key!r}: {reason}")


class PersistenceWriteError(CartError):
    """The key-value store rejected or failed a write."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"{ERROR_CART_WRITE_FAILED} at {key!r}: {reason}")


class PersistenceReadError(CartError):
    """The key-value store failed while reading."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"{ERROR_CART_READ_FAILED} at {key!r}: {reason}")


class CartNotReadyError(CartError):
    """Cart API used outside an initialized, loaded and open store."""
