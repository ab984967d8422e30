"""
Cart Errors

Centralized error messages and the exception hierarchy raised by the store.
"""

# Access errors
ERROR_CART_NOT_INITIALIZED = "use_cart must be used within a CartProvider"
ERROR_PROVIDER_ACTIVE = "A CartProvider is already active in this context"

# Persistence errors
ERROR_CART_LOAD_FAILED = "Failed to load cart from storage"
ERROR_CART_WRITE_FAILED = "Failed to persist cart to storage"
ERROR_REDIS_NOT_CONFIGURED = "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set"
ERROR_UNKNOWN_BACKEND = "Unknown cart storage backend"


class CartError(Exception):
    """Base class for all cart store errors."""


class CartNotInitializedError(CartError, RuntimeError):
    """Raised when the cart is accessed outside an active CartProvider."""

    def __init__(self, message: str = ERROR_CART_NOT_INITIALIZED):
        super().__init__(message)


class CartProviderError(CartError, RuntimeError):
    """Raised when a second CartProvider is entered while one is active."""

    def __init__(self, message: str = ERROR_PROVIDER_ACTIVE):
        super().__init__(message)


class CartPersistenceError(CartError):
    """Raised when the persistence adapter fails to read or write the cart."""


class StorageConfigError(CartError, ValueError):
    """Raised when the configured storage backend cannot be built."""
