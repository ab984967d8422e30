"""Cart package: models, storage, store and access layer."""
from .context import CartContext, CartProvider, get_cart_store, use_cart
from .errors import (
    CartError,
    CartNotInitializedError,
    CartPersistenceError,
    CartProviderError,
    StorageConfigError,
)
from .models import CartItem, Product, parse_cart, serialize_cart
from .service import CartStore
from .storage import KeyValueStorage, MemoryStorage, RedisStorage, create_storage

__all__ = [
    "CartContext",
    "CartProvider",
    "get_cart_store",
    "use_cart",
    "CartError",
    "CartNotInitializedError",
    "CartPersistenceError",
    "CartProviderError",
    "StorageConfigError",
    "CartItem",
    "Product",
    "parse_cart",
    "serialize_cart",
    "CartStore",
    "KeyValueStorage",
    "MemoryStorage",
    "RedisStorage",
    "create_storage",
]
