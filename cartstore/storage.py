"""Persistence adapters for the serialized cart."""
from typing import Dict, Optional, Protocol, Union

from . import config
from .db import get_redis
from .errors import ERROR_UNKNOWN_BACKEND, StorageConfigError
from .logging import get_logger

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
    """Async string key-value store the cart is mirrored into.

    get() may return bytes; decoding is left to the cart parser.
    """

    async def get(self, key: str) -> Optional[Union[str, bytes]]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...


class RedisStorage:
    """Upstash Redis backed storage."""

    def __init__(self, redis=None):
        self._redis = redis  # Lazy initialization

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def get(self, key: str) -> Optional[Union[str, bytes]]:
        return await self.redis.get(key)

    async def set(self, key: str, value: str) -> None:
        await self.redis.set(key, value)

    async def delete(self, key: str) -> None:
        await self.redis.delete(key)


class MemoryStorage:
    """Process-local storage for development runs and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


def create_storage(backend: Optional[str] = None) -> KeyValueStorage:
    """Build the storage adapter named by CART_STORAGE_BACKEND."""
    backend = (backend or config.CART_STORAGE_BACKEND).lower()

    if backend == "redis":
        return RedisStorage()
    if backend == "memory":
        logger.warning("Using in-memory cart storage: cart will not survive restarts")
        return MemoryStorage()

    raise StorageConfigError(f"{ERROR_UNKNOWN_BACKEND}: {backend!r}")
