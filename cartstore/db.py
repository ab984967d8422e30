"""
Database Module - Redis Client

Provides the singleton async Upstash Redis client that backs cart
persistence, plus the key names stored in it.
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from . import config
from .errors import ERROR_REDIS_NOT_CONFIGURED, StorageConfigError


# Singleton instance
_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise StorageConfigError(ERROR_REDIS_NOT_CONFIGURED)
        _redis_client = AsyncRedis(
            url=config.UPSTASH_REDIS_REST_URL,
            token=config.UPSTASH_REDIS_REST_TOKEN,
        )

    return _redis_client


def reset_redis() -> None:
    """Drop the cached client (used after config changes and in tests)."""
    global _redis_client
    _redis_client = None


class RedisKeys:
    """Redis keys used by the cart store."""

    # Serialized cart (JSON array of items). Read and write paths must both
    # use this constant.
    CART_PRODUCTS = "@GoMarketplace:products"
