"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import AsyncMock

# Set test environment variables
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")

from cartstore.service import CartStore  # noqa: E402
from cartstore.storage import MemoryStorage  # noqa: E402


@pytest.fixture
def memory_storage():
    """Empty in-memory storage"""
    return MemoryStorage()


@pytest.fixture
def store(memory_storage):
    """Cart store over empty in-memory storage"""
    return CartStore(memory_storage)


@pytest.fixture
def sample_product():
    """Sample catalog product"""
    return {
        "id": "p1",
        "title": "Shirt",
        "image_url": "u",
        "price": 10,
    }


@pytest.fixture
def other_product():
    """Second catalog product"""
    return {
        "id": "p2",
        "title": "Mug",
        "image_url": "https://cdn.test/mug.png",
        "price": 7.5,
    }


@pytest.fixture
def persisted_blob():
    """Serialized single-item cart as written by the store"""
    return '[{"id":"p1","title":"X","image_url":"u","price":5,"quantity":2}]'


@pytest.fixture
def mock_redis():
    """Mock Upstash async Redis client"""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value="OK")
    redis.delete = AsyncMock(return_value=1)
    return redis
