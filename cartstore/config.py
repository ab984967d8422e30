"""Cart store configuration read from the environment."""
import os

from .logging import get_logger

logger = get_logger(__name__)


def _get_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using {default}")
        return default
    return max(value, minimum)


# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# "redis" or "memory"
CART_STORAGE_BACKEND = os.environ.get("CART_STORAGE_BACKEND", "redis").lower()

# Total attempts per snapshot write (1 = no retry)
CART_WRITE_ATTEMPTS = _get_int("CART_WRITE_ATTEMPTS", 1)

# Exponential backoff bounds between write attempts (seconds)
CART_WRITE_BACKOFF_MIN = 0.5
CART_WRITE_BACKOFF_MAX = 5.0
