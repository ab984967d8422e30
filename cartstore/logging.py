"""
Centralized logging configuration for the cart store.

Usage:
    from cartstore.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"


def _get_log_level() -> int:
    """Get log level from environment or default to INFO."""
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure_root_logger() -> None:
    root = logging.getLogger()

    # Leave host applications' logging alone
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_get_log_level())
    use_simple = os.environ.get("LOG_FORMAT", "").lower() == "simple"
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if use_simple else LOG_FORMAT))

    root.setLevel(_get_log_level())
    root.addHandler(handler)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """Escape newlines and control characters (CWE-117)."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | None) -> str:
    """Product id for logs: escaped, first 8 chars, "N/A" when empty."""
    if not id_value:
        return "N/A"
    return _escape_log_injection(str(id_value))[:8]


def sanitize_string_for_logging(value: str | bytes | None, max_length: int = 50) -> str:
    """
    Persisted cart blob for logs: escaped and truncated.

    Args:
        value: Raw value read from storage (can be None)
        max_length: Maximum length to keep (default: 50)

    Returns:
        Sanitized string or "N/A" if empty
    """
    if not value:
        return "N/A"
    safe_value = _escape_log_injection(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
