#!/usr/bin/env python3
"""
Print the persisted cart, or clear it.

Usage:
    python scripts/show_cart.py
    python scripts/show_cart.py --json
    python scripts/show_cart.py --clear
"""
import argparse
import asyncio
import os
import sys

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cartstore.db import RedisKeys  # noqa: E402
from cartstore.models import parse_cart, serialize_cart  # noqa: E402
from cartstore.storage import create_storage  # noqa: E402


async def show_cart(backend: str, as_json: bool) -> int:
    storage = create_storage(backend)
    raw = await storage.get(RedisKeys.CART_PRODUCTS)

    if not raw:
        print("Cart is empty (no persisted data)")
        return 0

    try:
        items = parse_cart(raw)
    except ValueError as e:
        print(f"❌ Persisted cart is malformed: {e}")
        print(raw)
        return 1

    if as_json:
        print(serialize_cart(items))
        return 0

    print(f"Key: {RedisKeys.CART_PRODUCTS}")
    print(f"Items: {len(items)}\n")
    for item in items:
        print(f"  {item.id:12s} x{item.quantity:<3d} {item.title} ({item.price})")
    return 0


async def clear_cart(backend: str) -> int:
    storage = create_storage(backend)
    await storage.delete(RedisKeys.CART_PRODUCTS)
    print(f"✅ Cleared {RedisKeys.CART_PRODUCTS}")
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description="Inspect the persisted shopping cart")
    parser.add_argument(
        "--backend", default=None, help="Storage backend (defaults to CART_STORAGE_BACKEND)"
    )
    parser.add_argument("--json", action="store_true", help="Print the raw normalized JSON")
    parser.add_argument("--clear", action="store_true", help="Delete the persisted cart")

    args = parser.parse_args()

    if args.clear:
        return await clear_cart(args.backend)
    return await show_cart(args.backend, args.json)


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
