"""
Cart access layer.

One CartStore per application session, bound to the current context by
CartProvider. Consumers reach it through use_cart():

    async with CartProvider(create_storage()):
        cart = use_cart()
        cart.add_to_cart(product)
        render(use_cart().products)
"""
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from .db import RedisKeys
from .errors import CartNotInitializedError, CartPersistenceError, CartProviderError
from .logging import get_logger
from .models import Product
from .service import CartStore, Listener, Snapshot
from .storage import KeyValueStorage, create_storage
from .writer import SnapshotWriter

logger = get_logger(__name__)

_current_store: ContextVar[Optional[CartStore]] = ContextVar("cart_store", default=None)


@dataclass(frozen=True)
class CartContext:
    """Read-only view of the active cart plus its bound operations."""
    products: Snapshot
    add_to_cart: Callable[[Union[Product, Mapping[str, Any]]], None]
    increment: Callable[[str], None]
    decrement: Callable[[str], None]
    subscribe: Callable[[Listener], Callable[[], None]]


class CartProvider:
    """Async context manager owning the session's CartStore."""

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        *,
        key: str = RedisKeys.CART_PRODUCTS,
        await_hydration: bool = True,
        write_attempts: Optional[int] = None,
    ):
        self._storage = storage
        self._key = key
        self._await_hydration = await_hydration
        self._write_attempts = write_attempts
        self._token: Optional[Token] = None
        self.store: Optional[CartStore] = None

    async def __aenter__(self) -> CartStore:
        if _current_store.get() is not None:
            raise CartProviderError()

        storage = self._storage if self._storage is not None else create_storage()
        writer = SnapshotWriter(storage, self._key, attempts=self._write_attempts)
        self.store = CartStore(storage, key=self._key, writer=writer)
        self._token = _current_store.set(self.store)

        load_task = self.store.start()
        if self._await_hydration:
            try:
                await load_task
            except BaseException:
                self._unbind()
                raise

        return self.store

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self.store.aclose()
        except CartPersistenceError:
            if exc_type is None:
                raise
            logger.warning("Cart writes failed while leaving provider on error", exc_info=True)
        finally:
            self._unbind()

    def _unbind(self) -> None:
        if self._token is not None:
            _current_store.reset(self._token)
            self._token = None


def get_cart_store() -> CartStore:
    """Return the active CartStore or fail loudly."""
    store = _current_store.get()
    if store is None:
        raise CartNotInitializedError()
    return store


def use_cart() -> CartContext:
    """Snapshot of the active cart and its operations."""
    store = get_cart_store()
    return CartContext(
        products=store.products,
        add_to_cart=store.add_to_cart,
        increment=store.increment,
        decrement=store.decrement,
        subscribe=store.subscribe,
    )
