"""Cart store: in-memory cart mirrored into key-value storage."""
import asyncio
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from .db import RedisKeys
from .errors import ERROR_CART_LOAD_FAILED, CartPersistenceError
from .logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from .models import CartItem, Product, parse_cart, serialize_cart
from .storage import KeyValueStorage
from .writer import SnapshotWriter

logger = get_logger(__name__)

Snapshot = Tuple[CartItem, ...]
Listener = Callable[[Snapshot], None]


class CartStore:
    """
    Owns the shopping cart for one application session.

    Features:
    - add/increment/decrement applied synchronously in call order
    - full snapshot written to storage after every mutation
    - rehydration from storage on start

    Mutations must be called from inside the running event loop. A mutation
    issued before load() finishes is replaced by the persisted cart if one
    exists when the load completes.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = RedisKeys.CART_PRODUCTS,
        writer: Optional[SnapshotWriter] = None,
    ):
        self._storage = storage
        self._key = key
        self._writer = writer or SnapshotWriter(storage, key)
        self._items: Snapshot = ()
        self._listeners: List[Listener] = []
        self._hydrated = asyncio.Event()
        self._load_task: Optional[asyncio.Task] = None

    @property
    def products(self) -> Snapshot:
        """Current cart contents (immutable snapshot)."""
        return self._items

    @property
    def hydrated(self) -> bool:
        return self._hydrated.is_set()

    @property
    def key(self) -> str:
        return self._key

    # ==================== LOADING ====================

    def start(self) -> asyncio.Task:
        """Schedule the initial load once; later calls return the same task."""
        if self._load_task is None:
            self._load_task = asyncio.get_running_loop().create_task(self.load())
        return self._load_task

    async def wait_hydrated(self) -> None:
        await self._hydrated.wait()

    async def load(self) -> None:
        """Replace the in-memory cart with the persisted one, if any."""
        try:
            try:
                raw = await self._storage.get(self._key)
            except Exception as e:
                logger.error(f"{ERROR_CART_LOAD_FAILED}: {e}", exc_info=True)
                raise CartPersistenceError(ERROR_CART_LOAD_FAILED) from e

            if not raw:
                logger.debug("No persisted cart found")
                return

            try:
                items = parse_cart(raw)
            except ValueError as e:
                # Corrupted data is treated as an empty cart
                logger.warning(
                    f"Ignoring malformed persisted cart "
                    f"{sanitize_string_for_logging(raw)}: {e}"
                )
                return

            self._items = items
            logger.info(f"Cart rehydrated with {len(items)} item(s)")
            self._notify()
        finally:
            self._hydrated.set()

    # ==================== MUTATIONS ====================

    def add_to_cart(self, product: Union[Product, Mapping[str, Any]]) -> None:
        """Add one unit of ``product``; merges into an existing entry by id."""
        product = Product.coerce(product)
        index = self._index_of(product.id)

        if index is None:
            self._commit(self._items + (CartItem.from_product(product, 1),))
            logger.debug(f"Added product {sanitize_id_for_logging(product.id)}")
            return

        quantity = self._items[index].quantity + 1
        self._commit(self._replaced(index, CartItem.from_product(product, quantity)))

    def increment(self, product_id: str) -> None:
        """Add one unit to an existing entry. Unknown ids are ignored."""
        index = self._index_of(product_id)
        if index is None:
            logger.debug(f"Increment ignored for absent product {sanitize_id_for_logging(product_id)}")
            self._commit(self._items)
            return

        item = self._items[index]
        self._commit(self._replaced(index, item.with_quantity(item.quantity + 1)))

    def decrement(self, product_id: str) -> None:
        """Remove one unit; the entry is dropped when it reaches zero."""
        index = self._index_of(product_id)
        if index is None:
            logger.debug(f"Decrement ignored for absent product {sanitize_id_for_logging(product_id)}")
            self._commit(self._items)
            return

        item = self._items[index]
        if item.quantity <= 1:
            self._commit(self._items[:index] + self._items[index + 1:])
        else:
            self._commit(self._replaced(index, item.with_quantity(item.quantity - 1)))

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every new snapshot. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self._items
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning(f"Cart listener failed: {e}", exc_info=True)

    # ==================== PERSISTENCE ====================

    async def flush(self) -> None:
        """Wait for pending writes; raises CartPersistenceError if the last one failed."""
        await self._writer.flush()

    async def aclose(self) -> None:
        """Cancel a pending load, flush writes, then re-raise a failed load."""
        task = self._load_task
        load_error: Optional[BaseException] = None
        if task is not None:
            if not task.done():
                task.cancel()
                # wait() does not raise for the task's own cancellation
                await asyncio.wait([task])
            if not task.cancelled():
                load_error = task.exception()

        await self.flush()

        if load_error is not None:
            raise load_error

    # ==================== HELPERS ====================

    def _index_of(self, product_id: str) -> Optional[int]:
        return next(
            (i for i, item in enumerate(self._items) if item.id == product_id),
            None,
        )

    def _replaced(self, index: int, item: CartItem) -> Snapshot:
        return self._items[:index] + (item,) + self._items[index + 1:]

    def _commit(self, items: Snapshot) -> None:
        # Write is issued before memory is swapped; memory stays authoritative.
        self._writer.submit(serialize_cart(items))
        self._items = items
        self._notify()
