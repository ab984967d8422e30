"""
Snapshot writer - serialized, coalescing cart persistence.

Every mutation hands over a full snapshot of the cart. Only one write is in
flight at a time; snapshots submitted while a write is running replace each
other, so the next write always carries the newest state and the last
completed write matches the last mutation.
"""
import asyncio
from typing import Optional

from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from . import config
from .errors import ERROR_CART_WRITE_FAILED, CartPersistenceError
from .logging import get_logger
from .storage import KeyValueStorage

logger = get_logger(__name__)


class SnapshotWriter:
    """Writes cart snapshots to storage one at a time."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str,
        attempts: Optional[int] = None,
        wait=None,
    ):
        self._storage = storage
        self._key = key
        self._attempts = max(1, attempts or config.CART_WRITE_ATTEMPTS)
        self._wait = wait or wait_exponential(
            multiplier=1,
            min=config.CART_WRITE_BACKOFF_MIN,
            max=config.CART_WRITE_BACKOFF_MAX,
        )
        self._pending: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._error: Optional[BaseException] = None
        self.writes = 0

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, payload: str) -> None:
        """Queue ``payload`` as the latest snapshot. Requires a running loop."""
        self._pending = payload
        if not self.busy:
            self._task = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending is not None:
            payload, self._pending = self._pending, None
            try:
                await self._write(payload)
            except Exception as e:
                logger.error(f"{ERROR_CART_WRITE_FAILED}: {e}", exc_info=True)
                self._error = e
            else:
                self._error = None

    async def _write(self, payload: str) -> None:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._attempts),
            wait=self._wait,
            reraise=True,
        ):
            with attempt:
                await self._storage.set(self._key, payload)
        self.writes += 1

    async def flush(self) -> None:
        """
        Wait for all submitted snapshots to be written.

        Raises:
            CartPersistenceError: the most recent write failed
        """
        while self.busy:
            await self._task

        if self._error is not None:
            error, self._error = self._error, None
            raise CartPersistenceError(ERROR_CART_WRITE_FAILED) from error
