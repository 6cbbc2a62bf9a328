"""Coalesces individually requested keys into grouped processor calls.

Each ``add`` returns a future tied to its own queue entry. The queue is
flushed when it reaches ``batch_size`` or when the single delay timer
fires, whichever comes first.
"""

import asyncio
import enum
import inspect
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Mapping, Optional, Set, TypeVar, Union

from neatsuite.domain.models.errors import BatchResultMissingError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 10
DEFAULT_BATCH_DELAY_MS = 50

BatchProcessor = Callable[[List[str]], Union[Awaitable[Mapping[str, T]], Mapping[str, T]]]


class BatchState(str, enum.Enum):
    """Lifecycle of the pending flush: idle -> scheduled -> flushing -> idle."""
    IDLE = "idle"
    SCHEDULED = "scheduled"
    FLUSHING = "flushing"


@dataclass
class BatchEntry(Generic[T]):
    """A queued key and the future its caller awaits."""
    key: str
    future: "asyncio.Future[T]"


class RequestBatcher(Generic[T]):
    """Batches keyed requests into calls of ``processor(keys) -> {key: result}``.

    Must be used from within a running event loop. Identical keys added while
    a batch is pending are not de-duplicated.
    """

    def __init__(
        self,
        processor: BatchProcessor,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_ms: float = DEFAULT_BATCH_DELAY_MS,
    ):
        """Initializes the batcher.

        Args:
            processor: Sync or async callable mapping a list of keys to a
                mapping of results. Keys absent from the mapping (or mapped
                to None) are rejected with ``BatchResultMissingError``.
            batch_size: Maximum number of keys per processor call.
            batch_delay_ms: How long a partial batch waits before flushing.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1.")
        self._processor = processor
        self.batch_size = batch_size
        self.batch_delay_ms = batch_delay_ms
        self._queue: List[BatchEntry[T]] = []
        self._timer: Optional[asyncio.TimerHandle] = None
        self._in_flight: Set["asyncio.Task[None]"] = set()

    @property
    def state(self) -> BatchState:
        if self._in_flight:
            return BatchState.FLUSHING
        if self._timer is not None:
            return BatchState.SCHEDULED
        return BatchState.IDLE

    @property
    def pending(self) -> int:
        """Number of queued keys not yet handed to the processor."""
        return len(self._queue)

    def add(self, key: str) -> "asyncio.Future[T]":
        """Queues ``key`` and returns a future resolved with its result."""
        loop = asyncio.get_running_loop()
        future: "asyncio.Future[T]" = loop.create_future()
        self._queue.append(BatchEntry(key=key, future=future))

        if len(self._queue) >= self.batch_size:
            self._flush()
        elif self._timer is None:
            self._timer = loop.call_later(self.batch_delay_ms / 1000, self._flush)
        return future

    async def drain(self) -> None:
        """Flushes whatever is queued and waits for every in-flight batch."""
        while self._queue or self._in_flight:
            if self._queue:
                self._flush()
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    def _flush(self) -> None:
        """Takes a prefix of the queue and hands it to a processing task.

        Runs synchronously between awaits, so the queue splice and timer
        reset cannot interleave with another flush.
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        batch = self._queue[:self.batch_size]
        del self._queue[:self.batch_size]
        if not batch:
            return

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._process(batch))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

        if self._queue:
            self._timer = loop.call_later(self.batch_delay_ms / 1000, self._flush)

    async def _process(self, batch: List[BatchEntry[T]]) -> None:
        keys = [entry.key for entry in batch]
        logger.debug(f"Processing batch of {len(keys)} keys")
        try:
            results = self._processor(keys)
            if inspect.isawaitable(results):
                results = await results
            if not isinstance(results, Mapping):
                raise TypeError(f"Batch processor must return a mapping, got {type(results).__name__}")
            outcomes = [(entry, results.get(entry.key)) for entry in batch]
        except Exception as e:
            logger.warning(f"Batch processor failed for {len(keys)} keys: {e}")
            for entry in batch:
                if not entry.future.done():
                    entry.future.set_exception(e)
            return

        for entry, result in outcomes:
            if entry.future.done():
                continue  # Caller cancelled
            if result is not None:
                entry.future.set_result(result)
            else:
                entry.future.set_exception(BatchResultMissingError(entry.key))
