"""FIFO concurrency limiter for calls into the LLM backend."""

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


class ConcurrencyLimiter:
    """Run at most ``max_concurrent`` operations at once, queueing the rest.

    Queued callers are admitted in submission order. A finished call hands its
    slot straight to the oldest waiter, so a later arrival can never overtake
    the queue. Each caller gets exactly the outcome of its own operation.
    """

    def __init__(self, max_concurrent: int = 1) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.max_concurrent = max_concurrent
        self.active = 0
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def pending(self) -> int:
        """Number of callers waiting for a slot."""
        return sum(1 for waiter in self._waiters if not waiter.done())

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        timeout: float | None = None,
    ) -> T:
        """Run ``operation`` once a slot is free.

        With ``timeout`` set, an operation that runs longer is cancelled, the
        caller gets ``TimeoutError`` and the slot is released.
        """
        await self._acquire()
        try:
            if timeout is None:
                return await operation()
            return await asyncio.wait_for(operation(), timeout)
        finally:
            self._release()

    async def _acquire(self) -> None:
        if self.active < self.max_concurrent and not self.pending:
            self.active += 1
            return
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # The slot was handed over just before cancellation; pass it on.
                self._release()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise

    def _release(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self.active -= 1
