"""
In-process sequential task queue.

The queue accepts items from any number of producers (typically concurrent
HTTP request handlers) and hands them to a single processing callback, one at
a time and in arrival order, without ever making the producer wait.

Behaviour
=========
- ``enqueue()`` is synchronous: it appends to a FIFO buffer and, when the queue
  is idle, schedules a drain task on the running event loop. It never suspends.
- The drain task pops the head item, *initiates* the callback and then yields
  to the event loop before handling the next item. Only the initiation of the
  callbacks is ordered; when a callback returns an awaitable it runs as its own
  task and the drain task does not wait for it.
- Errors raised by the callback, or by the awaitable it returns, are forwarded
  to the event loop's exception handler. They never stop the drain.
- Queue contents are not persisted. There is no depth limit and no timeout.

Quick usage
-----------

.. code-block:: python

    import asyncio
    from slack_cheer.backends.queue.sequential import SequentialTaskQueue

    async def handle(item):
        print("processing", item)

    async def main():
        queue = SequentialTaskQueue(handle, name="demo")
        for i in range(3):
            queue.enqueue(i)
        await queue.join()

    asyncio.run(main())
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Final, Optional, Set

__all__: list[str] = ["SequentialTaskQueue"]

_LOG: Final[logging.Logger] = logging.getLogger(__name__)


class SequentialTaskQueue[T]:
    """FIFO queue driving a processing callback one item at a time.

    The queue has two states. It is *idle* when no drain cycle is scheduled or
    running, and *draining* otherwise. The first ``enqueue()`` while idle starts
    a drain cycle, and the cycle ends when a drain step finds the buffer empty.

    All state is confined to the event loop thread, so ``enqueue()`` must be
    called from code running on that loop. Because it contains no suspension
    point it is atomic with respect to every other coroutine.

    Parameters
    ----------
    processor : Callable[[T], Optional[Awaitable[Any]]]
        Called with each dequeued item. May be a plain function or a coroutine
        function.
    name : str, optional
        Name used in log records and task names, by default ``"tasks"``.
    """

    def __init__(self, processor: Callable[[T], Optional[Awaitable[Any]]], *, name: str = "tasks") -> None:
        self._processor = processor
        self._name = name
        self._pending: Deque[T] = deque()
        self._active = False
        self._drain_task: Optional[asyncio.Task[None]] = None
        self._in_flight: Set[asyncio.Future[Any]] = set()
        self._drain_cycles = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def name(self) -> str:
        return self._name

    @property
    def active(self) -> bool:
        """Whether a drain cycle is currently scheduled or running."""
        return self._active

    @property
    def pending(self) -> int:
        """Number of items waiting to be dequeued."""
        return len(self._pending)

    @property
    def in_flight(self) -> int:
        """Number of callbacks initiated whose awaitable has not finished yet."""
        return len(self._in_flight)

    @property
    def drain_cycles(self) -> int:
        """Number of drain cycles started since construction."""
        return self._drain_cycles

    def enqueue(self, item: T) -> None:
        """Append *item* to the tail of the queue.

        Returns immediately. If the queue is idle a new drain cycle is
        scheduled on the running loop; the first item is processed on a later
        loop iteration, never inside this call.

        Parameters
        ----------
        item : T
            The payload to process.
        """
        if self._active:
            self._pending.append(item)
            return

        loop = asyncio.get_running_loop()
        self._pending.append(item)
        self._active = True
        self._drain_cycles += 1
        self._idle.clear()
        _LOG.debug(f"Queue '{self._name}' starting drain cycle #{self._drain_cycles}")
        self._drain_task = loop.create_task(
            self._drain(), name=f"{self._name}-drain-{self._drain_cycles}"
        )

    async def join(self) -> None:
        """Wait until the queue is idle and every initiated callback has finished."""
        await self._idle.wait()

    async def shutdown(self, timeout: float = 10.0) -> None:
        """Give queued and in-flight work up to *timeout* seconds to finish.

        Parameters
        ----------
        timeout : float, optional
            Seconds to wait, by default 10.
        """
        try:
            await asyncio.wait_for(self.join(), timeout=timeout)
        except asyncio.TimeoutError:
            _LOG.warning(
                f"Queue '{self._name}' did not finish within {timeout}s "
                f"({self.pending} pending, {self.in_flight} in flight)"
            )
        else:
            _LOG.info(f"Queue '{self._name}' drained")

    async def _drain(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            item = self._pending.popleft()
            self._initiate(loop, item)
            if not self._pending:
                break
            # Yield so request handlers and other tasks interleave with a long backlog.
            await asyncio.sleep(0)

        # No await between the emptiness check above and this point.
        self._active = False
        self._drain_task = None
        self._update_idle()

    def _initiate(self, loop: asyncio.AbstractEventLoop, item: T) -> None:
        try:
            result = self._processor(item)
        except Exception as exc:
            loop.call_exception_handler(
                {
                    "message": f"Unhandled error in processing callback of queue '{self._name}'",
                    "exception": exc,
                }
            )
            return

        if not inspect.isawaitable(result):
            return

        future = asyncio.ensure_future(result)
        self._in_flight.add(future)
        future.add_done_callback(self._on_callback_done)

    def _on_callback_done(self, future: asyncio.Future[Any]) -> None:
        self._in_flight.discard(future)
        if not future.cancelled():
            exc = future.exception()
            if exc is not None:
                future.get_loop().call_exception_handler(
                    {
                        "message": f"Unhandled error in processing callback of queue '{self._name}'",
                        "exception": exc,
                        "future": future,
                    }
                )
        self._update_idle()

    def _update_idle(self) -> None:
        if not self._active and not self._in_flight:
            self._idle.set()
