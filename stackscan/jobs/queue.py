"""Bounded multi-producer / multi-consumer queue of scan jobs."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator

import structlog

from stackscan.exceptions import QueueClosedError
from stackscan.jobs.models import ScanJob

logger = structlog.get_logger(__name__)


class JobQueue:
    """FIFO of :class:`ScanJob` with back-pressure and graceful close.

    - ``enqueue`` waits while the queue is full and raises
      :class:`QueueClosedError` once the queue is closed, including for
      producers already waiting.
    - ``dequeue`` waits while the queue is empty and open; after ``close``
      it keeps handing out the remaining jobs and then returns ``None``.
    """

    def __init__(self, capacity: int = 100) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._items: deque[ScanJob] = deque()
        self._closed = False
        self._cond = asyncio.Condition()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        return len(self._items)

    async def enqueue(self, job: ScanJob) -> None:
        async with self._cond:
            while len(self._items) >= self._capacity and not self._closed:
                await self._cond.wait()
            if self._closed:
                raise QueueClosedError(f"queue closed; scan {job.scan_id} not accepted")
            self._items.append(job)
            self._cond.notify_all()
        logger.info(
            "queue.enqueued",
            scan_id=str(job.scan_id),
            project_id=str(job.project_id),
            attempt=job.attempt,
        )

    async def dequeue(self) -> ScanJob | None:
        """Next job in FIFO order, or None once closed and drained."""
        async with self._cond:
            while not self._items and not self._closed:
                await self._cond.wait()
            if not self._items:
                return None
            job = self._items.popleft()
            self._cond.notify_all()
            return job

    async def stream(self) -> AsyncIterator[ScanJob]:
        """Yield jobs until the queue is closed and drained."""
        while (job := await self.dequeue()) is not None:
            yield job

    async def close(self) -> None:
        """Stop accepting jobs and wake every waiter. Idempotent."""
        async with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
        logger.info("queue.closed", pending=len(self._items))
