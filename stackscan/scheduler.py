"""Worker pool — pulls scan jobs off the queue and runs the scan pipeline."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

import structlog

from stackscan.engines.dependency_scanner.models import DependencyFinding, ScanResult
from stackscan.engines.insight_generator.generator import DEGRADED_INSIGHT_MESSAGE
from stackscan.exceptions import InvalidPathError, QueueClosedError
from stackscan.jobs.models import ScanJob
from stackscan.jobs.queue import JobQueue
from stackscan.store.base import ScanStore

logger = structlog.get_logger(__name__)

DEFAULT_CONCURRENCY = 2
DEFAULT_MAX_RETRIES = 3


class Executor(Protocol):
    async def scan(self, path: str | Path) -> list[DependencyFinding]: ...


class Checker(Protocol):
    async def check_all(self, findings: list[DependencyFinding]) -> None: ...


class Insights(Protocol):
    async def analyze(
        self,
        project_name: str,
        project_path: str,
        findings: Sequence[DependencyFinding],
    ) -> str: ...


class WorkerPool:
    """Dispatch jobs to at most ``concurrency`` concurrent pipeline runs.

    A failed run is requeued with ``attempt + 1`` while attempts remain;
    after ``max_retries`` attempts the record is marked failed.
    """

    def __init__(
        self,
        queue: JobQueue,
        store: ScanStore,
        executor: Executor,
        checker: Checker,
        insights: Insights | None = None,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        self._queue = queue
        self._store = store
        self._executor = executor
        self._checker = checker
        self._insights = insights
        self._concurrency = concurrency
        self._max_retries = max_retries
        self._permits = asyncio.Semaphore(concurrency)
        self._dispatcher: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Launch the dispatcher as an asyncio task."""
        if self._dispatcher is not None:
            raise RuntimeError("worker pool already started")
        self._dispatcher = asyncio.create_task(self.run(), name="worker-pool-dispatcher")
        logger.info(
            "worker_pool.started",
            concurrency=self._concurrency,
            max_retries=self._max_retries,
        )

    async def run(self) -> None:
        """Hand every queued job to a worker task until the queue drains."""
        async for job in self._queue.stream():
            await self._permits.acquire()
            task = asyncio.create_task(self._run_job(job), name=f"scan-{job.scan_id}")
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def join(self) -> None:
        """Wait for the dispatcher and every in-flight job to finish."""
        if self._dispatcher is not None:
            await asyncio.wait({self._dispatcher})
        while self._tasks:
            await asyncio.wait(set(self._tasks))

    async def stop(self, timeout: float | None = 30.0) -> None:
        """Close the queue, let queued work drain, then cancel stragglers."""
        await self._queue.close()
        try:
            await asyncio.wait_for(self.join(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("worker_pool.stop_timeout", in_flight=len(self._tasks))

        pending = [t for t in (self._dispatcher, *self._tasks) if t is not None and not t.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.info("worker_pool.stopped", cancelled=len(pending))

    # ── job handling ───────────────────────────────────────────────────────

    async def _run_job(self, job: ScanJob) -> None:
        retry: ScanJob | None = None
        try:
            retry = await self.process(job)
        except Exception:
            logger.exception("scan.job_crashed", scan_id=str(job.scan_id), attempt=job.attempt)
        finally:
            self._permits.release()

        if retry is not None:
            await self._requeue(retry)

    async def process(self, job: ScanJob) -> ScanJob | None:
        """Run the pipeline for *job*. Returns the retry job, if one is due."""
        result = await self._store.load_result(job.scan_id)
        if result is None:
            logger.warning("scan.record_missing", scan_id=str(job.scan_id))
            return None
        if result.status.is_terminal:
            logger.warning(
                "scan.already_finished",
                scan_id=str(job.scan_id),
                status=result.status.value,
            )
            return None

        log = logger.bind(scan_id=str(job.scan_id), attempt=job.attempt)
        try:
            result = result.mark_running()
            await self._store.save_result(result)
            await self._store.clear_findings(job.scan_id)

            findings = await self._executor.scan(job.path)
            await self._store.save_findings(job.scan_id, findings)

            await self._checker.check_all(findings)
            await self._store.save_findings(job.scan_id, findings)
        except InvalidPathError as exc:
            log.warning("scan.invalid_path", path=job.path, error=str(exc))
            await self._fail(result, str(exc))
            return None
        except Exception as exc:
            return await self._handle_failure(job, result, exc)

        insights = await self._generate_insights(result, findings)

        try:
            await self._store.save_result(result.mark_completed(insights))
        except Exception as exc:
            return await self._handle_failure(job, result, exc)

        log.info(
            "scan.completed",
            findings=len(findings),
            outdated=sum(1 for f in findings if f.is_outdated),
        )
        return None

    async def _generate_insights(
        self, result: ScanResult, findings: list[DependencyFinding]
    ) -> str | None:
        if self._insights is None:
            return None
        try:
            return await self._insights.analyze(result.project_name, result.project_path, findings)
        except Exception:
            logger.exception("scan.insight_failed", scan_id=str(result.scan_id))
            return DEGRADED_INSIGHT_MESSAGE

    async def _handle_failure(
        self, job: ScanJob, result: ScanResult, exc: Exception
    ) -> ScanJob | None:
        error = str(exc) or type(exc).__name__
        if job.attempt + 1 < self._max_retries:
            logger.warning(
                "scan.retry",
                scan_id=str(job.scan_id),
                attempt=job.attempt,
                max_retries=self._max_retries,
                error=error,
            )
            return job.next_attempt()

        logger.error(
            "scan.failed",
            scan_id=str(job.scan_id),
            attempts=job.attempt + 1,
            error=error,
        )
        await self._fail(result, error)
        return None

    async def _fail(self, result: ScanResult, error: str) -> None:
        try:
            await self._store.save_result(result.mark_failed(error))
        except Exception:
            logger.exception("scan.fail_not_persisted", scan_id=str(result.scan_id))

    async def _requeue(self, job: ScanJob) -> None:
        try:
            await self._queue.enqueue(job)
        except QueueClosedError:
            logger.warning("scan.retry_dropped", scan_id=str(job.scan_id), attempt=job.attempt)
        else:
            return

        try:
            result = await self._store.load_result(job.scan_id)
            if result is not None and not result.status.is_terminal:
                await self._fail(result, "queue closed before retry")
        except Exception:
            logger.exception(
                "scan.retry_dropped",
                scan_id=str(job.scan_id),
                attempt=job.attempt,
                error="record not updated",
            )
