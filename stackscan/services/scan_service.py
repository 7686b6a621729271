"""ScanService — create scan records and hand them to the job queue."""

from __future__ import annotations

import uuid

import structlog

from stackscan.engines.dependency_scanner.models import ScanResult
from stackscan.exceptions import InvalidPathError, QueueClosedError, ScanNotFoundError
from stackscan.jobs.models import ScanJob
from stackscan.jobs.queue import JobQueue
from stackscan.store.base import ScanStore

logger = structlog.get_logger(__name__)


class ScanService:
    """Stateless entry point for requesting scans and reading their status."""

    def __init__(self, store: ScanStore, queue: JobQueue) -> None:
        self._store = store
        self._queue = queue

    async def request_scan(
        self,
        project_id: uuid.UUID,
        project_name: str,
        path: str,
    ) -> ScanResult:
        """Persist a pending scan record and enqueue its job.

        Waits while the queue is full. Raises :class:`QueueClosedError` if
        the queue is closed; the record is then marked failed.
        """
        if not path or not path.strip():
            raise InvalidPathError("path must be provided")

        result = ScanResult(
            scan_id=uuid.uuid4(),
            project_id=project_id,
            project_name=project_name,
            project_path=path,
        )
        await self._store.save_result(result)

        try:
            await self._queue.enqueue(
                ScanJob(scan_id=result.scan_id, project_id=project_id, path=path)
            )
        except QueueClosedError:
            await self._store.save_result(result.mark_failed("queue closed"))
            raise

        logger.info(
            "scan.requested",
            scan_id=str(result.scan_id),
            project=project_name,
            path=path,
        )
        return result

    async def get_status(self, scan_id: uuid.UUID) -> ScanResult:
        """Raises :class:`ScanNotFoundError` if the scan does not exist."""
        result = await self._store.load_result(scan_id)
        if result is None:
            raise ScanNotFoundError(f"scan {scan_id} not found")
        return result
