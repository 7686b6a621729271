"""Scan job queue."""

from stackscan.jobs.models import ScanJob
from stackscan.jobs.queue import JobQueue

__all__ = ["JobQueue", "ScanJob"]
