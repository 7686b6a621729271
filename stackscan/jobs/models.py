"""Scan job — one unit of queued work."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ScanJob:
    """Request to scan ``path`` for the scan record ``scan_id``.

    ``attempt`` starts at 0 and grows by one on every requeue.
    """

    scan_id: uuid.UUID
    project_id: uuid.UUID
    path: str
    attempt: int = 0

    def next_attempt(self) -> ScanJob:
        return replace(self, attempt=self.attempt + 1)
