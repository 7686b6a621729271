"""ScanStore — persistence interface used by the worker pool and service."""

from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from stackscan.engines.dependency_scanner.models import DependencyFinding, ScanResult


@runtime_checkable
class ScanStore(Protocol):
    """Load and save scan records and their findings.

    ``save_findings`` replaces whatever findings the scan already has.
    """

    async def load_result(self, scan_id: uuid.UUID) -> ScanResult | None: ...

    async def save_result(self, result: ScanResult) -> None: ...

    async def save_findings(
        self, scan_id: uuid.UUID, findings: list[DependencyFinding]
    ) -> None: ...

    async def clear_findings(self, scan_id: uuid.UUID) -> None: ...
