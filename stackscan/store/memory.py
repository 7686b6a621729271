"""In-memory ScanStore for the command line and tests."""

from __future__ import annotations

import asyncio
import copy
import uuid
from dataclasses import replace

from stackscan.engines.dependency_scanner.models import DependencyFinding, ScanResult


class InMemoryScanStore:
    """Dict-backed store. Records are copied in and out."""

    def __init__(self) -> None:
        self._results: dict[uuid.UUID, ScanResult] = {}
        self._lock = asyncio.Lock()

    async def load_result(self, scan_id: uuid.UUID) -> ScanResult | None:
        async with self._lock:
            result = self._results.get(scan_id)
            return copy.deepcopy(result) if result is not None else None

    async def save_result(self, result: ScanResult) -> None:
        async with self._lock:
            existing = self._results.get(result.scan_id)
            # Findings are owned by save_findings / clear_findings.
            findings = existing.findings if existing is not None else list(result.findings)
            self._results[result.scan_id] = replace(
                copy.deepcopy(result), findings=copy.deepcopy(findings)
            )

    async def save_findings(
        self, scan_id: uuid.UUID, findings: list[DependencyFinding]
    ) -> None:
        async with self._lock:
            result = self._results.get(scan_id)
            if result is None:
                raise KeyError(f"scan {scan_id} not found")
            result.findings = copy.deepcopy(list(findings))

    async def clear_findings(self, scan_id: uuid.UUID) -> None:
        async with self._lock:
            result = self._results.get(scan_id)
            if result is not None:
                result.findings = []

    async def all_results(self) -> list[ScanResult]:
        async with self._lock:
            return [copy.deepcopy(r) for r in self._results.values()]
