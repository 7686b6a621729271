"""OutdatedChecker — annotate findings with the latest published version."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.outdated_checker.registry_client import (
    DEFAULT_TIMEOUT,
    SUPPORTED_ECOSYSTEMS,
    RegistryClient,
    RegistryQuery,
)
from stackscan.engines.outdated_checker.versions import is_outdated

log = structlog.get_logger("stackscan.engine")


class OutdatedChecker:
    """Concurrent latest-version lookups, one per eligible finding.

    Each lookup has its own timeout and its own failure handling: a
    registry error leaves that finding untouched and never reaches the
    caller.
    """

    def __init__(self, client: RegistryClient, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._client = client
        self._timeout = timeout

    async def check_all(self, findings: Iterable[DependencyFinding]) -> None:
        """Set ``latest_version`` / ``is_outdated`` in place on each finding."""
        targets = [f for f in findings if self.is_checkable(f)]
        if not targets:
            return

        await asyncio.gather(*(self._check_one(f) for f in targets))
        log.info(
            "outdated.batch_done",
            checked=len(targets),
            annotated=sum(1 for f in targets if f.latest_version is not None),
            outdated=sum(1 for f in targets if f.is_outdated),
        )

    @staticmethod
    def is_checkable(finding: DependencyFinding) -> bool:
        return bool(finding.version) and finding.detector.lower() in SUPPORTED_ECOSYSTEMS

    async def _check_one(self, finding: DependencyFinding) -> None:
        query = RegistryQuery(finding.detector.lower(), finding.name)
        try:
            latest = await asyncio.wait_for(
                self._client.latest_version(query, self._timeout), timeout=self._timeout
            )
        except Exception as exc:
            log.warning(
                "outdated.lookup_failed",
                package=finding.name,
                ecosystem=query.ecosystem,
                source_file=finding.source_file,
                error=str(exc) or type(exc).__name__,
            )
            return

        if latest is None:
            return
        finding.latest_version = latest
        finding.is_outdated = is_outdated(finding.version or "", latest)
