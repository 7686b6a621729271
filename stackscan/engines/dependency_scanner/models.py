"""Data models for the dependency scanner engine."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from stackscan.exceptions import InvalidTransitionError


@dataclass
class DependencyFinding:
    """A single dependency detected from a manifest file."""

    name: str
    version: str | None
    source_file: str
    detector: str
    is_outdated: bool = False
    latest_version: str | None = None

    def __post_init__(self) -> None:
        # Manifests without a version yield None, never "".
        if self.version is not None:
            self.version = self.version.strip() or None


class ScanStatus(str, enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ScanStatus.COMPLETED, ScanStatus.FAILED)


# running -> running is a retry attempt re-entering the pipeline.
_ALLOWED_TRANSITIONS: dict[ScanStatus, frozenset[ScanStatus]] = {
    ScanStatus.PENDING: frozenset({ScanStatus.RUNNING, ScanStatus.FAILED}),
    ScanStatus.RUNNING: frozenset(
        {ScanStatus.RUNNING, ScanStatus.COMPLETED, ScanStatus.FAILED}
    ),
    ScanStatus.COMPLETED: frozenset(),
    ScanStatus.FAILED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScanResult:
    """Aggregate of one scan of one project.

    Status changes go through :meth:`mark_running`, :meth:`mark_completed` and
    :meth:`mark_failed`, each of which returns a new instance and leaves the
    receiver untouched.
    """

    scan_id: uuid.UUID
    project_id: uuid.UUID
    project_name: str
    project_path: str
    status: ScanStatus = ScanStatus.PENDING
    started_at: datetime | None = None
    finished_at: datetime | None = None
    findings: list[DependencyFinding] = field(default_factory=list)
    insights: str | None = None
    error: str | None = None

    def _transition(self, target: ScanStatus, **changes) -> ScanResult:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(self.status.value, target.value)
        return replace(self, status=target, **changes)

    def mark_running(self) -> ScanResult:
        return self._transition(
            ScanStatus.RUNNING, started_at=_utcnow(), finished_at=None, error=None
        )

    def mark_completed(self, insights: str | None = None) -> ScanResult:
        return self._transition(
            ScanStatus.COMPLETED, finished_at=_utcnow(), insights=insights
        )

    def mark_failed(self, error: str) -> ScanResult:
        return self._transition(ScanStatus.FAILED, finished_at=_utcnow(), error=error)

    @property
    def outdated(self) -> list[DependencyFinding]:
        return [f for f in self.findings if f.is_outdated]
