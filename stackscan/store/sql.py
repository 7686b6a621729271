"""ScanStore backed by SQLAlchemy async sessions and the DAO layer."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stackscan.dao.project_dao import ProjectDAO
from stackscan.dao.scan_dao import ScanDAO
from stackscan.dao.technology_finding_dao import TechnologyFindingDAO
from stackscan.engines.dependency_scanner.models import (
    DependencyFinding,
    ScanResult,
    ScanStatus,
)
from stackscan.models.technology_finding import TechnologyFinding

log = structlog.get_logger("stackscan.store")


def _finding_from_row(row: TechnologyFinding) -> DependencyFinding:
    return DependencyFinding(
        name=row.name,
        version=row.version,
        source_file=row.source_file or "",
        detector=row.detector or "",
        is_outdated=row.is_outdated,
        latest_version=row.latest_version,
    )


def _finding_to_values(finding: DependencyFinding) -> dict:
    return {
        "name": finding.name,
        "version": finding.version,
        "source_file": finding.source_file,
        "detector": finding.detector,
        "is_outdated": finding.is_outdated,
        "latest_version": finding.latest_version,
    }


class SqlScanStore:
    """One session per call, committed before returning."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        project_dao: ProjectDAO | None = None,
        scan_dao: ScanDAO | None = None,
        finding_dao: TechnologyFindingDAO | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._project_dao = project_dao or ProjectDAO()
        self._scan_dao = scan_dao or ScanDAO()
        self._finding_dao = finding_dao or TechnologyFindingDAO()

    async def load_result(self, scan_id: uuid.UUID) -> ScanResult | None:
        async with self._session_factory() as session:
            pair = await self._scan_dao.get_with_project(session, scan_id)
            if pair is None:
                return None
            scan, project = pair
            rows = await self._finding_dao.list_by_scan(session, scan_id)

        return ScanResult(
            scan_id=scan.id,
            project_id=project.id,
            project_name=project.name,
            project_path=project.path,
            status=ScanStatus(scan.status),
            started_at=scan.started_at,
            finished_at=scan.finished_at,
            findings=[_finding_from_row(r) for r in rows],
            insights=scan.insights,
            error=scan.error,
        )

    async def save_result(self, result: ScanResult) -> None:
        values = {
            "status": result.status.value,
            "started_at": result.started_at,
            "finished_at": result.finished_at,
            "insights": result.insights,
            "error": result.error,
        }
        async with self._session_factory() as session:
            await self._project_dao.ensure(
                session, result.project_id, result.project_name, result.project_path
            )
            await self._scan_dao.upsert(
                session, result.scan_id, project_id=result.project_id, **values
            )

            if result.status is ScanStatus.COMPLETED:
                await self._project_dao.record_scan_outcome(
                    session,
                    result.project_id,
                    insights=result.insights,
                    scanned_at=result.finished_at,
                )
            await session.commit()

        log.debug("store.result_saved", scan_id=str(result.scan_id), status=result.status.value)

    async def save_findings(
        self, scan_id: uuid.UUID, findings: list[DependencyFinding]
    ) -> None:
        async with self._session_factory() as session:
            await self._finding_dao.replace_for_scan(
                session, scan_id, [_finding_to_values(f) for f in findings]
            )
            await session.commit()

    async def clear_findings(self, scan_id: uuid.UUID) -> None:
        async with self._session_factory() as session:
            await self._finding_dao.delete_by_scan(session, scan_id)
            await session.commit()
