"""ScanDAO — scans table operations."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stackscan.dao.base import BaseDAO
from stackscan.models.project import Project
from stackscan.models.scan import Scan


class ScanDAO(BaseDAO[Scan]):
    model = Scan

    async def get_with_project(
        self, session: AsyncSession, scan_id: uuid.UUID
    ) -> tuple[Scan, Project] | None:
        """Fetch a scan together with its owning project in one query."""
        self._require_pk(scan_id)
        stmt = (
            select(Scan, Project)
            .join(Project, Scan.project_id == Project.id)
            .where(Scan.id == scan_id)
        )
        row = (await session.execute(stmt)).first()
        if row is None:
            return None
        return row[0], row[1]
