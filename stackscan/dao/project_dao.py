"""ProjectDAO — projects table operations."""

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from stackscan.dao.base import BaseDAO
from stackscan.models.project import Project


class ProjectDAO(BaseDAO[Project]):
    model = Project

    async def ensure(
        self,
        session: AsyncSession,
        project_id: uuid.UUID,
        name: str,
        path: str,
    ) -> Project:
        """Return the project row, creating it on first sight."""
        project, _ = await self.upsert(session, project_id, name=name, path=path)
        return project

    async def record_scan_outcome(
        self,
        session: AsyncSession,
        project_id: uuid.UUID,
        *,
        insights: str | None,
        scanned_at: datetime | None,
    ) -> Project | None:
        """Copy the latest completed scan's insights onto the project."""
        return await self.update(
            session, project_id, ai_insights=insights, last_scanned_at=scanned_at
        )
