"""TechnologyFindingDAO — technology_findings table operations."""

import uuid
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from stackscan.dao.base import BaseDAO
from stackscan.models.technology_finding import TechnologyFinding


class TechnologyFindingDAO(BaseDAO[TechnologyFinding]):
    model = TechnologyFinding

    async def list_by_scan(
        self, session: AsyncSession, scan_id: uuid.UUID
    ) -> list[TechnologyFinding]:
        """Findings of a scan in the order they were detected."""
        stmt = (
            select(TechnologyFinding)
            .where(TechnologyFinding.scan_id == scan_id)
            .order_by(TechnologyFinding.position)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_scan(self, session: AsyncSession, scan_id: uuid.UUID) -> int:
        """Remove every finding of a scan. Returns the number of rows deleted."""
        stmt = delete(TechnologyFinding).where(TechnologyFinding.scan_id == scan_id)
        result = await session.execute(stmt)
        return result.rowcount

    async def replace_for_scan(
        self,
        session: AsyncSession,
        scan_id: uuid.UUID,
        items: list[dict[str, Any]],
    ) -> list[TechnologyFinding]:
        """Swap the scan's findings for *items*, keeping their order."""
        await self.delete_by_scan(session, scan_id)
        if not items:
            return []
        rows = [{**vals, "scan_id": scan_id, "position": i} for i, vals in enumerate(items)]
        return await self.bulk_create(session, rows)
