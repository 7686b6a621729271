"""BaseDAO — keyed row access shared by the projects, scans and findings DAOs."""

import uuid
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from stackscan.core.database import Base

ModelT = TypeVar("ModelT", bound=Base)

# Set by the database or TimestampMixin, never by callers.
_MANAGED_COLUMNS = frozenset({"id", "created_at", "updated_at"})


class BaseDAO(Generic[ModelT]):
    """Rows keyed by a UUID ``id``. Subclasses set ``model``.

    Nothing here commits: the caller owns the session and its transaction.
    """

    model: type[ModelT]

    @staticmethod
    def _require_pk(pk: uuid.UUID) -> None:
        if pk is None:
            raise ValueError("pk must not be None")

    def _check_writable(self, values: dict[str, Any]) -> None:
        columns = self.model.__mapper__.column_attrs.keys()
        for key in values:
            if key in _MANAGED_COLUMNS:
                raise AttributeError(f"'{key}' is immutable and cannot be updated")
            if key not in columns:
                raise AttributeError(f"{self.model.__name__} has no column '{key}'")

    async def get_by_id(self, session: AsyncSession, pk: uuid.UUID) -> ModelT | None:
        self._require_pk(pk)
        return await session.get(self.model, pk)

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        """Insert one row and reload it so server defaults are populated."""
        obj = self.model(**values)
        session.add(obj)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def bulk_create(self, session: AsyncSession, items: list[dict[str, Any]]) -> list[ModelT]:
        # single flush; server defaults stay unloaded
        objs = [self.model(**vals) for vals in items]
        session.add_all(objs)
        await session.flush()
        return objs

    async def update(self, session: AsyncSession, pk: uuid.UUID, **values: Any) -> ModelT | None:
        """Set *values* on the row with *pk*. None when the row does not exist."""
        self._require_pk(pk)
        self._check_writable(values)
        obj = await session.get(self.model, pk)
        if obj is None:
            return None
        changed = False
        for key, val in values.items():
            if getattr(obj, key) != val:
                setattr(obj, key, val)
                changed = True
        if changed:
            await session.flush()
            await session.refresh(obj)
        return obj

    async def upsert(
        self, session: AsyncSession, pk: uuid.UUID, **values: Any
    ) -> tuple[ModelT, bool]:
        """Update the row with *pk*, or create it. Returns ``(row, created)``.

        Scan records are written repeatedly as they move through their
        states, and the first write has to create them.
        """
        obj = await self.update(session, pk, **values)
        if obj is not None:
            return obj, False
        return await self.create(session, id=pk, **values), True
