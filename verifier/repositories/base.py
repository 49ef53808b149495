"""
Base repository.

Shared query helpers for ledger-store repositories. Writes flush
immediately so unique and check constraint violations are raised inside
the caller's transaction, where they can be told apart from other
failures.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from verifier.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Query helpers bound to one model and one session."""

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        self.model = model
        self.session = session

    def _select(self, **filters: Any) -> Select:
        """SELECT of the model narrowed by equality filters."""
        stmt = select(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)
        return stmt

    async def get_by_id(self, id: Any) -> ModelType | None:
        """Row by primary key, from the identity map when loaded."""
        return await self.session.get(self.model, id)

    async def get_by(self, **filters: Any) -> ModelType | None:
        """
        Single row matching the filters.

        Raises:
            MultipleResultsFound: If the filters are not selective
        """
        result = await self.session.execute(self._select(**filters))
        return result.scalar_one_or_none()

    async def find_by(self, **filters: Any) -> list[ModelType]:
        """All rows matching the filters, in primary key order."""
        stmt = self._select(**filters).order_by(
            *self.model.__mapper__.primary_key
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **values: Any) -> ModelType:
        """
        Insert a row and flush it.

        Returns:
            The new row with server-side defaults loaded

        Raises:
            IntegrityError: On constraint violation
        """
        row = self.model(**values)
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def count(self, **filters: Any) -> int:
        """Number of rows matching the filters."""
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)
        return (await self.session.execute(stmt)).scalar_one()
