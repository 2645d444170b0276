"""
Base CRUD operations for SQLAlchemy models.

Generic insert, primary-key lookup, filtered listing and conditional
update. Conditional updates report whether exactly one row matched, which
is how callers detect lost compare-and-swap races.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from convoquota.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Insert a row and load server-generated values.

        Raises:
            IntegrityError: Primary key or unique constraint already taken
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: Any) -> ModelT | None:
        return await session.get(self.model, id)

    async def first_where(
        self,
        session: AsyncSession,
        *criteria: ColumnElement[bool],
    ) -> ModelT | None:
        """Return the single row matching all criteria, or None."""
        result = await session.execute(select(self.model).where(*criteria))
        return result.scalar_one_or_none()

    async def list_where(
        self,
        session: AsyncSession,
        *criteria: ColumnElement[bool],
        order_by: Any = None,
        limit: int | None = None,
    ) -> Sequence[ModelT]:
        """
        Return rows matching all criteria.

        Args:
            session: Async database session
            *criteria: WHERE clauses, ANDed together
            order_by: Optional ORDER BY clause
            limit: Optional row cap
        """
        stmt = select(self.model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_where(
        self,
        session: AsyncSession,
        *criteria: ColumnElement[bool],
        **values: Any,
    ) -> bool:
        """
        Apply `values` to rows matching all criteria in one UPDATE.

        Returns:
            True if exactly one row was updated
        """
        stmt = (
            update(self.model)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1

    async def delete_by_id(self, session: AsyncSession, id: Any) -> bool:
        """Delete a row by primary key; False if it did not exist."""
        stmt = delete(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.rowcount > 0
