"""
Exchange CRUD operations.

Dependencies: sqlalchemy, convoquota.boundary.db.models
System role: Exchange audit log persistence
"""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from convoquota.boundary.db.CRUD.base_crud import BaseCRUD
from convoquota.boundary.db.models.exchange_model import ExchangeModel


class ExchangeCRUD(BaseCRUD[ExchangeModel]):
    """CRUD operations for ExchangeModel."""

    def __init__(self) -> None:
        super().__init__(ExchangeModel)

    async def get_by_session(self, session: AsyncSession, session_id: str) -> Sequence[ExchangeModel]:
        """Retrieve all exchanges for a session, oldest first."""
        return await self.list_where(
            session,
            ExchangeModel.session_id == session_id,
            order_by=ExchangeModel.created_at.asc(),
        )


exchange_crud = ExchangeCRUD()
