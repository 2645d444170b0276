"""
Conversation CRUD operations.

Dependencies: sqlalchemy, convoquota.boundary.db.models
System role: Per-account conversation index persistence
"""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from convoquota.boundary.db.CRUD.base_crud import BaseCRUD
from convoquota.boundary.db.models.conversation_model import ConversationModel
from convoquota.core.session.records import utc_now


class ConversationCRUD(BaseCRUD[ConversationModel]):
    """CRUD operations for ConversationModel."""

    def __init__(self) -> None:
        super().__init__(ConversationModel)

    async def get_for_session(
        self,
        session: AsyncSession,
        account_id: str,
        session_id: str,
    ) -> ConversationModel | None:
        """Retrieve the account's conversation for a session."""
        return await self.first_where(
            session,
            ConversationModel.account_id == account_id,
            ConversationModel.session_id == session_id,
        )

    async def record_message(
        self,
        session: AsyncSession,
        account_id: str,
        session_id: str,
        message: str,
    ) -> bool:
        """
        Bump message_count and set last_message in a single UPDATE.

        The increment is computed by the database, so concurrent calls never
        overwrite each other.

        Returns:
            True if the conversation exists and was updated
        """
        return await self.update_where(
            session,
            ConversationModel.account_id == account_id,
            ConversationModel.session_id == session_id,
            last_message=message,
            message_count=ConversationModel.message_count + 1,
            updated_at=utc_now(),
        )

    async def get_for_account(
        self,
        session: AsyncSession,
        account_id: str,
        limit: int = 50,
    ) -> Sequence[ConversationModel]:
        """
        Retrieve an account's conversations, most recently updated first.

        Args:
            session: Async database session
            account_id: Owning account
            limit: Maximum rows to return
        """
        return await self.list_where(
            session,
            ConversationModel.account_id == account_id,
            order_by=ConversationModel.updated_at.desc(),
            limit=limit,
        )


conversation_crud = ConversationCRUD()
