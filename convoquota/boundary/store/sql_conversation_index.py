"""
SQLAlchemy-backed conversation index.

Dependencies: sqlalchemy, convoquota.boundary.db
System role: Durable per-account conversation list
"""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from convoquota.boundary.db.CRUD.conversation_crud import conversation_crud
from convoquota.boundary.db.models.conversation_model import ConversationModel
from convoquota.boundary.store.conversation_index import ConversationIndex, conversation_title
from convoquota.core.exceptions import StoreUnavailableError
from convoquota.core.session.records import ConversationRecord

logger = logging.getLogger(__name__)


def to_conversation_record(row: ConversationModel) -> ConversationRecord:
    """Convert a ConversationModel row into a ConversationRecord."""
    return ConversationRecord(
        id=str(row.id),
        account_id=row.account_id,
        session_id=row.session_id,
        title=row.title,
        last_message=row.last_message,
        message_count=row.message_count,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _parse_id(conversation_id: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(conversation_id)
    except ValueError:
        return None


class SqlConversationIndex(ConversationIndex):
    """Conversation index stored in the conversations table."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as db:
                yield db
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"{__name__}:{operation} - store error: {type(e).__name__}: {e}")
            raise StoreUnavailableError(
                "Conversation index unavailable",
                operation=operation,
                details={"error_type": type(e).__name__},
            ) from e

    async def record_exchange(
        self,
        account_id: str,
        session_id: str,
        question: str,
    ) -> ConversationRecord:
        record = await self._bump(account_id, session_id, question)
        if record is not None:
            return record

        try:
            async with self._transaction("record_exchange") as db:
                row = await conversation_crud.create(
                    db,
                    account_id=account_id,
                    session_id=session_id,
                    title=conversation_title(question),
                    last_message=question,
                    message_count=1,
                )
                return to_conversation_record(row)
        except StoreUnavailableError as e:
            if not isinstance(e.__cause__, IntegrityError):
                raise

        # A concurrent first exchange inserted the row between our update and insert
        record = await self._bump(account_id, session_id, question)
        if record is None:
            raise StoreUnavailableError("Conversation vanished after concurrent create", operation="record_exchange")
        return record

    async def _bump(self, account_id: str, session_id: str, question: str) -> ConversationRecord | None:
        async with self._transaction("record_exchange") as db:
            if not await conversation_crud.record_message(db, account_id, session_id, question):
                return None
            row = await conversation_crud.get_for_session(db, account_id, session_id)
            return to_conversation_record(row)

    async def list_for_account(self, account_id: str, limit: int = 50) -> list[ConversationRecord]:
        async with self._transaction("list_for_account") as db:
            rows = await conversation_crud.get_for_account(db, account_id, limit=limit)
            return [to_conversation_record(row) for row in rows]

    async def get(self, account_id: str, conversation_id: str) -> ConversationRecord | None:
        parsed = _parse_id(conversation_id)
        if parsed is None:
            return None
        async with self._transaction("get_conversation") as db:
            row = await conversation_crud.get_by_id(db, parsed)
            if row is None or row.account_id != account_id:
                return None
            return to_conversation_record(row)

    async def delete(self, account_id: str, conversation_id: str) -> bool:
        parsed = _parse_id(conversation_id)
        if parsed is None:
            return False
        async with self._transaction("delete_conversation") as db:
            row = await conversation_crud.get_by_id(db, parsed)
            if row is None or row.account_id != account_id:
                return False
            return await conversation_crud.delete_by_id(db, parsed)
