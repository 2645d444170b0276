"""
In-process conversation index.

Dependencies: asyncio, convoquota.boundary.store
System role: Single-process per-account conversation list
"""

import asyncio
import uuid

from convoquota.boundary.store.conversation_index import ConversationIndex, conversation_title
from convoquota.core.session.records import ConversationRecord, utc_now


class InMemoryConversationIndex(ConversationIndex):
    """Conversation index kept in a dict keyed by conversation id."""

    def __init__(self) -> None:
        self._conversations: dict[str, ConversationRecord] = {}
        self._lock = asyncio.Lock()

    async def record_exchange(
        self,
        account_id: str,
        session_id: str,
        question: str,
    ) -> ConversationRecord:
        async with self._lock:
            for conversation in self._conversations.values():
                if conversation.account_id == account_id and conversation.session_id == session_id:
                    updated = ConversationRecord(
                        id=conversation.id,
                        account_id=account_id,
                        session_id=session_id,
                        title=conversation.title,
                        last_message=question,
                        message_count=conversation.message_count + 1,
                        created_at=conversation.created_at,
                        updated_at=utc_now(),
                    )
                    self._conversations[conversation.id] = updated
                    return updated

            now = utc_now()
            created = ConversationRecord(
                id=str(uuid.uuid4()),
                account_id=account_id,
                session_id=session_id,
                title=conversation_title(question),
                last_message=question,
                message_count=1,
                created_at=now,
                updated_at=now,
            )
            self._conversations[created.id] = created
            return created

    async def list_for_account(self, account_id: str, limit: int = 50) -> list[ConversationRecord]:
        owned = [item for item in self._conversations.values() if item.account_id == account_id]
        owned.sort(key=lambda item: item.updated_at, reverse=True)
        return owned[:limit]

    async def get(self, account_id: str, conversation_id: str) -> ConversationRecord | None:
        conversation = self._conversations.get(conversation_id)
        if conversation is None or conversation.account_id != account_id:
            return None
        return conversation

    async def delete(self, account_id: str, conversation_id: str) -> bool:
        async with self._lock:
            if await self.get(account_id, conversation_id) is None:
                return False
            del self._conversations[conversation_id]
            return True
