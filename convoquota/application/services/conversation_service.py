"""
Conversation service.

Lists, reads and deletes the conversations of a linked account. Reading a
conversation returns the full exchange log of its session.

Dependencies: convoquota.boundary.store
System role: Conversation history use cases for linked accounts
"""

from dataclasses import asdict

from convoquota.boundary.store.conversation_index import ConversationIndex
from convoquota.boundary.store.session_store import SessionStore
from convoquota.core.exceptions import ConversationNotFoundError

CONVERSATION_LIST_LIMIT = 50


class ConversationService:
    """Conversation list operations scoped to one account."""

    def __init__(self, store: SessionStore, conversation_index: ConversationIndex) -> None:
        self.store = store
        self.conversation_index = conversation_index

    async def list_conversations(self, account_id: str) -> list[dict]:
        """Return the account's 50 most recently updated conversations."""
        conversations = await self.conversation_index.list_for_account(
            account_id,
            limit=CONVERSATION_LIST_LIMIT,
        )
        return [asdict(conversation) for conversation in conversations]

    async def get_conversation(self, account_id: str, conversation_id: str) -> dict:
        """
        Return a conversation with its exchanges, oldest first.

        Raises:
            ConversationNotFoundError: Missing or owned by another account
        """
        conversation = await self.conversation_index.get(account_id, conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        exchanges = await self.store.list_exchanges(conversation.session_id)
        return {
            "conversation": asdict(conversation),
            "exchanges": [asdict(exchange) for exchange in exchanges],
        }

    async def delete_conversation(self, account_id: str, conversation_id: str) -> None:
        """
        Remove a conversation from the account's list.

        The session and its exchange records are kept.

        Raises:
            ConversationNotFoundError: Missing or owned by another account
        """
        deleted = await self.conversation_index.delete(account_id, conversation_id)
        if not deleted:
            raise ConversationNotFoundError(conversation_id)
